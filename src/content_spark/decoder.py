"""
Decoding of generative API responses into the content model.

The raw response is expected to be JSON matching either the website SEO
shape or the social post shape, optionally wrapped in Markdown code
fences. The content type discriminant is checked before any field is
looked at, and every failure surfaces as a MALFORMED_RESPONSE
GenerationError.

When the user supplied a source URL, extraction from that URL is best
effort, so a few missing fields are replaced with placeholders instead
of failing the whole generation.
"""

import json
import logging
import re
from typing import Any, Optional, Union

from .errors import GenerationError, GenerationErrorKind
from .models import (
    MAX_HEADING_LEVEL,
    MIN_HEADING_LEVEL,
    SOCIAL_OPTIONAL_SECTIONS,
    BlockKind,
    ContentType,
    DescriptionBlock,
    GeneratedContent,
    SeoDocument,
    SocialPost,
)

logger = logging.getLogger(__name__)


FENCE_PATTERN = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

PLACEHOLDER_DESCRIPTION = "Product description could not be generated from the provided information."
PLACEHOLDER_INTRO = "Content could not be generated from the provided information."
# Blocks carrying this phrase are the model's own report of a failed URL extraction
RETRIEVAL_SENTINEL = "could not be retrieved"


def strip_code_fences(text: str) -> str:
    """
    Remove a surrounding Markdown code fence, if present.

    Args:
        text: Raw response text.

    Returns:
        The fenced body, or the trimmed text when there is no fence.
    """
    text = text.strip()
    match = FENCE_PATTERN.match(text)
    if match and match.group(2):
        return match.group(2).strip()
    return text


def _malformed(message: str) -> GenerationError:
    return GenerationError(GenerationErrorKind.MALFORMED_RESPONSE, message)


def parse_content_type(value: Union[str, ContentType]) -> ContentType:
    """Validate a content type discriminant."""
    if isinstance(value, ContentType):
        return value
    try:
        return ContentType(value)
    except ValueError:
        raise _malformed(
            f"Unknown content type '{value}'. Expected 'website' or 'social'."
        ) from None


def _string_list(payload: dict, key: str, required: bool = False) -> tuple[str, ...]:
    value = payload.get(key)
    if value is None and not required:
        return ()
    if not isinstance(value, list):
        raise _malformed(f"Received malformed JSON structure: '{key}' must be a list.")
    if not all(isinstance(item, str) for item in value):
        raise _malformed(f"Received malformed JSON structure: '{key}' must contain only strings.")
    return tuple(value)


def _string_field(payload: dict, key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _malformed(f"Received malformed JSON structure: '{key}' must be a string.")
    return value


def _decode_block(raw: Any, index: int, source_url: Optional[str]) -> DescriptionBlock:
    if not isinstance(raw, dict):
        raise _malformed(f"Invalid block in SEO description (index {index}): block must be an object.")

    kind_value = raw.get("type")
    content = raw.get("content")
    valid_kind = kind_value in (BlockKind.HEADING.value, BlockKind.PARAGRAPH.value)

    if not valid_kind or not isinstance(content, str):
        if source_url and isinstance(content, str) and RETRIEVAL_SENTINEL in content:
            logger.warning(f"Keeping retrieval notice at block {index} as a paragraph")
            return DescriptionBlock.paragraph(content)
        raise _malformed(
            f"Invalid block in SEO description (index {index}): type or content is missing/invalid."
        )

    kind = BlockKind(kind_value)
    if kind == BlockKind.PARAGRAPH:
        return DescriptionBlock.paragraph(content)

    level = raw.get("level")
    if level is not None and (
        not isinstance(level, int)
        or isinstance(level, bool)
        or not MIN_HEADING_LEVEL <= level <= MAX_HEADING_LEVEL
    ):
        logger.warning(f"Heading level {level!r} at block {index} out of range, using default")
        level = None
    return DescriptionBlock.heading(content, level)


def decode_seo_document(payload: dict, source_url: Optional[str] = None) -> SeoDocument:
    """
    Decode a website SEO payload.

    Args:
        payload: Parsed JSON object.
        source_url: Source URL the user supplied, if any.

    Returns:
        The decoded SeoDocument with a non-empty sections tuple.

    Raises:
        GenerationError: MALFORMED_RESPONSE when required fields are missing.
    """
    if not payload.get("productTitle"):
        logger.warning(f"productTitle is missing or empty. URL was primary source: {bool(source_url)}")

    raw_sections = payload.get("seoDescription")
    if not isinstance(raw_sections, list) or not raw_sections:
        logger.warning(f"seoDescription is missing or empty. URL was primary source: {bool(source_url)}")
        if not source_url:
            raise _malformed("Received incomplete SEO content: seoDescription is missing/empty.")
        raw_sections = [{"type": BlockKind.PARAGRAPH.value, "content": PLACEHOLDER_DESCRIPTION}]

    sections = tuple(
        _decode_block(raw, index, source_url) for index, raw in enumerate(raw_sections)
    )

    return SeoDocument(
        product_title=_string_field(payload, "productTitle"),
        sections=sections,
        h1_headings=_string_list(payload, "h1Headings"),
        broad_match_keywords=_string_list(payload, "broadMatchKeywords"),
        meta_title=_string_field(payload, "metaTitle"),
        meta_description=_string_field(payload, "metaDescription"),
    )


def decode_social_post(payload: dict, source_url: Optional[str] = None) -> SocialPost:
    """
    Decode a social post payload.

    Args:
        payload: Parsed JSON object.
        source_url: Source URL the user supplied, if any.

    Returns:
        The decoded SocialPost.

    Raises:
        GenerationError: MALFORMED_RESPONSE when required fields are missing.
    """
    if not payload.get("title"):
        logger.warning(f"title is missing or empty. URL was primary source: {bool(source_url)}")

    intro = payload.get("intro")
    if not intro:
        logger.warning(f"intro is missing. URL was primary source: {bool(source_url)}")
        if not source_url:
            raise _malformed("Received incomplete social media post: intro is missing.")
        intro = PLACEHOLDER_INTRO
    elif not isinstance(intro, str):
        raise _malformed("Received malformed JSON structure: 'intro' must be a string.")

    call_to_action = payload.get("callToAction")
    if not call_to_action or not isinstance(call_to_action, str) or not isinstance(payload.get("hashtags"), list):
        logger.error(f"Malformed social media post structure: {payload}")
        raise _malformed(
            "Received incomplete or malformed JSON structure for social media post "
            "from API (callToAction or hashtags)."
        )

    optional = {attr: _string_field(payload, key) or None for attr, key in SOCIAL_OPTIONAL_SECTIONS}

    return SocialPost(
        title=_string_field(payload, "title"),
        intro=intro,
        call_to_action=call_to_action,
        hashtags=_string_list(payload, "hashtags", required=True),
        **optional,
    )


def decode_generated_content(
    raw_text: str,
    content_type: Union[str, ContentType],
    source_url: Optional[str] = None,
) -> GeneratedContent:
    """
    Decode a raw generative API response.

    Args:
        raw_text: Response text, optionally fenced.
        content_type: "website" or "social".
        source_url: Source URL the user supplied, if any. Enables the
            placeholder leniency for missing fields.

    Returns:
        GeneratedContent tagged with the content type.

    Raises:
        GenerationError: MALFORMED_RESPONSE on unknown content type, invalid
            JSON, or missing required fields.
    """
    kind = parse_content_type(content_type)
    source_url = source_url.strip() if source_url else None
    body = strip_code_fences(raw_text)

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        logger.error(f"Problematic JSON string that failed to parse for type {kind.value}: {body}")
        raise _malformed(
            f"Failed to parse JSON response from API: {e}. The API might have returned "
            "an invalid JSON. This can happen if the AI struggles with the provided URL."
        ) from e

    if not isinstance(payload, dict):
        raise _malformed("Received malformed JSON structure: expected a JSON object.")

    if kind == ContentType.WEBSITE:
        return GeneratedContent.seo(decode_seo_document(payload, source_url))
    return GeneratedContent.social(decode_social_post(payload, source_url))


def decode_saved_content(data: dict) -> GeneratedContent:
    """
    Decode a saved {"type": ..., "data": {...}} envelope.

    This is the shape produced by GeneratedContent.to_dict(). Saved
    results are decoded strictly, without the source URL leniency.
    """
    if not isinstance(data, dict) or not isinstance(data.get("data"), dict):
        raise _malformed("Saved content must be an object with 'type' and 'data' keys.")
    kind = parse_content_type(data.get("type", ""))
    if kind == ContentType.WEBSITE:
        return GeneratedContent.seo(decode_seo_document(data["data"]))
    return GeneratedContent.social(decode_social_post(data["data"]))
