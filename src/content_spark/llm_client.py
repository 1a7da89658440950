"""
Generation client for product content.

This module calls the Anthropic Messages API with a prompt built from
the user's inputs, decodes the structured JSON response into the content
model, and maps every failure onto the GenerationError taxonomy.
"""

import logging
from typing import Optional, Union

import anthropic
import httpx

from .config import GeneratorConfig
from .decoder import decode_generated_content
from .errors import GenerationError, GenerationErrorKind
from .models import (
    ContentType,
    GeneratedContent,
    GenerationRequest,
    ImageData,
    LanguageStyle,
)
from .prompts import build_prompt
from .source_fetcher import SourceFetchError, SourcePage, fetch_source_page

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You write product copy for an online K-Beauty shop. "
    "Respond with a single valid JSON object and nothing else."
)

# Failure text that points at a bad or unauthorized credential
AUTH_ERROR_PHRASES = ("api key", "permission denied", "forbidden")
AUTH_STATUS_MARKERS = ("400", "401", "403")


def is_auth_error_message(message: str) -> bool:
    """
    Check whether failure text describes a credential problem.

    Args:
        message: Error message text.

    Returns:
        True for authentication-related phrases, or an HTTP response
        failure carrying a 400/401/403 status.
    """
    lowered = message.lower()
    if any(phrase in lowered for phrase in AUTH_ERROR_PHRASES):
        return True
    return "http response" in lowered and any(code in message for code in AUTH_STATUS_MARKERS)


def classify_error(error: Exception) -> GenerationError:
    """Map an exception raised during generation onto the error taxonomy."""
    if isinstance(error, GenerationError):
        return error
    if isinstance(
        error, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)
    ) or is_auth_error_message(str(error)):
        return GenerationError(
            GenerationErrorKind.AUTH,
            f"API Key Error: {error}. Please check your API key and its permissions.",
        )
    return GenerationError(
        GenerationErrorKind.TRANSPORT,
        f"Failed to generate content: {error}. If using a URL, it might be "
        "inaccessible or difficult for the AI to process.",
    )


def _image_block(image: ImageData) -> dict:
    return {
        "type": "image",
        "source": {
            "type": "base64",
            "media_type": image.mime_type,
            "data": image.base64,
        },
    }


def _response_text(response) -> str:
    """Join the text blocks of a Messages API response."""
    return "".join(
        block.text for block in response.content if getattr(block, "type", "text") == "text"
    )


class ContentGenerator:
    """
    Client for generating product content.

    Supports the Anthropic Messages API.
    """

    def __init__(
        self,
        api_key: Optional[str],
        config: Optional[GeneratorConfig] = None,
        client=None,
    ):
        """
        Initialize the generator.

        Args:
            api_key: Anthropic API key.
            config: Generation settings. Defaults to GeneratorConfig().
            client: Pre-built Anthropic client. Built from api_key if None.

        Raises:
            GenerationError: AUTH if no API key is provided.
        """
        self.api_key = api_key
        self.config = config or GeneratorConfig()

        if not self.api_key:
            raise GenerationError(
                GenerationErrorKind.AUTH,
                "API Key is missing. Please configure the API Key.",
            )

        if client is None:
            client = anthropic.Anthropic(
                api_key=self.api_key,
                timeout=httpx.Timeout(self.config.request_timeout, connect=self.config.connect_timeout),
            )
        self.client = client

    def fetch_source(self, request: GenerationRequest) -> Optional[SourcePage]:
        """
        Fetch the request's source URL, if any.

        Raises:
            GenerationError: TRANSPORT if the URL cannot be fetched.
        """
        if not request.has_source_url:
            return None
        try:
            return fetch_source_page(
                request.source_url,
                timeout=self.config.fetch_timeout,
                max_chars=self.config.max_source_chars,
            )
        except SourceFetchError as e:
            raise GenerationError(
                GenerationErrorKind.TRANSPORT,
                f"Failed to generate content: {e}. The product source URL might be inaccessible.",
            ) from e

    def build_messages(self, request: GenerationRequest, source: Optional[SourcePage]) -> list[dict]:
        """Build the Messages API payload for a request."""
        prompt = build_prompt(request, source, self.config)
        content: list[dict] = [{"type": "text", "text": prompt}]
        if request.image:
            content.append(_image_block(request.image))
        return [{"role": "user", "content": content}]

    def complete(self, messages: list[dict]) -> str:
        """Send messages to the API and return the response text."""
        response = self.client.messages.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            system=SYSTEM_PROMPT,
            messages=messages,
        )
        return _response_text(response)

    def generate(self, request: GenerationRequest) -> GeneratedContent:
        """
        Generate content for a request.

        Args:
            request: The user's inputs.

        Returns:
            Decoded GeneratedContent tagged with the request's content type.

        Raises:
            GenerationError: AUTH, MALFORMED_RESPONSE or TRANSPORT.
        """
        source = self.fetch_source(request)
        messages = self.build_messages(request, source)

        try:
            raw_text = self.complete(messages)
        except Exception as e:
            logger.error(f"Error calling the generative API: {e}")
            raise classify_error(e) from e

        source_url = request.source_url if request.has_source_url else None
        return decode_generated_content(raw_text, request.content_type, source_url)


def _as_enum(enum_cls, value, label: str):
    """Convert a caller-supplied option to its enum member."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        expected = ", ".join(repr(member.value) for member in enum_cls)
        raise ValueError(f"Unknown {label} '{value}'. Expected one of: {expected}") from None


def generate(
    credentials: Optional[str],
    content_type: Union[str, ContentType],
    product_name: str,
    product_details: str,
    image: Optional[ImageData] = None,
    language_style: Union[str, LanguageStyle] = LanguageStyle.BANGLISH,
    source_url: Optional[str] = None,
    config: Optional[GeneratorConfig] = None,
) -> GeneratedContent:
    """
    Generate website SEO copy or a social media post.

    Args:
        credentials: Anthropic API key.
        content_type: "website" or "social".
        product_name: Product name, may be empty.
        product_details: Free-text product details, may be empty.
        image: Optional product image.
        language_style: Language of a social post's text fields.
        source_url: Optional product source URL.
        config: Generation settings.

    Returns:
        GeneratedContent.

    Raises:
        ValueError: If content_type or language_style is not recognized.
        GenerationError: AUTH, MALFORMED_RESPONSE or TRANSPORT.
    """
    request = GenerationRequest(
        content_type=_as_enum(ContentType, content_type, "content type"),
        product_name=product_name or "",
        product_details=product_details or "",
        image=image,
        language_style=_as_enum(LanguageStyle, language_style, "language style"),
        source_url=source_url,
    )
    return ContentGenerator(credentials, config=config).generate(request)
