"""
Plain-text and HTML serialization of generated content.

Produces the portable representations used for copy-to-clipboard and
file download. Every function here is a pure function of its input, so
identical input always yields byte-identical output.
"""

from typing import Iterable

from .block_renderer import (
    HeadingFragment,
    ListFragment,
    ParagraphFragment,
    render_blocks,
)
from .models import DescriptionBlock, GeneratedContent, SeoDocument, SocialPost


RULE = "------------------------------------"

# Copy targets offered by the UI
CLIPBOARD_FIELDS = ("full", "meta_title", "meta_description", "html")


def escape_html(text: str) -> str:
    """
    Escape the five HTML-reserved characters.

    Escaping is not idempotent: text that is already escaped gets escaped
    again ("&amp;" becomes "&amp;amp;").
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def to_html(sections: Iterable[DescriptionBlock]) -> str:
    """
    Render description blocks as an HTML snippet.

    Args:
        sections: Description blocks in document order.

    Returns:
        HTML with headings, paragraphs and bullet lists, trailing
        whitespace trimmed.
    """
    parts = []
    for fragment in render_blocks(sections):
        if isinstance(fragment, HeadingFragment):
            level = fragment.level
            parts.append(f"<h{level}>{escape_html(fragment.text)}</h{level}>\n")
        elif isinstance(fragment, ParagraphFragment):
            parts.append(f"<p>{escape_html(fragment.text)}</p>\n")
        elif isinstance(fragment, ListFragment):
            parts.append("<ul>\n")
            for item in fragment.items:
                parts.append(f"  <li>{escape_html(item)}</li>\n")
            parts.append("</ul>\n")
    return "".join(parts).strip()


def seo_to_plain_dump(document: SeoDocument) -> str:
    """Format an SEO document as the fixed-layout text export."""
    text = f"Product Title: {document.product_title}\n\n"

    text += f"SEO Description (Text):\n{RULE}\n"
    for block in document.sections:
        if block.is_heading:
            text += f"\n## {block.content}\n\n"
        else:
            text += f"{block.content}\n\n"

    text += f"\nSEO Description (HTML):\n{RULE}\n"
    text += to_html(document.sections)
    text += f"\n{RULE}\n\n"

    text += "\nSuggested H1 Headings:\n"
    text += "".join(f"- {heading}\n" for heading in document.h1_headings)
    text += "\nBroad Match Keywords:\n"
    text += "".join(f"- {keyword}\n" for keyword in document.broad_match_keywords)

    text += f"\nMeta Title: {document.meta_title}\n\nMeta Description: {document.meta_description}\n"
    return text


def social_to_plain_dump(post: SocialPost) -> str:
    """Format a social post as text, skipping absent optional sections."""
    text = f"{post.title}\n\n{post.intro}\n\n"
    for section in post.optional_sections():
        text += f"{section}\n\n"
    text += f"{post.call_to_action}\n\nHashtags:\n{' '.join(post.hashtags)}\n"
    return text


def to_plain_dump(content: GeneratedContent) -> str:
    """Serialize generated content for download or full copy."""
    if content.is_seo:
        return seo_to_plain_dump(content.data)
    return social_to_plain_dump(content.data)


def clipboard_field(content: GeneratedContent, field_name: str) -> str:
    """
    Return the verbatim text for one copy button.

    Args:
        content: The current generation result.
        field_name: One of CLIPBOARD_FIELDS.

    Returns:
        Text to place on the clipboard.

    Raises:
        ValueError: If the field is unknown or does not apply to the content type.
    """
    if field_name not in CLIPBOARD_FIELDS:
        raise ValueError(
            f"Unknown clipboard field '{field_name}'. Expected one of: {', '.join(CLIPBOARD_FIELDS)}"
        )
    if field_name == "full":
        return to_plain_dump(content)
    if not content.is_seo:
        raise ValueError(f"Field '{field_name}' is only available for website content")
    document = content.data
    if field_name == "meta_title":
        return document.meta_title
    if field_name == "meta_description":
        return document.meta_description
    return to_html(document.sections)
