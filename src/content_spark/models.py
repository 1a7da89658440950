"""
Data models for Content Spark.

This module defines the core data structures used throughout the application:
the block-based SEO description, the two generated content shapes, and the
request that drives a generation.
"""

import base64 as _b64
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union


class BlockKind(Enum):
    """Kinds of SEO description blocks."""
    HEADING = "heading"
    PARAGRAPH = "paragraph"


class ContentType(Enum):
    """Which shape of content a generation produces."""
    WEBSITE = "website"  # structured SEO document
    SOCIAL = "social"


class LanguageStyle(Enum):
    """Language of a social post's text fields."""
    ENGLISH = "english"
    BANGLISH = "banglish"  # Bengali/English mix
    BENGALI = "bengali"


DEFAULT_HEADING_LEVEL = 2
MIN_HEADING_LEVEL = 2
MAX_HEADING_LEVEL = 6

SUPPORTED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


@dataclass(frozen=True)
class DescriptionBlock:
    """
    A single block of SEO body content.

    Paragraph content may span several lines. Lines whose trimmed form
    starts with "- " are bullet items and are grouped into lists when
    rendered. ``level`` is only meaningful for headings.
    """
    kind: BlockKind
    content: str
    level: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, BlockKind):
            raise ValueError(f"Unknown block kind: {self.kind!r}")
        if not isinstance(self.content, str):
            raise ValueError("Block content must be a string")
        if self.level is not None and not (MIN_HEADING_LEVEL <= self.level <= MAX_HEADING_LEVEL):
            raise ValueError(
                f"Heading level must be between {MIN_HEADING_LEVEL} and "
                f"{MAX_HEADING_LEVEL}, got {self.level}"
            )

    @classmethod
    def heading(cls, content: str, level: Optional[int] = None) -> "DescriptionBlock":
        return cls(BlockKind.HEADING, content, level)

    @classmethod
    def paragraph(cls, content: str) -> "DescriptionBlock":
        return cls(BlockKind.PARAGRAPH, content)

    @property
    def is_heading(self) -> bool:
        return self.kind == BlockKind.HEADING

    @property
    def is_paragraph(self) -> bool:
        return self.kind == BlockKind.PARAGRAPH

    @property
    def effective_level(self) -> int:
        """Heading level to render, defaulting to <h2>."""
        return self.level or DEFAULT_HEADING_LEVEL

    def to_dict(self) -> dict:
        data = {"type": self.kind.value, "content": self.content}
        if self.is_heading and self.level is not None:
            data["level"] = self.level
        return data


@dataclass(frozen=True)
class SeoDocument:
    """A structured website SEO document."""
    product_title: str
    sections: tuple[DescriptionBlock, ...]
    h1_headings: tuple[str, ...] = ()
    broad_match_keywords: tuple[str, ...] = ()
    meta_title: str = ""
    meta_description: str = ""

    def to_dict(self) -> dict:
        return {
            "productTitle": self.product_title,
            "seoDescription": [block.to_dict() for block in self.sections],
            "h1Headings": list(self.h1_headings),
            "broadMatchKeywords": list(self.broad_match_keywords),
            "metaTitle": self.meta_title,
            "metaDescription": self.meta_description,
        }


# (attribute, wire key) pairs in the order optional sections are emitted
SOCIAL_OPTIONAL_SECTIONS = (
    ("key_benefits_section", "keyBenefitsSection"),
    ("key_ingredients_section", "keyIngredientsSection"),
    ("how_to_use_section", "howToUseSection"),
    ("closing_statement", "closingStatement"),
)


@dataclass(frozen=True)
class SocialPost:
    """A social media post record."""
    title: str
    intro: str
    call_to_action: str
    hashtags: tuple[str, ...] = ()
    key_benefits_section: Optional[str] = None
    key_ingredients_section: Optional[str] = None
    how_to_use_section: Optional[str] = None
    closing_statement: Optional[str] = None

    def optional_sections(self) -> Iterator[str]:
        """Yield the optional sections that are present and non-empty, in order."""
        for attr, _ in SOCIAL_OPTIONAL_SECTIONS:
            value = getattr(self, attr)
            if value:
                yield value

    def to_dict(self) -> dict:
        data = {"title": self.title, "intro": self.intro}
        for attr, key in SOCIAL_OPTIONAL_SECTIONS:
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        data["callToAction"] = self.call_to_action
        data["hashtags"] = list(self.hashtags)
        return data


@dataclass(frozen=True)
class GeneratedContent:
    """
    Tagged union over the two generated content shapes.

    ``kind`` determines which renderer, serializer and scorer path applies.
    """
    kind: ContentType
    data: Union[SeoDocument, SocialPost]

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ContentType):
            raise ValueError(f"Unknown content type: {self.kind!r}")
        expected = SeoDocument if self.kind == ContentType.WEBSITE else SocialPost
        if not isinstance(self.data, expected):
            raise ValueError(
                f"{self.kind.value!r} content must carry a {expected.__name__}, "
                f"got {type(self.data).__name__}"
            )

    @classmethod
    def seo(cls, document: SeoDocument) -> "GeneratedContent":
        return cls(ContentType.WEBSITE, document)

    @classmethod
    def social(cls, post: SocialPost) -> "GeneratedContent":
        return cls(ContentType.SOCIAL, post)

    @property
    def is_seo(self) -> bool:
        return self.kind == ContentType.WEBSITE

    @property
    def is_social(self) -> bool:
        return self.kind == ContentType.SOCIAL

    @property
    def title(self) -> str:
        if self.is_seo:
            return self.data.product_title
        return self.data.title

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "data": self.data.to_dict()}


@dataclass(frozen=True)
class ImageData:
    """An inline image payload."""
    base64: str
    mime_type: str

    def __post_init__(self) -> None:
        if self.mime_type not in SUPPORTED_IMAGE_TYPES:
            raise ValueError(
                f"Unsupported image type {self.mime_type!r}. "
                f"Expected one of: {', '.join(SUPPORTED_IMAGE_TYPES)}"
            )

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ImageData":
        return cls(base64=_b64.b64encode(data).decode("ascii"), mime_type=mime_type)


@dataclass(frozen=True)
class GenerationRequest:
    """User inputs for one generation."""
    content_type: ContentType = ContentType.WEBSITE
    product_name: str = ""
    product_details: str = ""
    image: Optional[ImageData] = None
    language_style: LanguageStyle = LanguageStyle.BANGLISH
    source_url: Optional[str] = field(default=None)

    @property
    def has_source_url(self) -> bool:
        return bool(self.source_url and self.source_url.strip())

    @property
    def url_is_primary_source(self) -> bool:
        """True when the URL has to stand in for sparse name and details."""
        if not self.has_source_url:
            return False
        name = self.product_name.strip()
        details = self.product_details.strip()
        return len(name) < 5 and len(details) < 20
