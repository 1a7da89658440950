"""
Content Spark

Generates product copy with a generative API and helps review it:
- Website SEO descriptions with headings, bullet lists and meta elements
- Social media posts in English, Bengali or Banglish
- HTML and plain-text exports plus a heuristic SEO quality score
"""

__version__ = "1.0.0"
__author__ = "Content Spark Team"

from .config import AppConfig, GeneratorConfig, ScoringConfig, SectionRule

from .models import (
    BlockKind,
    ContentType,
    LanguageStyle,
    DescriptionBlock,
    SeoDocument,
    SocialPost,
    GeneratedContent,
    ImageData,
    GenerationRequest,
)

from .errors import (
    GenerationError,
    GenerationErrorKind,
    GenerationInProgressError,
)

# Rendering, export and scoring
from .block_renderer import (
    HeadingFragment,
    ParagraphFragment,
    ListFragment,
    render_blocks,
)

from .serializer import (
    escape_html,
    to_html,
    to_plain_dump,
    seo_to_plain_dump,
    social_to_plain_dump,
    clipboard_field,
)

from .seo_scorer import (
    SeoScore,
    calculate_seo_score,
    score_seo_document,
)

from .filename_generator import export_filename

# Generation
from .decoder import decode_generated_content
from .llm_client import ContentGenerator, generate

from .app_state import (
    AppState,
    ContentController,
    CredentialStore,
)

__all__ = [
    # Configuration
    "AppConfig",
    "GeneratorConfig",
    "ScoringConfig",
    "SectionRule",
    # Models
    "BlockKind",
    "ContentType",
    "LanguageStyle",
    "DescriptionBlock",
    "SeoDocument",
    "SocialPost",
    "GeneratedContent",
    "ImageData",
    "GenerationRequest",
    # Errors
    "GenerationError",
    "GenerationErrorKind",
    "GenerationInProgressError",
    # Rendering
    "HeadingFragment",
    "ParagraphFragment",
    "ListFragment",
    "render_blocks",
    "escape_html",
    "to_html",
    "to_plain_dump",
    "seo_to_plain_dump",
    "social_to_plain_dump",
    "clipboard_field",
    # Scoring
    "SeoScore",
    "calculate_seo_score",
    "score_seo_document",
    "export_filename",
    # Generation
    "decode_generated_content",
    "ContentGenerator",
    "generate",
    "AppState",
    "ContentController",
    "CredentialStore",
]
