"""
Download filename generation for exported content.

Generates descriptive filenames based on the generated content:
- For website SEO content: the product title with whitespace runs replaced
  by underscores, suffixed with '_seo_content.txt'
- For social posts: the first 30 characters of the post title, reduced to
  word characters, dots and hyphens, suffixed with '_social_post.txt'
"""

import re
from pathlib import Path
from typing import Optional

from .models import GeneratedContent


FALLBACK_FILENAME = "generated_content.txt"
SOCIAL_TITLE_CHARS = 30

# Characters no common filesystem accepts in a name
_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def _underscore_whitespace(text: str) -> str:
    return re.sub(r"\s+", "_", text)


def _seo_core(title: str) -> str:
    """
    Build the filename core for website content.

    Punctuation other than filesystem-unsafe characters is preserved:
    "Glow Up! Serum 50ml" -> "Glow_Up!_Serum_50ml".
    """
    return _UNSAFE_CHARS.sub("", _underscore_whitespace(title.strip()))


def _social_core(title: str) -> str:
    """
    Build the filename core for a social post.

    Emojis and other symbols are dropped, letters in any script are kept.
    """
    core = _underscore_whitespace(title[:SOCIAL_TITLE_CHARS])
    core = re.sub(r"[^\w.-]", "", core)
    return core.strip("_")


def export_filename(content: GeneratedContent) -> str:
    """
    Generate the download filename for generated content.

    Args:
        content: The generation result being exported.

    Returns:
        Filename with a .txt extension.

    Examples:
        Website content titled "Glow Up! Serum 50ml"
        -> "Glow_Up!_Serum_50ml_seo_content.txt"

        Social post titled "✨ Snail Foam Cleanser ✨"
        -> "Snail_Foam_Cleanser_social_post.txt"
    """
    if content.is_seo:
        core = _seo_core(content.data.product_title)
        suffix = "_seo_content.txt"
    else:
        core = _social_core(content.data.title)
        suffix = "_social_post.txt"

    if not core:
        return FALLBACK_FILENAME
    return f"{core}{suffix}"


def write_export(
    content: GeneratedContent,
    text: str,
    output: Optional[Path] = None,
    output_dir: Optional[Path] = None,
) -> Path:
    """
    Write an export body to disk.

    Args:
        content: The generation result, used to derive the filename.
        text: Serialized export body.
        output: Explicit output path. Overrides the derived name.
        output_dir: Directory for the derived name. Defaults to the
            current directory.

    Returns:
        Path of the written file.
    """
    if output is None:
        output = (output_dir or Path.cwd()) / export_filename(content)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    return output
