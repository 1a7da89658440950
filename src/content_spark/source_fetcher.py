"""
Source page extraction for product URLs.

When the user supplies a product source URL, the page is fetched and its
title, meta description and readable text are extracted so the prompt
can use them. The generative API never fetches the URL itself.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)


# Default headers for web requests
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

# Elements that never hold product copy
NOISE_TAGS = ["script", "style", "noscript", "svg", "nav", "footer", "header", "aside", "form", "iframe"]
TEXT_TAGS = ["h1", "h2", "h3", "h4", "p", "li", "td", "th"]


class SourceFetchError(Exception):
    """Raised when a source URL cannot be fetched or parsed."""
    pass


@dataclass
class SourcePage:
    """Readable content extracted from a source URL."""
    url: str
    title: Optional[str] = None
    meta_description: Optional[str] = None
    text_blocks: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.meta_description or self.text_blocks)

    def as_prompt_text(self, max_chars: Optional[int] = None) -> str:
        """Render the page as plain text for inclusion in a prompt."""
        lines = [f"URL: {self.url}"]
        if self.title:
            lines.append(f"Page Title: {self.title}")
        if self.meta_description:
            lines.append(f"Meta Description: {self.meta_description}")
        if self.text_blocks:
            lines.append("")
            lines.extend(self.text_blocks)
        text = "\n".join(lines)
        if max_chars is not None and len(text) > max_chars:
            text = text[:max_chars].rstrip() + "\n[truncated]"
        return text


def _decode_html(response: requests.Response) -> str:
    """
    Decode an HTTP response body.

    Detection order: Content-Type header charset, charset_normalizer
    detection, then UTF-8 with replacement.
    """
    content_bytes = response.content
    content_type = response.headers.get("Content-Type", "")
    if "charset=" in content_type.lower():
        charset = content_type.lower().split("charset=")[-1].split(";")[0].strip().strip("\"'")
        try:
            return content_bytes.decode(charset)
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Header charset {charset} failed: {e}")

    best = from_bytes(content_bytes).best()
    if best is not None:
        return str(best)
    return content_bytes.decode("utf-8", errors="replace")


def _clean_text(text: str) -> str:
    return " ".join(text.split())


def extract_source_page(html: str, url: str) -> SourcePage:
    """
    Extract title, meta description and text blocks from HTML.

    Args:
        html: Page HTML.
        url: URL the HTML came from.

    Returns:
        SourcePage with de-duplicated text blocks in document order.
    """
    soup = BeautifulSoup(html, "lxml")

    title = None
    title_tag = soup.find("title")
    if title_tag:
        title = _clean_text(title_tag.get_text(separator=" ", strip=True)) or None

    meta_description = None
    meta_tag = soup.find("meta", attrs={"name": "description"})
    if meta_tag and meta_tag.get("content"):
        meta_description = _clean_text(meta_tag["content"]) or None

    for tag in soup.find_all(NOISE_TAGS):
        tag.decompose()

    root = soup.find("main") or soup.find("article") or soup.body or soup
    seen = set()
    blocks = []
    for element in root.find_all(TEXT_TAGS):
        text = _clean_text(element.get_text(separator=" ", strip=True))
        if len(text) < 3 or text in seen:
            continue
        seen.add(text)
        blocks.append(text)

    return SourcePage(url=url, title=title, meta_description=meta_description, text_blocks=blocks)


def fetch_source_page(url: str, timeout: float = 15.0, max_chars: Optional[int] = None) -> SourcePage:
    """
    Fetch and extract content from a product source URL.

    Args:
        url: The URL to fetch.
        timeout: Request timeout in seconds.
        max_chars: Optional cap on the total extracted text length.

    Returns:
        SourcePage with the extracted content.

    Raises:
        SourceFetchError: If the URL is invalid or cannot be fetched.
    """
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise SourceFetchError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, headers=DEFAULT_HEADERS, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise SourceFetchError(f"Failed to fetch URL: {e}") from e

    page = extract_source_page(_decode_html(response), url)

    if max_chars is not None:
        kept, total = [], 0
        for block in page.text_blocks:
            if total + len(block) > max_chars:
                break
            kept.append(block)
            total += len(block) + 1
        page.text_blocks = kept

    logger.info(f"Fetched source page {url}: {len(page.text_blocks)} text blocks")
    return page
