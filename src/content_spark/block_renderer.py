"""
Block rendering for SEO descriptions.

Turns a sequence of description blocks into a flat list of display
fragments (headings, paragraphs and bullet lists) without losing the
bullet/paragraph structure of multi-line paragraph blocks. The HTML
serializer and the screen views both consume these fragments.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from .models import BlockKind, DescriptionBlock


BULLET_MARKER = "- "


@dataclass(frozen=True)
class HeadingFragment:
    level: int
    text: str


@dataclass(frozen=True)
class ParagraphFragment:
    text: str


@dataclass(frozen=True)
class ListFragment:
    items: tuple[str, ...]


Fragment = Union[HeadingFragment, ParagraphFragment, ListFragment]


class _ScanState(Enum):
    IDLE = "idle"
    ACCUMULATING_PARAGRAPH = "paragraph"
    ACCUMULATING_LIST = "list"


class _ParagraphScanner:
    """
    Line-by-line state machine for one paragraph block.

    At most one buffer is open at a time. A bullet line closes an open
    paragraph, a text line closes an open list, and a blank line closes
    whichever is open.
    """

    def __init__(self) -> None:
        self.state = _ScanState.IDLE
        self.buffer: list[str] = []
        self.fragments: list[Fragment] = []

    def feed(self, line: str) -> None:
        trimmed = line.strip()
        if trimmed.startswith(BULLET_MARKER):
            self._transition(_ScanState.ACCUMULATING_LIST)
            self.buffer.append(trimmed[len(BULLET_MARKER):].strip())
        elif trimmed:
            self._transition(_ScanState.ACCUMULATING_PARAGRAPH)
            self.buffer.append(trimmed)
        else:
            self.flush()

    def flush(self) -> None:
        if self.state == _ScanState.ACCUMULATING_PARAGRAPH:
            self.fragments.append(ParagraphFragment(" ".join(self.buffer).strip()))
        elif self.state == _ScanState.ACCUMULATING_LIST:
            self.fragments.append(ListFragment(tuple(self.buffer)))
        self.state = _ScanState.IDLE
        self.buffer = []

    def _transition(self, target: _ScanState) -> None:
        if self.state != target:
            self.flush()
            self.state = target


def render_paragraph(content: str) -> list[Fragment]:
    """
    Split paragraph content into paragraph and list fragments.

    Args:
        content: Paragraph block content, possibly with newlines.

    Returns:
        Fragments in the order they were detected.
    """
    scanner = _ParagraphScanner()
    for line in content.split("\n"):
        scanner.feed(line)
    scanner.flush()
    return scanner.fragments


def render_blocks(blocks: Iterable[DescriptionBlock]) -> list[Fragment]:
    """
    Render description blocks into display fragments.

    Args:
        blocks: Blocks in document order.

    Returns:
        Flat list of fragments, stable with respect to input order.

    Raises:
        ValueError: If a block has an unknown kind.
    """
    fragments: list[Fragment] = []
    for block in blocks:
        if block.kind == BlockKind.HEADING:
            fragments.append(HeadingFragment(block.effective_level, block.content))
        elif block.kind == BlockKind.PARAGRAPH:
            fragments.extend(render_paragraph(block.content))
        else:
            raise ValueError(f"Unknown block kind: {block.kind!r}")
    return fragments


def fragment_to_dict(fragment: Fragment) -> dict:
    """Convert a fragment to the JSON view the browser UI renders."""
    if isinstance(fragment, HeadingFragment):
        return {"type": "heading", "level": fragment.level, "text": fragment.text}
    if isinstance(fragment, ParagraphFragment):
        return {"type": "paragraph", "text": fragment.text}
    if isinstance(fragment, ListFragment):
        return {"type": "list", "items": list(fragment.items)}
    raise ValueError(f"Unknown fragment: {fragment!r}")
