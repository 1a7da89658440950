"""
Heuristic on-page SEO quality score.

Maps a structured SEO document to an integer in [0, 100] plus a
qualitative label. The score is shown to the user as feedback only; it
has no effect on generation and is never sent anywhere.

Signals (each independently capped):
- Product title longer than 5 characters
- Opening paragraph plus the five named sections (jointly capped at 25)
- Number of suggested H1 headings and broad match keywords
- Meta title and meta description length
- A product title word appearing in the body text
- Bullet lists under "Key Features" and "Benefits"
"""

import math
from dataclasses import dataclass
from typing import Optional

from .config import ScoringConfig
from .models import DescriptionBlock, SeoDocument


@dataclass(frozen=True)
class SeoScore:
    """Score and its qualitative label."""
    score: int
    label: str


def _block_after_heading(
    sections: tuple[DescriptionBlock, ...],
    heading_text: str,
) -> Optional[DescriptionBlock]:
    """Return the block right after the first heading containing heading_text."""
    for index, block in enumerate(sections):
        if block.is_heading and heading_text in block.content:
            if index + 1 < len(sections):
                return sections[index + 1]
            return None
    return None


def _structure_points(sections: tuple[DescriptionBlock, ...], config: ScoringConfig) -> float:
    points = 0.0
    first = sections[0]
    if first.is_paragraph and len(first.content.strip()) > config.opening_min_length:
        points += config.opening_points

    for rule in config.section_rules:
        following = _block_after_heading(sections, rule.heading)
        if (
            following is not None
            and following.is_paragraph
            and len(following.content.strip()) > rule.min_content_length
        ):
            points += config.section_points

    return min(points, config.structure_cap)


def _meta_points(value: str, ideal: tuple[int, int], config: ScoringConfig) -> float:
    if not value:
        return 0
    low, high = ideal
    if low <= len(value) <= high:
        return config.meta_ideal_points
    return config.meta_present_points


def _body_keyword_points(document: SeoDocument, config: ScoringConfig) -> float:
    body = " ".join(block.content for block in document.sections).lower()
    words = document.product_title.lower().split(" ")
    if any(len(word) > config.body_keyword_min_length and word in body for word in words):
        return config.body_keyword_points
    return 0


def _bullet_points(sections: tuple[DescriptionBlock, ...], config: ScoringConfig) -> float:
    points = 0.0
    for heading_text in config.bullet_sections:
        following = _block_after_heading(sections, heading_text)
        if following is not None and following.is_paragraph and config.bullet_marker in following.content:
            points += config.bullet_points
    return points


def calculate_seo_score(document: Optional[SeoDocument], config: Optional[ScoringConfig] = None) -> int:
    """
    Calculate the SEO quality score of a document.

    Args:
        document: The SEO document, or None.
        config: Scoring thresholds. Defaults to ScoringConfig().

    Returns:
        Integer score in [0, config.max_score]; 0 when there are no sections.
    """
    config = config or ScoringConfig()
    if document is None or not document.sections:
        return 0

    sections = tuple(document.sections)
    score = 0.0

    if len(document.product_title) > config.title_min_length:
        score += config.title_points

    score += _structure_points(sections, config)
    score += min(len(document.h1_headings) * config.h1_points_each, config.h1_cap)
    score += min(len(document.broad_match_keywords) * config.keyword_points_each, config.keyword_cap)
    score += _meta_points(document.meta_title, config.meta_title_range, config)
    score += _meta_points(document.meta_description, config.meta_description_range, config)
    score += _body_keyword_points(document, config)
    score += _bullet_points(sections, config)

    # half-up rounding, 72.5 scores 73
    return min(int(math.floor(score + 0.5)), config.max_score)


def score_seo_document(document: Optional[SeoDocument], config: Optional[ScoringConfig] = None) -> SeoScore:
    """Score a document and attach its label."""
    config = config or ScoringConfig()
    score = calculate_seo_score(document, config)
    return SeoScore(score=score, label=config.label_for(score))
