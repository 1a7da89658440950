"""
Pytest fixtures and configuration for Content Spark tests.
"""

import json
from pathlib import Path

import pytest

from content_spark.models import (
    DescriptionBlock,
    GeneratedContent,
    SeoDocument,
    SocialPost,
)


@pytest.fixture
def full_sections() -> tuple:
    """Description blocks covering every scored section."""
    return (
        DescriptionBlock.paragraph(
            "The Snail Foam Cleanser gently removes makeup and impurities while keeping skin hydrated."
        ),
        DescriptionBlock.heading("Key Features", 2),
        DescriptionBlock.paragraph(
            "Loved for its gentle formula.\n- Snail Mucin: Repairs and soothes.\n- pH 5.5: Keeps the barrier balanced."
        ),
        DescriptionBlock.heading("Benefits", 2),
        DescriptionBlock.paragraph("\n- Deep cleansing without dryness.\n- Brighter, smoother skin."),
        DescriptionBlock.heading("How to Use", 2),
        DescriptionBlock.paragraph("Lather a small amount with water and massage onto damp skin."),
        DescriptionBlock.heading("Suitable For", 2),
        DescriptionBlock.paragraph("All skin types, especially dry and sensitive skin."),
        DescriptionBlock.heading("Origin", 2),
        DescriptionBlock.paragraph("Made in Korea"),
    )


@pytest.fixture
def full_seo_document(full_sections) -> SeoDocument:
    """An SEO document that earns every scoring signal."""
    return SeoDocument(
        product_title="3W Clinic Snail Foam Cleanser 100ml",
        sections=full_sections,
        h1_headings=("Snail Foam Cleanser", "Gentle K-Beauty Cleanser", "Hydrating Foam", "Daily Cleanser", "Glow"),
        broad_match_keywords=tuple(f"keyword {i}" for i in range(10)),
        meta_title="3W Clinic Snail Foam Cleanser - Gentle Hydrating Face Wash",
        meta_description=(
            "Discover the 3W Clinic Snail Foam Cleanser: a gentle, hydrating face wash with snail "
            "mucin that removes impurities. Shop now for glowing skin."
        ),
    )


@pytest.fixture
def social_post() -> SocialPost:
    """A social post with two of the four optional sections."""
    return SocialPost(
        title="🧖‍♀️ Snail Foam Cleanser 🧖‍♀️",
        intro="✨ Deep Cleanse & Hydrate! ✨",
        key_benefits_section="💎 Key Benefits\n✔️ Hydrates\n✔️ Soothes",
        how_to_use_section="📌 How to Use\n1. Lather\n2. Rinse",
        call_to_action="🛍️ Order now at https://finesseglow.com/",
        hashtags=("#KBeauty", "#SnailMucin", "#GlassSkin"),
    )


@pytest.fixture
def seo_content(full_seo_document) -> GeneratedContent:
    return GeneratedContent.seo(full_seo_document)


@pytest.fixture
def social_content(social_post) -> GeneratedContent:
    return GeneratedContent.social(social_post)


@pytest.fixture
def seo_response_payload() -> dict:
    """A website response as the generative API returns it."""
    return {
        "productTitle": "Glow Up! Serum 50ml",
        "seoDescription": [
            {"type": "paragraph", "content": "A lightweight serum that brightens dull skin in days."},
            {"type": "heading", "level": 2, "content": "Key Features"},
            {"type": "paragraph", "content": "\n- Niacinamide 5%\n- Fragrance-free"},
            {"type": "heading", "content": "Benefits"},
            {"type": "paragraph", "content": "\n- Brighter tone\n- Even texture"},
        ],
        "h1Headings": ["Glow Up! Serum"],
        "broadMatchKeywords": ["brightening serum", "niacinamide serum"],
        "metaTitle": "Glow Up! Serum 50ml - Brightening Niacinamide Serum",
        "metaDescription": "Brighten dull skin with Glow Up! Serum.",
    }


@pytest.fixture
def social_response_payload() -> dict:
    """A social response as the generative API returns it."""
    return {
        "title": "✨ Glow Up! Serum ✨",
        "intro": "Meet your new glow partner from Finesse Glow!",
        "keyBenefitsSection": "💎 Key Benefits\n✔️ Brightens",
        "keyIngredientsSection": "",
        "callToAction": "🛍️ Order at https://finesseglow.com/",
        "hashtags": ["#GlowUp", "#KBeauty"],
    }


@pytest.fixture
def write_json(tmp_path: Path):
    """Write an object to a JSON file in tmp_path."""
    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write
