"""Tests for the SEO quality score."""

import random
from dataclasses import replace

import pytest

from content_spark.config import ScoringConfig
from content_spark.models import DescriptionBlock, SeoDocument
from content_spark.seo_scorer import SeoScore, calculate_seo_score, score_seo_document


def _bare_document(sections, **kwargs) -> SeoDocument:
    """A document whose only scoring signal is its sections."""
    return SeoDocument(product_title=kwargs.pop("product_title", ""), sections=tuple(sections), **kwargs)


class TestEmptyDocuments:
    """Tests for documents with nothing to score."""

    def test_none_scores_zero(self):
        """Test a missing document scores 0."""
        assert calculate_seo_score(None) == 0

    def test_empty_sections_score_zero(self, full_seo_document):
        """Test empty sections score 0 even when every other field is ideal."""
        document = replace(full_seo_document, sections=())
        assert calculate_seo_score(document) == 0

    def test_empty_sections_label(self):
        """Test the label for an empty document."""
        assert score_seo_document(_bare_document([])) == SeoScore(0, "Needs Improvement")


class TestStructure:
    """Tests for opening paragraph and section coverage."""

    def test_two_sections_without_opening(self):
        """Test two covered sections and no opening paragraph give 8 points."""
        sections = [
            DescriptionBlock.heading("Key Features"),
            DescriptionBlock.paragraph("Gentle and hydrating."),
            DescriptionBlock.heading("Benefits"),
            DescriptionBlock.paragraph("Softer skin in a week."),
        ]
        assert calculate_seo_score(_bare_document(sections)) == 8

    def test_two_sections_with_opening(self):
        """Test an opening paragraph adds 5 to section coverage."""
        sections = [
            DescriptionBlock.paragraph("An opening paragraph that is long enough."),
            DescriptionBlock.heading("Key Features"),
            DescriptionBlock.paragraph("Gentle and hydrating."),
            DescriptionBlock.heading("Benefits"),
            DescriptionBlock.paragraph("Softer skin in a week."),
        ]
        assert calculate_seo_score(_bare_document(sections)) == 13

    def test_short_opening_does_not_score(self):
        """Test the opening paragraph must exceed 20 trimmed characters."""
        sections = [DescriptionBlock.paragraph("   " + "x" * 20 + "   ")]
        assert len(sections[0].content.strip()) == 20
        assert calculate_seo_score(_bare_document(sections)) == 0

    def test_section_paragraph_must_exceed_minimum(self):
        """Test a section paragraph of exactly 10 characters does not score."""
        sections = [
            DescriptionBlock.heading("Benefits"),
            DescriptionBlock.paragraph("0123456789"),
        ]
        assert calculate_seo_score(_bare_document(sections)) == 0

    def test_origin_has_lower_minimum(self):
        """Test Origin scores with a six character paragraph."""
        sections = [
            DescriptionBlock.heading("Origin"),
            DescriptionBlock.paragraph("Korea!"),
        ]
        assert calculate_seo_score(_bare_document(sections)) == 4

    def test_heading_match_is_substring(self):
        """Test a heading containing the section name counts."""
        sections = [
            DescriptionBlock.heading("Amazing Benefits of Snail Mucin"),
            DescriptionBlock.paragraph("Repairs the skin barrier overnight."),
        ]
        assert calculate_seo_score(_bare_document(sections)) == 4

    def test_heading_followed_by_heading_does_not_score(self):
        """Test a section needs a paragraph directly after its heading."""
        sections = [
            DescriptionBlock.heading("Benefits"),
            DescriptionBlock.heading("How to Use"),
            DescriptionBlock.paragraph("Massage gently onto damp skin."),
        ]
        assert calculate_seo_score(_bare_document(sections)) == 4

    def test_trailing_heading_does_not_score(self):
        """Test a heading at the end of the document scores nothing."""
        assert calculate_seo_score(_bare_document([DescriptionBlock.heading("Benefits")])) == 0

    def test_structure_is_capped(self):
        """Test the structure contribution never exceeds its cap."""
        config = ScoringConfig(section_points=20)
        sections = [
            DescriptionBlock.paragraph("An opening paragraph that is long enough."),
            DescriptionBlock.heading("Key Features"),
            DescriptionBlock.paragraph("Gentle and hydrating."),
            DescriptionBlock.heading("Benefits"),
            DescriptionBlock.paragraph("Softer skin in a week."),
        ]
        assert calculate_seo_score(_bare_document(sections), config) == 25


class TestSignals:
    """Tests for the remaining scoring signals in isolation."""

    @pytest.fixture
    def base(self):
        return _bare_document([DescriptionBlock.paragraph("short")])

    def test_title_length(self, base):
        """Test a product title longer than 5 characters earns 10."""
        assert calculate_seo_score(replace(base, product_title="Serum")) == 0
        assert calculate_seo_score(replace(base, product_title="Serum!")) == 10

    def test_meta_title_ideal_adds_fifteen(self, base):
        """Test adding a 50 character meta title raises the score by exactly 15."""
        before = calculate_seo_score(base)
        after = calculate_seo_score(replace(base, meta_title="x" * 50))
        assert after - before == 15

    def test_meta_title_outside_range(self, base):
        """Test a meta title outside 40-65 characters earns 5."""
        assert calculate_seo_score(replace(base, meta_title="x" * 39)) == 5
        assert calculate_seo_score(replace(base, meta_title="x" * 66)) == 5
        assert calculate_seo_score(replace(base, meta_title="x" * 40)) == 15
        assert calculate_seo_score(replace(base, meta_title="x" * 65)) == 15

    def test_meta_description_range(self, base):
        """Test the meta description ideal range is 100-165."""
        assert calculate_seo_score(replace(base, meta_description="x" * 100)) == 15
        assert calculate_seo_score(replace(base, meta_description="x" * 165)) == 15
        assert calculate_seo_score(replace(base, meta_description="x" * 99)) == 5

    def test_h1_headings_capped(self, base):
        """Test H1 headings earn 2 each up to 10."""
        assert calculate_seo_score(replace(base, h1_headings=("a", "b"))) == 4
        assert calculate_seo_score(replace(base, h1_headings=tuple("abcdefgh"))) == 10

    def test_keywords_capped(self, base):
        """Test keywords earn 1 each up to 10."""
        assert calculate_seo_score(replace(base, broad_match_keywords=("a", "b", "c"))) == 3
        assert calculate_seo_score(replace(base, broad_match_keywords=tuple("abcdefghijklmno"))) == 10

    def test_body_keyword(self):
        """Test a title word longer than 3 characters found in the body earns 10."""
        document = _bare_document(
            [DescriptionBlock.paragraph("calm CENTELLA")], product_title="Calm Centella"
        )
        # title itself scores 10, body match scores 10
        assert calculate_seo_score(document) == 20

    def test_body_keyword_ignores_short_words(self):
        """Test title words of 3 characters or fewer are ignored."""
        document = _bare_document(
            [DescriptionBlock.paragraph("the gel for you")], product_title="The Gel For"
        )
        assert calculate_seo_score(document) == 10

    def test_bullets_round_half_up(self):
        """Test a single 2.5 bullet bonus rounds up."""
        sections = [
            DescriptionBlock.heading("Key Features"),
            DescriptionBlock.paragraph("\n- Lightweight texture\n- Quick absorbing"),
        ]
        # 4 for the section, 2.5 for the bullets
        assert calculate_seo_score(_bare_document(sections)) == 7

    def test_both_bullet_sections(self):
        """Test bullets under both sections earn 5."""
        sections = [
            DescriptionBlock.heading("Key Features"),
            DescriptionBlock.paragraph("\n- Lightweight texture"),
            DescriptionBlock.heading("Benefits"),
            DescriptionBlock.paragraph("\n- Brighter skin tone"),
        ]
        assert calculate_seo_score(_bare_document(sections)) == 13


class TestTotals:
    """Tests for totals, bounds and labels."""

    def test_full_document_scores_maximum(self, full_seo_document):
        """Test a document earning every signal scores 100."""
        assert score_seo_document(full_seo_document) == SeoScore(100, "Excellent")

    def test_score_stays_in_range(self):
        """Test random well-formed documents always score within 0-100."""
        rng = random.Random(1234)
        headings = ["Key Features", "Benefits", "How to Use", "Suitable For", "Origin", "Extra"]
        for _ in range(300):
            sections = []
            for _ in range(rng.randint(0, 14)):
                if rng.random() < 0.4:
                    sections.append(DescriptionBlock.heading(rng.choice(headings), rng.randint(2, 6)))
                else:
                    lines = ["- item" if rng.random() < 0.5 else "word " * rng.randint(0, 10)
                             for _ in range(rng.randint(1, 5))]
                    sections.append(DescriptionBlock.paragraph("\n".join(lines)))
            document = SeoDocument(
                product_title="word " * rng.randint(0, 6),
                sections=tuple(sections),
                h1_headings=("h",) * rng.randint(0, 20),
                broad_match_keywords=("k",) * rng.randint(0, 30),
                meta_title="m" * rng.randint(0, 120),
                meta_description="d" * rng.randint(0, 300),
            )
            assert 0 <= calculate_seo_score(document) <= 100

    def test_custom_max_score_clamps(self, full_seo_document):
        """Test the result is clamped to max_score."""
        assert calculate_seo_score(full_seo_document, ScoringConfig(max_score=60)) == 60

    @pytest.mark.parametrize(
        "score,label",
        [(100, "Excellent"), (90, "Excellent"), (89, "Good"), (70, "Good"),
         (69, "Fair"), (50, "Fair"), (49, "Needs Improvement"), (0, "Needs Improvement")],
    )
    def test_label_thresholds(self, score, label):
        """Test label boundaries."""
        assert ScoringConfig().label_for(score) == label
