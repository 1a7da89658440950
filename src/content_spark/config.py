# -*- coding: utf-8 -*-
"""
Centralized configuration for Content Spark.

This module provides the configuration dataclasses that control SEO
scoring thresholds, generation behavior, and application settings.
The scoring thresholds are heuristics, not derived from a documented
SEO standard, so every one of them can be overridden.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


DEFAULT_MODEL = "claude-sonnet-4-20250514"
CREDENTIALS_ENV_VAR = "CONTENT_SPARK_CREDENTIALS"
MODEL_ENV_VAR = "ANTHROPIC_MODEL"


@dataclass(frozen=True)
class SectionRule:
    """A named description section and the paragraph length it needs to score."""
    heading: str
    min_content_length: int = 10


@dataclass(frozen=True)
class ScoringConfig:
    """
    Points, caps and thresholds for the SEO quality score.

    Attributes:
        title_min_length: Product title must be longer than this to score.
        opening_min_length: First paragraph must be longer than this (trimmed).
        section_rules: Headings whose following paragraph earns section points.
        structure_cap: Joint cap for opening paragraph and section points.
        meta_title_range: Inclusive ideal length range for the meta title.
        meta_description_range: Inclusive ideal length range for the meta description.
        body_keyword_min_length: Title words must be longer than this to count.
        bullet_sections: Headings whose following paragraph earns bullet points.
        label_thresholds: (minimum score, label) pairs, highest first.
    """

    max_score: int = 100

    title_min_length: int = 5
    title_points: float = 10

    opening_min_length: int = 20
    opening_points: float = 5
    section_rules: tuple[SectionRule, ...] = (
        SectionRule("Key Features"),
        SectionRule("Benefits"),
        SectionRule("How to Use"),
        SectionRule("Suitable For"),
        SectionRule("Origin", min_content_length=5),
    )
    section_points: float = 4
    structure_cap: float = 25

    h1_points_each: float = 2
    h1_cap: float = 10
    keyword_points_each: float = 1
    keyword_cap: float = 10

    meta_title_range: tuple[int, int] = (40, 65)
    meta_description_range: tuple[int, int] = (100, 165)
    meta_ideal_points: float = 15
    meta_present_points: float = 5

    body_keyword_min_length: int = 3
    body_keyword_points: float = 10

    bullet_sections: tuple[str, ...] = ("Key Features", "Benefits")
    bullet_points: float = 2.5
    bullet_marker: str = "\n- "

    label_thresholds: tuple[tuple[int, str], ...] = (
        (90, "Excellent"),
        (70, "Good"),
        (50, "Fair"),
    )
    default_label: str = "Needs Improvement"

    def __post_init__(self):
        """Validate configuration values."""
        if self.max_score <= 0:
            raise ValueError(f"max_score must be > 0, got {self.max_score}")
        for name in ("meta_title_range", "meta_description_range"):
            low, high = getattr(self, name)
            if low < 0 or low > high:
                raise ValueError(f"{name} must be an ascending (low, high) pair, got {(low, high)}")
        minimums = [minimum for minimum, _ in self.label_thresholds]
        if minimums != sorted(minimums, reverse=True):
            raise ValueError("label_thresholds must be ordered from highest to lowest")

    def label_for(self, score: int) -> str:
        """Map a score to its qualitative label."""
        for minimum, label in self.label_thresholds:
            if score >= minimum:
                return label
        return self.default_label


@dataclass
class GeneratorConfig:
    """
    Settings for calls to the generative API.

    Attributes:
        model: Anthropic model identifier.
        max_tokens: Maximum tokens in the response.
        temperature: Sampling temperature.
        request_timeout: Total HTTP timeout in seconds for the API call.
        connect_timeout: Connect timeout in seconds for the API call.
        shop_name: Shop that social posts must mention.
        shop_url: Website that social calls to action must include.
        fetch_timeout: Timeout in seconds when fetching a source URL.
        max_source_chars: Source page text is truncated to this length.
    """

    model: str = DEFAULT_MODEL
    max_tokens: int = 4096
    temperature: float = 0.75
    request_timeout: float = 60.0
    connect_timeout: float = 30.0

    shop_name: str = "Finesse Glow"
    shop_url: str = "https://finesseglow.com/"

    fetch_timeout: float = 15.0
    max_source_chars: int = 12000

    def __post_init__(self):
        """Validate configuration values."""
        if self.max_tokens < 256:
            raise ValueError(f"max_tokens must be >= 256, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be between 0 and 1, got {self.temperature}")
        if self.connect_timeout > self.request_timeout:
            raise ValueError(
                f"connect_timeout ({self.connect_timeout}) must be <= "
                f"request_timeout ({self.request_timeout})"
            )
        if self.max_source_chars < 500:
            raise ValueError(f"max_source_chars must be >= 500, got {self.max_source_chars}")


def default_credentials_path() -> Path:
    return Path.home() / ".content_spark" / "credentials.json"


@dataclass
class AppConfig:
    """
    Application-level settings.

    Attributes:
        credentials_path: File where the API credential is persisted.
        auth_redirect_delay: Seconds the UI shows an auth error before
            returning to the credential setup screen.
        generator: Generation settings.
        scoring: SEO score settings.
    """

    credentials_path: Path = field(default_factory=default_credentials_path)
    auth_redirect_delay: float = 1.5
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)

    def __post_init__(self):
        """Validate configuration values."""
        self.credentials_path = Path(self.credentials_path)
        if self.auth_redirect_delay < 0:
            raise ValueError(
                f"auth_redirect_delay must be >= 0, got {self.auth_redirect_delay}"
            )

    @classmethod
    def from_env(cls, **overrides) -> "AppConfig":
        """Create config from environment variables.

        CONTENT_SPARK_CREDENTIALS overrides the credential file location and
        ANTHROPIC_MODEL overrides the model.

        Args:
            **overrides: Override any config values

        Returns:
            AppConfig built from the environment
        """
        defaults: dict = {}
        credentials: Optional[str] = os.environ.get(CREDENTIALS_ENV_VAR)
        if credentials:
            defaults["credentials_path"] = Path(credentials).expanduser()
        model = os.environ.get(MODEL_ENV_VAR)
        if model:
            defaults["generator"] = GeneratorConfig(model=model)
        defaults.update(overrides)
        return cls(**defaults)
