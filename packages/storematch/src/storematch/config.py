"""Configuration for the storematch reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ScoringWeights:
    name: float = 0.4
    address: float = 0.6


@dataclass
class Thresholds:
    # A candidate survives if either bar is cleared (strictly greater).
    min_combined: float = 0.3
    min_address: float = 0.5


@dataclass
class RankingConfig:
    top_n: int = 10


@dataclass
class ExtractionConfig:
    separator: str = " - "
    street_tokens: tuple[str, ...] = (
        "st", "ave", "rd", "blvd", "dr", "way", "lane", "court",
    )


@dataclass
class SanitizeConfig:
    year_min: int = 1900
    year_max: int = 2030


@dataclass
class MatchConfig:
    scoring: ScoringWeights = field(default_factory=ScoringWeights)
    thresholds: Thresholds = field(default_factory=Thresholds)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    sanitize: SanitizeConfig = field(default_factory=SanitizeConfig)
