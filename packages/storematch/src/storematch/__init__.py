"""storematch - Self-storage store identity reconciliation."""

from storematch.config import MatchConfig
from storematch.extract import extract_fields, parse_shipping_address
from storematch.matcher import StoreMatcher, rank
from storematch.normalize import normalize_address
from storematch.sanitize import sanitize_square_footage, sanitize_year_built
from storematch.scoring import similarity
from storematch.types import (
    CandidateRecord,
    ExtractedFields,
    MatchQuery,
    RankStats,
    ScoredMatch,
    StoreMetadata,
)

__all__ = [
    "CandidateRecord",
    "ExtractedFields",
    "MatchConfig",
    "MatchQuery",
    "RankStats",
    "ScoredMatch",
    "StoreMatcher",
    "StoreMetadata",
    "extract_fields",
    "normalize_address",
    "parse_shipping_address",
    "rank",
    "sanitize_square_footage",
    "sanitize_year_built",
    "similarity",
]
