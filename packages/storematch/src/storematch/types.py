"""Core types for the storematch reconciliation engine."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Column spellings seen in CRM exports, first hit wins.
NAME_KEYS = ("Name", "name")
ADDRESS_KEYS = ("ShippingAddress", "shippingAddress", "shipping_address")
YEAR_KEYS = ("Year_Built__c", "yearBuilt", "year_built")
SQFT_KEYS = ("Net_RSF__c", "squareFootage", "square_footage")

# Subject-store spellings, keyed by MatchQuery field.
QUERY_KEYS = {
    "target_store_name": ("store_name", "storeName", "name"),
    "target_street": ("street", "address", "streetAddress"),
    "city": ("city",),
    "state": ("state",),
    "postal_code": ("zip", "postal_code", "postalCode"),
}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    # pandas hands back NaN for empty cells
    return isinstance(value, float) and math.isnan(value)


def _first(row: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in row and not _is_missing(row[key]):
            return row[key]
    return None


@dataclass
class CandidateRecord:
    """A raw record from the CRM extract. Treated as read-only."""

    name: str
    shipping_address: Mapping[str, Any] | str | None = None
    year_built: Any = None
    square_footage: Any = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> CandidateRecord:
        name = _first(row, NAME_KEYS)
        return cls(
            name="" if name is None else str(name),
            shipping_address=_first(row, ADDRESS_KEYS),
            year_built=_first(row, YEAR_KEYS),
            square_footage=_first(row, SQFT_KEYS),
        )


@dataclass
class MatchQuery:
    """The subject store being looked up.

    city, state and postal_code are carried for display only.
    """

    target_street: str
    target_store_name: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None


@dataclass
class ExtractedFields:
    brand: str
    street: str


@dataclass
class ScoredMatch:
    candidate_name: str
    brand_name: str
    extracted_street: str
    name_score: float
    address_score: float
    combined_score: float
    raw_year_built: Any = None
    raw_square_footage: Any = None
    year_built: int | None = None
    square_footage: float | None = None
    position: int = 0


@dataclass
class StoreMetadata:
    year_built: int | None
    square_footage: float | None
    source_name: str
    combined_score: float


@dataclass
class RankStats:
    """Counters collected during ranking."""

    candidates: int = 0
    no_street: int = 0
    filtered_out: int = 0
    returned: int = 0
