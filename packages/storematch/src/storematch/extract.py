"""Brand and street extraction from semi-structured CRM records."""

from __future__ import annotations

import ast
import json
import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

import structlog

from storematch.config import ExtractionConfig
from storematch.types import CandidateRecord, ExtractedFields

log = structlog.get_logger()

_DIGIT = re.compile(r"\d")

# CRM exports store ShippingAddress as a Python dict repr; this rewrites it
# into JSON when the literal grammar rejects it (e.g. JSON null mixed in).
_DIALECT_SUBSTITUTIONS = (
    (re.compile(r"'"), '"'),
    (re.compile(r"\bNone\b"), "null"),
    (re.compile(r"\bTrue\b"), "true"),
    (re.compile(r"\bFalse\b"), "false"),
)


def _parse_json(text: str) -> Any:
    return json.loads(text)


def _parse_literal(text: str) -> Any:
    return ast.literal_eval(text)


def _parse_substituted(text: str) -> Any:
    for pattern, replacement in _DIALECT_SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return json.loads(text)


_PARSERS = (_parse_json, _parse_literal, _parse_substituted)


def parse_shipping_address(value: Mapping[str, Any] | str | None) -> dict[str, Any] | None:
    """Parse a ShippingAddress value into a dict, or None if it can't be."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return dict(value)
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    for parser in _PARSERS:
        try:
            parsed = parser(text)
        except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError):
            continue
        if isinstance(parsed, dict):
            return parsed
    log.debug("shipping_address_unparsed", value=text[:80])
    return None


@lru_cache(maxsize=32)
def _street_token_pattern(tokens: tuple[str, ...]) -> re.Pattern[str]:
    return re.compile(r"\b(" + "|".join(map(re.escape, tokens)) + r")\b", re.IGNORECASE)


def looks_like_street(text: str, config: ExtractionConfig | None = None) -> bool:
    """True if text has a digit or a whole-word street suffix."""
    config = config or ExtractionConfig()
    if _DIGIT.search(text):
        return True
    return _street_token_pattern(tuple(config.street_tokens)).search(text) is not None


def extract_fields(
    record: CandidateRecord, config: ExtractionConfig | None = None
) -> ExtractedFields | None:
    """Pull a comparable brand and street out of a CRM record.

    Returns None when no street can be established; such records carry no
    address signal and must not be scored on name alone.
    """
    config = config or ExtractionConfig()
    name = "" if record.name is None else str(record.name)

    brand = name
    rest: str | None = None
    if config.separator in name:
        head, rest = name.split(config.separator, 1)
        brand = head.strip()
        rest = rest.strip()

    street = ""
    address = parse_shipping_address(record.shipping_address)
    if address is not None:
        value = address.get("street")
        if isinstance(value, str):
            street = value.strip()

    if not street and rest and looks_like_street(rest, config):
        street = rest

    if not street:
        return None
    return ExtractedFields(brand=brand, street=street)
