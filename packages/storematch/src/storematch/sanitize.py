"""Validation of the numeric metadata carried by CRM records."""

from __future__ import annotations

import math
from typing import Any

from storematch.config import SanitizeConfig


def sanitize_year_built(value: Any, config: SanitizeConfig | None = None) -> int | None:
    """Return the year as an int if it is a whole number within range."""
    config = config or SanitizeConfig()
    if value is None or isinstance(value, bool):
        return None

    try:
        year = int(str(value).strip())
    except ValueError:
        # Numeric columns can come through as "2005.0"
        try:
            as_float = float(str(value).strip())
        except ValueError:
            return None
        if not as_float.is_integer():
            return None
        year = int(as_float)

    if config.year_min <= year <= config.year_max:
        return year
    return None


def sanitize_square_footage(value: Any) -> float | None:
    """Return a positive, finite square footage or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        sqft = float(str(value).strip().replace(",", ""))
    except ValueError:
        return None
    if not math.isfinite(sqft) or sqft <= 0:
        return None
    return sqft
