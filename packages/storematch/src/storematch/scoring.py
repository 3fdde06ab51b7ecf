"""Fuzzy string similarity used for both name and address scoring."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def similarity(a: str | None, b: str | None) -> float:
    """Score two strings in [0, 1], case- and edge-whitespace-insensitive.

    Containment is rewarded by coverage (``len(shorter) / len(longer)``);
    anything else falls back to normalized Levenshtein similarity.
    """
    if not a or not b:
        return 0.0

    s1 = a.lower().strip()
    s2 = b.lower().strip()

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    shorter, longer = (s1, s2) if len(s1) <= len(s2) else (s2, s1)
    if shorter in longer:
        return len(shorter) / len(longer)

    distance = Levenshtein.distance(s1, s2)
    return 1.0 - distance / len(longer)
