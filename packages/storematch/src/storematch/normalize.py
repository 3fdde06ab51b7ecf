"""Street address normalization."""

from __future__ import annotations

import re

STREET_ABBREVIATIONS: dict[str, str] = {
    "avenue": "ave",
    "street": "st",
    "drive": "dr",
    "boulevard": "blvd",
    "road": "rd",
    "lane": "ln",
    "court": "ct",
    "north": "n",
    "south": "s",
    "east": "e",
    "west": "w",
    "northeast": "ne",
    "northwest": "nw",
    "southeast": "se",
    "southwest": "sw",
}

_STRIP_CHARS = re.compile(r"[.,#]")
_WHITESPACE = re.compile(r"\s+")
_ABBREVIATION_WORDS = re.compile(
    r"\b(" + "|".join(sorted(STREET_ABBREVIATIONS, key=len, reverse=True)) + r")\b"
)


def normalize_address(raw: str | None) -> str:
    """Canonicalize a free-text street address for comparison.

    Lowercases, drops ``.``, ``,`` and ``#``, collapses whitespace and
    abbreviates whole-word street suffixes and directionals.

    >>> normalize_address("123 North Main Street")
    '123 n main st'
    """
    if not raw:
        return ""

    # 1. Lowercase, trim
    s = str(raw).lower().strip()

    # 2. Punctuation
    s = _STRIP_CHARS.sub("", s)

    # 3. Whitespace; trim again since stripped punctuation can leave edges
    s = _WHITESPACE.sub(" ", s).strip()

    # 4. Suffix / directional abbreviations, whole words only
    return _ABBREVIATION_WORDS.sub(lambda m: STREET_ABBREVIATIONS[m.group(1)], s)
