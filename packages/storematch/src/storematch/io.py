"""CSV/Excel/JSONL input and output for store lookups."""

from __future__ import annotations

import json
import math
from dataclasses import asdict
from pathlib import Path
from typing import Any

import pandas as pd

from storematch.types import QUERY_KEYS, CandidateRecord, MatchQuery, ScoredMatch

_EXCEL_SUFFIXES = {".xlsx"}


def _read_rows(path: Path) -> list[dict[str, Any]]:
    suffix = path.suffix.lower()
    if suffix == ".jsonl":
        rows: list[dict[str, Any]] = []
        with path.open(encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    rows.append(json.loads(line))
        return rows
    if suffix in _EXCEL_SUFFIXES:
        df = pd.read_excel(path, dtype=object)
    elif suffix == ".csv":
        df = pd.read_csv(path, dtype=object)
    else:
        raise ValueError(f"Unsupported file type: {path.suffix}")
    # Empty cells become None rather than NaN
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def read_candidates(path: str | Path) -> list[CandidateRecord]:
    """Read CRM candidate records (Salesforce export or camelCase columns)."""
    return [CandidateRecord.from_mapping(row) for row in _read_rows(Path(path))]


def _pick(row: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = row.get(key)
        if value is None or (isinstance(value, float) and math.isnan(value)):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def read_queries(path: str | Path) -> list[MatchQuery]:
    """Read subject stores to look up. Rows without a street are skipped."""
    queries: list[MatchQuery] = []
    for row in _read_rows(Path(path)):
        values = {field: _pick(row, keys) for field, keys in QUERY_KEYS.items()}
        if not values["target_street"]:
            continue
        queries.append(MatchQuery(**values))
    return queries


def matches_to_frame(matches: list[ScoredMatch]) -> pd.DataFrame:
    rows = []
    for rank_no, m in enumerate(matches, start=1):
        rows.append({
            "rank": rank_no,
            "candidate_name": m.candidate_name,
            "brand_name": m.brand_name,
            "extracted_street": m.extracted_street,
            "name_score": round(m.name_score, 4),
            "address_score": round(m.address_score, 4),
            "combined_score": round(m.combined_score, 4),
            "year_built": m.year_built,
            "square_footage": m.square_footage,
        })
    return pd.DataFrame(rows, columns=[
        "rank", "candidate_name", "brand_name", "extracted_street",
        "name_score", "address_score", "combined_score",
        "year_built", "square_footage",
    ])


def write_matches(matches: list[ScoredMatch], path: str | Path) -> None:
    """Write ranked matches to CSV, Excel or JSONL."""
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".jsonl":
        with path.open("w", encoding="utf-8") as f:
            for m in matches:
                record = asdict(m)
                # Raw values may be anything the CRM handed us
                record["raw_year_built"] = _jsonable(m.raw_year_built)
                record["raw_square_footage"] = _jsonable(m.raw_square_footage)
                f.write(json.dumps(record) + "\n")
        return

    df = matches_to_frame(matches)
    if suffix in _EXCEL_SUFFIXES:
        df.to_excel(path, index=False)
    elif suffix == ".csv":
        df.to_csv(path, index=False)
    else:
        raise ValueError(f"Unsupported file type: {path.suffix}")


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    return str(value)
