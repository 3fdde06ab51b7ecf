"""Ranking of CRM candidates against a subject store."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from storematch.config import MatchConfig
from storematch.extract import extract_fields
from storematch.normalize import normalize_address
from storematch.sanitize import sanitize_square_footage, sanitize_year_built
from storematch.scoring import similarity
from storematch.types import (
    CandidateRecord,
    MatchQuery,
    RankStats,
    ScoredMatch,
    StoreMetadata,
)

log = structlog.get_logger()


def _as_record(candidate: Any) -> CandidateRecord | None:
    if isinstance(candidate, CandidateRecord):
        return candidate
    if isinstance(candidate, Mapping):
        return CandidateRecord.from_mapping(candidate)
    return None


def score_candidate(
    query: MatchQuery,
    record: CandidateRecord,
    config: MatchConfig,
    position: int = 0,
) -> ScoredMatch | None:
    """Score one candidate, or None if it has no usable street."""
    fields = extract_fields(record, config.extraction)
    if fields is None:
        return None

    candidate_name = "" if record.name is None else str(record.name)
    target_name = query.target_store_name or ""
    full_name_score = similarity(target_name, candidate_name)
    brand_score = similarity(target_name, fields.brand)
    name_score = max(full_name_score, brand_score)

    address_score = similarity(
        normalize_address(query.target_street),
        normalize_address(fields.street),
    )

    weights = config.scoring
    combined = weights.name * name_score + weights.address * address_score

    return ScoredMatch(
        candidate_name=candidate_name,
        brand_name=fields.brand,
        extracted_street=fields.street,
        name_score=name_score,
        address_score=address_score,
        combined_score=combined,
        raw_year_built=record.year_built,
        raw_square_footage=record.square_footage,
        year_built=sanitize_year_built(record.year_built, config.sanitize),
        square_footage=sanitize_square_footage(record.square_footage),
        position=position,
    )


def _is_relevant(match: ScoredMatch, config: MatchConfig) -> bool:
    t = config.thresholds
    return match.combined_score > t.min_combined or match.address_score > t.min_address


def rank(
    query: MatchQuery,
    candidates: Iterable[CandidateRecord | Mapping[str, Any]],
    config: MatchConfig | None = None,
    stats: RankStats | None = None,
) -> list[ScoredMatch]:
    """Rank candidates by combined name/address score, best first.

    Candidates without a street, or clearing neither relevance bar, are
    dropped. Ties keep input order. At most ``config.ranking.top_n`` matches
    are returned.
    """
    config = config or MatchConfig()
    stats = stats if stats is not None else RankStats()

    log.debug(
        "rank_start",
        target_store_name=query.target_store_name,
        target_street=query.target_street,
    )

    kept: list[ScoredMatch] = []
    for position, candidate in enumerate(candidates):
        stats.candidates += 1
        record = _as_record(candidate)
        match = score_candidate(query, record, config, position) if record is not None else None
        if match is None:
            stats.no_street += 1
            log.debug("candidate_no_street", position=position)
            continue
        if not _is_relevant(match, config):
            stats.filtered_out += 1
            continue
        kept.append(match)

    kept.sort(key=lambda m: m.combined_score, reverse=True)
    top = kept[: config.ranking.top_n]
    stats.returned += len(top)

    log.debug(
        "rank_done",
        candidates=stats.candidates,
        relevant=len(kept),
        returned=len(top),
        best_score=round(top[0].combined_score, 4) if top else None,
    )
    return top


class StoreMatcher:
    """Looks up year built / square footage for subject stores."""

    def __init__(self, config: MatchConfig | None = None) -> None:
        self.config = config or MatchConfig()
        self.stats = RankStats()

    def rank(
        self,
        query: MatchQuery,
        candidates: Iterable[CandidateRecord | Mapping[str, Any]],
    ) -> list[ScoredMatch]:
        return rank(query, candidates, self.config, self.stats)

    def lookup_metadata(
        self,
        query: MatchQuery,
        candidates: Iterable[CandidateRecord | Mapping[str, Any]],
    ) -> StoreMetadata | None:
        """Auto-accept the best match that carries usable metadata."""
        for match in self.rank(query, candidates):
            if match.year_built is None and match.square_footage is None:
                continue
            log.info(
                "metadata_accepted",
                target_store_name=query.target_store_name,
                source_name=match.candidate_name,
                combined_score=round(match.combined_score, 4),
                year_built=match.year_built,
                square_footage=match.square_footage,
            )
            return StoreMetadata(
                year_built=match.year_built,
                square_footage=match.square_footage,
                source_name=match.candidate_name,
                combined_score=match.combined_score,
            )

        log.info(
            "metadata_not_found",
            target_store_name=query.target_store_name,
            target_street=query.target_street,
        )
        return None

    def lookup_many(
        self,
        queries: Iterable[MatchQuery],
        candidates: Iterable[CandidateRecord | Mapping[str, Any]],
    ) -> list[StoreMetadata | None]:
        """Run lookup_metadata for each query against the same candidates."""
        records = list(candidates)
        results: list[StoreMetadata | None] = []
        for i, query in enumerate(queries):
            results.append(self.lookup_metadata(query, records))
            if (i + 1) % 100 == 0:
                log.info("lookup_progress", processed=i + 1)
        return results
