"""FastAPI server exposing store metadata lookups."""

from typing import Any

import structlog
from fastapi import FastAPI, HTTPException
from pydantic import AliasChoices, BaseModel, Field

from storematch.config import MatchConfig
from storematch.matcher import StoreMatcher
from storematch.normalize import normalize_address
from storematch.types import (
    ADDRESS_KEYS,
    NAME_KEYS,
    QUERY_KEYS,
    SQFT_KEYS,
    YEAR_KEYS,
    CandidateRecord,
    MatchQuery,
    ScoredMatch,
)

log = structlog.get_logger()


class QueryModel(BaseModel):
    """Subject store. City/state/postal code are echoed, not scored.

    Accepts snake_case, camelCase and the stores-file column names.
    """

    street: str = Field(validation_alias=AliasChoices(*QUERY_KEYS["target_street"]))
    store_name: str | None = Field(
        default=None, validation_alias=AliasChoices(*QUERY_KEYS["target_store_name"])
    )
    city: str | None = None
    state: str | None = None
    postal_code: str | None = Field(
        default=None, validation_alias=AliasChoices(*QUERY_KEYS["postal_code"])
    )

    def to_query(self) -> MatchQuery:
        return MatchQuery(
            target_street=self.street,
            target_store_name=self.store_name,
            city=self.city,
            state=self.state,
            postal_code=self.postal_code,
        )


class CandidateModel(BaseModel):
    """A CRM record as sent by the caller, in any of the CRM spellings."""

    name: Any = Field(default=None, validation_alias=AliasChoices(*NAME_KEYS))
    shipping_address: dict[str, Any] | str | None = Field(
        default=None, validation_alias=AliasChoices(*ADDRESS_KEYS)
    )
    year_built: Any = Field(default=None, validation_alias=AliasChoices(*YEAR_KEYS))
    square_footage: Any = Field(default=None, validation_alias=AliasChoices(*SQFT_KEYS))

    def to_record(self) -> CandidateRecord:
        return CandidateRecord.from_mapping(self.model_dump())


class MatchRequest(BaseModel):
    query: QueryModel
    candidates: list[CandidateModel] | None = None


class ScoredMatchResponse(BaseModel):
    candidate_name: str
    brand_name: str
    extracted_street: str
    name_score: float
    address_score: float
    combined_score: float
    raw_year_built: Any = None
    raw_square_footage: Any = None
    year_built: int | None
    square_footage: float | None

    @classmethod
    def from_match(cls, m: ScoredMatch) -> "ScoredMatchResponse":
        return cls(
            candidate_name=m.candidate_name,
            brand_name=m.brand_name,
            extracted_street=m.extracted_street,
            name_score=m.name_score,
            address_score=m.address_score,
            combined_score=m.combined_score,
            raw_year_built=m.raw_year_built,
            raw_square_footage=m.raw_square_footage,
            year_built=m.year_built,
            square_footage=m.square_footage,
        )


class MetadataResponse(BaseModel):
    year_built: int | None
    square_footage: float | None
    source_name: str
    combined_score: float


def create_app(
    candidates: list[CandidateRecord] | None = None,
    config: MatchConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    ``candidates`` is the CRM extract used when a request carries none.
    """
    app = FastAPI(title="storematch")
    matcher = StoreMatcher(config)
    loaded: list[CandidateRecord] = list(candidates or [])
    log.info("server_candidates_loaded", count=len(loaded))

    def _candidates_for(req: MatchRequest) -> list[CandidateRecord]:
        if req.candidates is not None:
            return [c.to_record() for c in req.candidates]
        return loaded

    @app.get("/api/health")
    async def health() -> dict[str, Any]:
        return {"healthy": True, "candidates": len(loaded)}

    @app.get("/api/normalize")
    async def normalize(address: str = "") -> dict[str, str]:
        return {"address": address, "normalized": normalize_address(address)}

    @app.post("/api/matches")
    async def matches(req: MatchRequest) -> list[ScoredMatchResponse]:
        """Rank candidates against the subject store."""
        if not req.query.street.strip():
            raise HTTPException(status_code=400, detail="street cannot be empty")
        ranked = matcher.rank(req.query.to_query(), _candidates_for(req))
        log.info(
            "api_matches",
            store_name=req.query.store_name,
            returned=len(ranked),
        )
        return [ScoredMatchResponse.from_match(m) for m in ranked]

    @app.post("/api/metadata")
    async def metadata(req: MatchRequest) -> MetadataResponse:
        """Auto-accept year built / square footage for the subject store."""
        if not req.query.street.strip():
            raise HTTPException(status_code=400, detail="street cannot be empty")
        found = matcher.lookup_metadata(req.query.to_query(), _candidates_for(req))
        if found is None:
            raise HTTPException(status_code=404, detail="No matching store metadata")
        return MetadataResponse(
            year_built=found.year_built,
            square_footage=found.square_footage,
            source_name=found.source_name,
            combined_score=found.combined_score,
        )

    return app
