from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from schemas.clinic import ClinicRecord, Coordinate


class FetchCriteria(BaseModel):
    """
    Hints passed to the record store to shrink the candidate set.

    The store may ignore any of them; results are always scored and
    filtered again in-process.
    """

    model_config = ConfigDict(frozen=True)

    state: Optional[str] = None
    city: Optional[str] = None
    query: Optional[str] = None
    postal_code: Optional[str] = None
    origin: Optional[Coordinate] = None
    radius_miles: float = Field(default=25, gt=0)
    nationwide: bool = False
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=500, ge=1)

    @property
    def has_location_context(self) -> bool:
        return bool(self.state or self.city)

    def without_origin(self) -> "FetchCriteria":
        return self.model_copy(update={"origin": None})


class ClinicPage(BaseModel):
    records: Tuple[ClinicRecord, ...] = ()
    total: int = 0


class ScoredResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    clinic: ClinicRecord
    score: float = Field(default=0.0, ge=0)


class FallbackLevel(str, Enum):
    NONE = "none"
    RELAXED_FILTERS = "relaxed_filters"
    LOCATION_ONLY = "location_only"
    UNFILTERED = "unfiltered"


class SearchResults(BaseModel):
    model_config = ConfigDict(frozen=True)

    scored: Tuple[ScoredResult, ...] = ()
    fallback: FallbackLevel = FallbackLevel.NONE

    @property
    def results(self) -> List[ClinicRecord]:
        return [item.clinic for item in self.scored]

    @property
    def fell_back_to_unfiltered(self) -> bool:
        return self.fallback is not FallbackLevel.NONE


# ============================================================
# API RESPONSES
# ============================================================

class ClinicHit(ClinicRecord):
    relevance_score: float = 0.0
    distance_miles: Optional[float] = None


class ClinicSearchResponse(BaseModel):
    clinics: List[ClinicHit]
    total: int
    page: int
    per_page: int
    fell_back_to_unfiltered: bool = False
    fallback: FallbackLevel = FallbackLevel.NONE
    error: Optional[str] = None


class UnifiedSearchResponse(BaseModel):
    clinics: List[ClinicHit]
    query: str
    total: int


class ExpandedTermsResponse(BaseModel):
    query: str
    terms: List[str]
