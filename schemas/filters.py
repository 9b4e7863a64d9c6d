from enum import Enum
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.clinic import Coordinate


class SortKey(str, Enum):
    RATING = "rating"
    REVIEWS = "reviews"
    NAME = "name"
    RELEVANCE = "relevance"
    DISTANCE = "distance"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FilterState(BaseModel):
    """
    The active constraints for one recomputation.

    Frozen: a filter change builds a new FilterState with replace(), the
    old one stays valid for undo or replay.
    """

    model_config = ConfigDict(frozen=True)

    query: str = ""
    min_rating: Optional[float] = Field(default=None, ge=0, le=5)
    open_now: bool = False
    wheelchair_accessible: bool = False
    free_parking: bool = False
    states: FrozenSet[str] = frozenset()
    sort_by: Optional[SortKey] = None
    sort_order: SortOrder = SortOrder.DESC

    has_website: bool = False
    has_phone: bool = False
    has_online_booking: bool = False
    has_telehealth: bool = False
    services: Tuple[str, ...] = ()
    pediatric: bool = False
    cosmetic: bool = False
    mohs_surgery: bool = False
    origin: Optional[Coordinate] = None

    @field_validator("states", mode="before")
    @classmethod
    def _upper_states(cls, value):
        return frozenset(code.strip().upper() for code in (value or ()) if code and code.strip())

    def replace(self, **changes) -> "FilterState":
        """Return a new FilterState with the given fields changed."""
        return self.model_validate({**self.model_dump(), **changes})
