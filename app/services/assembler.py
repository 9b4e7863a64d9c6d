"""
Result assembler: fetch, retain, recompute.

    IDLE -> FETCHING -> SCORING -> SORTING -> READY
                 \\
                  -> ERROR   (previous results stay visible)

Each load() and apply() takes a new generation number. A fetch that
completes after a newer request started is stale and is dropped, whether
it succeeded or failed, so the most recent request always wins. The
assembler never retries; transport errors go back to the caller.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple

from schemas.clinic import ClinicRecord
from schemas.filters import FilterState
from schemas.search import ClinicPage, FetchCriteria, SearchResults
from app.core.exceptions import RecordStoreError
from app.services.filters import sort_results
from app.services.results import select_results
from app.services.scoring import RelevanceScorer, get_scorer

logger = logging.getLogger(__name__)

Fetcher = Callable[[FetchCriteria], Awaitable[ClinicPage]]


class AssemblerState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SCORING = "scoring"
    SORTING = "sorting"
    READY = "ready"
    ERROR = "error"


class ResultAssembler:
    def __init__(
        self,
        fetch: Fetcher,
        scorer: Optional[RelevanceScorer] = None,
        timeout: Optional[float] = None,
    ):
        self._fetch = fetch
        self.scorer = scorer or get_scorer()
        self.timeout = timeout

        self.state = AssemblerState.IDLE
        self.criteria: Optional[FetchCriteria] = None
        self.filters = FilterState()
        self.candidates: Tuple[ClinicRecord, ...] = ()
        self.total = 0
        self.results = SearchResults()
        self.last_error: Optional[RecordStoreError] = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _fetch_page(self, criteria: FetchCriteria) -> ClinicPage:
        try:
            if self.timeout is None:
                return await self._fetch(criteria)
            return await asyncio.wait_for(self._fetch(criteria), self.timeout)
        except asyncio.TimeoutError as exc:
            raise RecordStoreError(f"Clinic fetch timed out after {self.timeout}s") from exc

    async def load(
        self,
        criteria: FetchCriteria,
        filters: Optional[FilterState] = None,
    ) -> Optional[SearchResults]:
        """
        Fetch candidates for criteria and recompute results.

        Returns the new results, or None when a newer load() superseded
        this one. Raises RecordStoreError on transport failure; the
        previously held results are left untouched.
        """
        self._generation += 1
        generation = self._generation
        self.state = AssemblerState.FETCHING

        try:
            page = await self._fetch_page(criteria)
            if not page.records and criteria.origin is not None and self.is_current(generation):
                logger.info("Nothing near the requested coordinates, fetching without them")
                page = await self._fetch_page(criteria.without_origin())
        except RecordStoreError as exc:
            if not self.is_current(generation):
                logger.debug("Dropping failure of superseded fetch %d", generation)
                return None
            self.state = AssemblerState.ERROR
            self.last_error = exc
            logger.warning("Clinic fetch failed, keeping %d previous results: %s", len(self.results.scored), exc)
            raise
        except Exception:
            if self.is_current(generation):
                self.state = AssemblerState.ERROR
            logger.exception("Unexpected failure while fetching clinics")
            raise

        if not self.is_current(generation):
            logger.debug("Dropping stale fetch %d (current is %d)", generation, self._generation)
            return None

        self.criteria = criteria
        self.candidates = tuple(page.records)
        self.total = page.total
        self.last_error = None
        logger.debug("Fetched %d of %d clinics", len(self.candidates), self.total)
        return self.apply(filters if filters is not None else self.filters)

    def apply(self, filters: FilterState) -> SearchResults:
        """
        Recompute results from the retained full candidate set.

        Counts as a new request: any load() still in flight becomes stale.
        """
        self._generation += 1
        self.filters = filters
        self.state = AssemblerState.SCORING
        selection = select_results(self.candidates, filters, self.scorer)
        self.state = AssemblerState.SORTING
        ordered = sort_results(list(selection.items), filters, selection.ranked)
        self.results = SearchResults(scored=tuple(ordered), fallback=selection.fallback)
        self.state = AssemblerState.READY
        return self.results
