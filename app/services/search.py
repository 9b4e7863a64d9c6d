import logging
from typing import List, Optional

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import SupersededRequestError
from app.repositories.clinic import ClinicRepository
from app.services.assembler import ResultAssembler
from app.services.cache import CacheService, make_cache_key
from app.services.query_expander import MIN_QUERY_LENGTH, clean_query, expand_terms
from app.services.results import compute_results
from app.services.scoring import SearchContext, get_scorer
from app.services.sessions import SessionStore
from app.utils.text import is_zip_code, strip_open_now
from schemas.filters import FilterState, SortKey
from schemas.search import ClinicPage, FetchCriteria, SearchResults

logger = logging.getLogger(__name__)


class SearchService:
    def __init__(
        self,
        repo: ClinicRepository,
        cache: CacheService,
        cache_ttl: int = 300,
        fetch_timeout: Optional[float] = None,
        max_sessions: int = 1000,
    ):
        self.repo = repo
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.sessions = SessionStore(
            factory=lambda: ResultAssembler(
                self.fetch_clinics,
                scorer=get_scorer(SearchContext.LOCATION),
                timeout=fetch_timeout,
            ),
            max_sessions=max_sessions,
        )

    async def fetch_clinics(self, criteria: FetchCriteria) -> ClinicPage:
        """Read-through cached fetch from the record store."""
        key = make_cache_key("clinics", criteria.model_dump(mode="json"))
        cached = self.cache.get(key)
        if cached is not None:
            try:
                return ClinicPage.model_validate(cached)
            except ValidationError as exc:
                logger.warning("Ignoring unreadable cache entry %s: %s", key, exc)

        page = await run_in_threadpool(self.repo.fetch_clinics, criteria)
        self.cache.set(key, page.model_dump(mode="json"), ttl=self.cache_ttl)
        return page

    async def search_clinics(
        self,
        session_id: str,
        criteria: FetchCriteria,
        filters: FilterState,
    ) -> ResultAssembler:
        """
        Location-scoped listing for one browser session.

        A change of criteria triggers a fetch; a change of filters alone
        only recomputes from the session's retained candidates.
        Raises SupersededRequestError when a newer request from the same
        session won, and RecordStoreError when the fetch failed.
        """
        assembler = self.sessions.get(session_id)
        if assembler.criteria == criteria and assembler.last_error is None:
            assembler.apply(filters)
            return assembler

        results = await assembler.load(criteria, filters)
        if results is None:
            raise SupersededRequestError("A newer request replaced this one")
        return assembler

    async def unified_search(self, query: str, limit: int = 50) -> SearchResults:
        """Nationwide business search ranked by the name/city strategy."""
        query = (query or "").strip()
        if len(clean_query(query)) < MIN_QUERY_LENGTH:
            return SearchResults()

        if is_zip_code(query):
            criteria = FetchCriteria(postal_code=query, nationwide=True, per_page=limit)
        else:
            criteria = FetchCriteria(query=strip_open_now(query), nationwide=True, per_page=limit)

        page = await self.fetch_clinics(criteria)
        results = compute_results(
            page.records,
            FilterState(query=query, sort_by=SortKey.RELEVANCE),
            scorer=get_scorer(SearchContext.NATIONWIDE),
        )
        return SearchResults(scored=results.scored[:limit], fallback=results.fallback)

    @staticmethod
    def expand(query: str) -> List[str]:
        return sorted(expand_terms(query))
