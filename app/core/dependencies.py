from functools import lru_cache

from app.core.config import get_settings
from app.repositories.clinic import ClinicRepository
from app.services.search import SearchService
from app.services.cache import CacheService


# ============================================================
# REPOSITORIES
# ============================================================

@lru_cache()
def get_clinic_repo() -> ClinicRepository:
    return ClinicRepository()


# ============================================================
# SERVICES
# ============================================================

@lru_cache()
def get_cache_service() -> CacheService:
    return CacheService()


@lru_cache()
def get_search_service() -> SearchService:
    settings = get_settings()
    return SearchService(
        repo=get_clinic_repo(),
        cache=get_cache_service(),
        cache_ttl=settings.SEARCH_CACHE_TTL,
        fetch_timeout=settings.FETCH_TIMEOUT_SECONDS,
        max_sessions=settings.SESSION_CACHE_SIZE,
    )
