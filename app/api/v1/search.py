import logging

import sentry_sdk
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings
from app.core.dependencies import get_search_service
from app.core.exceptions import RecordStoreError
from app.services.search import SearchService
from schemas.search import ClinicHit, ExpandedTermsResponse, UnifiedSearchResponse

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/search", tags=["search"])
limiter = Limiter(key_func=get_remote_address)


# ============================================================
# UNIFIED (NATIONWIDE) SEARCH
# ============================================================

@router.get("/unified", response_model=UnifiedSearchResponse)
@limiter.limit(settings.RATE_LIMIT)
async def unified(
    request: Request,
    q: str = Query("", max_length=100),
    limit: int = Query(settings.UNIFIED_SEARCH_LIMIT, ge=1),
    service: SearchService = Depends(get_search_service),
):
    """
    Search the whole directory by business name, city, address or ZIP.

    Queries shorter than two characters return an empty list.
    """
    limit = min(limit, settings.MAX_UNIFIED_SEARCH_LIMIT)
    try:
        results = await service.unified_search(q, limit=limit)
    except RecordStoreError as e:
        sentry_sdk.capture_exception(e)
        raise HTTPException(status_code=503, detail="Failed to search clinics")

    clinics = [
        ClinicHit(**item.clinic.model_dump(), relevance_score=item.score)
        for item in results.scored
    ]
    return UnifiedSearchResponse(clinics=clinics, query=q, total=len(clinics))


# ============================================================
# QUERY EXPANSION (DEBUG / AUTOCOMPLETE)
# ============================================================

@router.get("/expand", response_model=ExpandedTermsResponse)
@limiter.limit(settings.RATE_LIMIT)
async def expand(
    request: Request,
    q: str = Query("", max_length=100),
    service: SearchService = Depends(get_search_service),
):
    return ExpandedTermsResponse(query=q, terms=service.expand(q))
