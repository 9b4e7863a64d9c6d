import logging
import uuid
from typing import List, Optional

import sentry_sdk
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings
from app.core.dependencies import get_search_service
from app.core.exceptions import RecordStoreError, SupersededRequestError
from app.services.assembler import ResultAssembler
from app.services.filters import distance_from
from app.services.search import SearchService
from schemas.clinic import Coordinate
from schemas.filters import FilterState, SortKey, SortOrder
from schemas.search import ClinicHit, ClinicSearchResponse, FetchCriteria

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/clinics", tags=["clinics"])
limiter = Limiter(key_func=get_remote_address)


def get_or_create_session(request: Request, response: Response) -> str:
    session_id = request.cookies.get("session_id")
    if not session_id:
        session_id = str(uuid.uuid4())
        response.set_cookie("session_id", session_id, max_age=60 * 60 * 24 * 365, httponly=True)
    return session_id


def build_response(assembler: ResultAssembler, error: Optional[str] = None) -> ClinicSearchResponse:
    criteria = assembler.criteria or FetchCriteria()
    origin = assembler.filters.origin
    results = assembler.results
    return ClinicSearchResponse(
        clinics=[
            ClinicHit(
                **item.clinic.model_dump(),
                relevance_score=item.score,
                distance_miles=distance_from(origin, item.clinic),
            )
            for item in results.scored
        ],
        total=len(results.scored),
        page=criteria.page,
        per_page=criteria.per_page,
        fell_back_to_unfiltered=results.fell_back_to_unfiltered,
        fallback=results.fallback,
        error=error,
    )


# -------------------------------------------------------------------
# LOCATION-SCOPED LISTING
# -------------------------------------------------------------------
@router.get("", response_model=ClinicSearchResponse)
@limiter.limit(settings.RATE_LIMIT)
async def list_clinics(
    request: Request,
    response: Response,
    state: Optional[str] = Query(None, min_length=2, max_length=2),
    city: Optional[str] = Query(None, max_length=100),
    q: Optional[str] = Query(None, max_length=100),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius_miles: float = Query(25, gt=0, le=500),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=settings.MAX_PER_PAGE),
    rating_min: Optional[float] = Query(None, ge=0, le=5),
    open_now: bool = False,
    wheelchair_accessible: bool = False,
    free_parking: bool = False,
    has_website: bool = False,
    has_phone: bool = False,
    has_online_booking: bool = False,
    has_telehealth: bool = False,
    pediatric: bool = False,
    cosmetic: bool = False,
    mohs_surgery: bool = False,
    states: List[str] = Query(default=[]),
    services: Optional[str] = Query(None, description="Comma-separated service keywords"),
    sort_by: Optional[SortKey] = None,
    sort_order: SortOrder = SortOrder.DESC,
    service: SearchService = Depends(get_search_service),
):
    """
    Clinics for a location, refined by text query and filters.

    The query text is scored in-process; it is not sent to the record
    store, so synonyms and typos can still match.
    """
    session_id = get_or_create_session(request, response)
    origin = Coordinate(lat=lat, lng=lng) if lat is not None and lng is not None else None

    criteria = FetchCriteria(
        state=state,
        city=city,
        origin=origin,
        radius_miles=radius_miles,
        page=page,
        per_page=per_page,
    )
    filters = FilterState(
        query=q or "",
        min_rating=rating_min,
        open_now=open_now,
        wheelchair_accessible=wheelchair_accessible,
        free_parking=free_parking,
        states=states,
        sort_by=sort_by,
        sort_order=sort_order,
        has_website=has_website,
        has_phone=has_phone,
        has_online_booking=has_online_booking,
        has_telehealth=has_telehealth,
        services=tuple(s.strip() for s in (services or "").split(",") if s.strip()),
        pediatric=pediatric,
        cosmetic=cosmetic,
        mohs_surgery=mohs_surgery,
        origin=origin,
    )

    try:
        assembler = await service.search_clinics(session_id, criteria, filters)
    except SupersededRequestError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RecordStoreError as e:
        sentry_sdk.capture_exception(e)
        assembler = service.sessions.get(session_id)
        if not assembler.results.scored:
            raise HTTPException(status_code=503, detail="Failed to fetch clinics")
        logger.warning("Serving previous results for session after fetch failure")
        return build_response(assembler, error="Failed to fetch clinics")

    return build_response(assembler)
