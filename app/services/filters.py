"""Structured filter predicates, distance and sort order for clinic results."""

import math
from typing import Callable, Iterable, List, Optional

from schemas.clinic import ClinicRecord, Coordinate
from schemas.filters import FilterState, SortKey, SortOrder
from schemas.search import ScoredResult
from app.core.controlled_vocabulary import SPECIALTY_KEYWORDS
from app.utils.text import normalize

EARTH_RADIUS_MILES = 3958.8

Predicate = Callable[[ClinicRecord], bool]


def haversine_miles(a: Coordinate, b: Coordinate) -> float:
    lat1, lng1, lat2, lng2 = map(math.radians, (a.lat, a.lng, b.lat, b.lng))
    h = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(h))


def distance_from(origin: Optional[Coordinate], clinic: ClinicRecord) -> Optional[float]:
    if origin is None or clinic.location is None:
        return None
    return haversine_miles(origin, clinic.location)


def matches_service(clinic: ClinicRecord, keywords: Iterable[str]) -> bool:
    """True when any keyword appears in the clinic name or its mentioned services."""
    name = normalize(clinic.name)
    mentioned = [normalize(s) for s in (clinic.services or ())]
    if clinic.website_services:
        mentioned.extend(normalize(s) for s in clinic.website_services.mentioned_services)
    for keyword in keywords:
        kw = normalize(keyword)
        if kw and (kw in name or any(kw in s for s in mentioned)):
            return True
    return False


def refinement_predicates(filters: FilterState, open_now: bool) -> List[Predicate]:
    """Predicates that narrow a location's clinics: rating, amenities, hours, services."""
    predicates: List[Predicate] = []

    if filters.min_rating is not None:
        predicates.append(lambda c: (c.rating or 0) >= filters.min_rating)
    if open_now:
        predicates.append(lambda c: c.open_now is True)
    if filters.wheelchair_accessible:
        predicates.append(
            lambda c: c.accessibility is not None and c.accessibility.wheelchair_accessible_entrance is True
        )
    if filters.free_parking:
        predicates.append(lambda c: c.parking is not None and c.parking.free_parking_lot is True)
    if filters.has_website:
        predicates.append(lambda c: bool((c.website or "").strip()))
    if filters.has_phone:
        predicates.append(lambda c: bool((c.phone or "").strip()))
    if filters.has_online_booking:
        predicates.append(
            lambda c: c.website_services is not None and c.website_services.has_online_booking is True
        )
    if filters.has_telehealth:
        predicates.append(
            lambda c: c.website_services is not None and c.website_services.has_telehealth is True
        )
    if filters.services:
        predicates.append(lambda c: matches_service(c, filters.services))
    for flag in ("pediatric", "cosmetic", "mohs_surgery"):
        if getattr(filters, flag):
            keywords = SPECIALTY_KEYWORDS[flag]
            predicates.append(lambda c, kw=keywords: matches_service(c, kw))

    return predicates


def scope_predicates(filters: FilterState) -> List[Predicate]:
    """Predicates that define where the user is looking."""
    if not filters.states:
        return []
    return [lambda c: c.state is not None and c.state.upper() in filters.states]


def apply_predicates(items: Iterable[ScoredResult], predicates: List[Predicate]) -> List[ScoredResult]:
    return [item for item in items if all(predicate(item.clinic) for predicate in predicates)]


def sort_results(
    items: List[ScoredResult],
    filters: FilterState,
    ranked: bool,
) -> List[ScoredResult]:
    """
    Order results without disturbing ties.

    With no explicit sort key, relevance governs when a text query scored
    the results, otherwise rating descending. sorted() is stable even with
    reverse=True, so equal keys keep their input order.
    """
    sort_by = filters.sort_by
    if sort_by is None:
        sort_by = SortKey.RELEVANCE if ranked else SortKey.RATING
        descending = True
    else:
        descending = filters.sort_order is SortOrder.DESC

    if sort_by is SortKey.RELEVANCE:
        if not ranked:
            return list(items)
        return sorted(items, key=lambda item: item.score, reverse=descending)
    if sort_by is SortKey.RATING:
        return sorted(items, key=lambda item: item.clinic.rating or 0, reverse=descending)
    if sort_by is SortKey.REVIEWS:
        return sorted(items, key=lambda item: item.clinic.review_count or 0, reverse=descending)
    if sort_by is SortKey.NAME:
        return sorted(items, key=lambda item: normalize(item.clinic.name), reverse=descending)

    # Distance is always nearest first; clinics without a location go last.
    if filters.origin is None:
        return list(items)
    located = [item for item in items if item.clinic.location is not None]
    unlocated = [item for item in items if item.clinic.location is None]
    located.sort(key=lambda item: haversine_miles(filters.origin, item.clinic.location))
    return located + unlocated
