import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from app.core.controlled_vocabulary import VALID_US_STATES
from app.repositories.base import BaseRepository
from app.services.opening_hours import is_open_now
from schemas.clinic import ClinicRecord
from schemas.search import ClinicPage, FetchCriteria

logger = logging.getLogger(__name__)

MILES_PER_DEGREE_LAT = 69.0

ACCESSIBILITY_KEYS = {
    "wheelchairAccessibleEntrance": "wheelchair_accessible_entrance",
    "wheelchairAccessibleParking": "wheelchair_accessible_parking",
    "wheelchairAccessibleRestroom": "wheelchair_accessible_restroom",
    "wheelchairAccessibleSeating": "wheelchair_accessible_seating",
}

PARKING_KEYS = {
    "freeParkingLot": "free_parking_lot",
    "paidParkingLot": "paid_parking_lot",
    "freeStreetParking": "free_street_parking",
    "paidStreetParking": "paid_street_parking",
    "valetParking": "valet_parking",
    "freeGarageParking": "free_garage_parking",
    "paidGarageParking": "paid_garage_parking",
}


def _snake_case_options(raw: Optional[Dict[str, Any]], keys: Dict[str, str]) -> Optional[Dict[str, Any]]:
    """DB JSONB uses camelCase keys; the API uses snake_case."""
    if not raw:
        return None
    return {snake: raw.get(camel, raw.get(snake)) for camel, snake in keys.items()}


def row_to_clinic(row: Dict[str, Any], now: Optional[datetime] = None) -> ClinicRecord:
    state = (row.get("state_code") or "").upper() or None
    opening_hours = row.get("opening_hours") or {}
    weekday_text = opening_hours.get("weekday_text") or []
    website_services = row.get("website_services") or {}
    location = row.get("location") or {}

    if weekday_text:
        open_now: Optional[bool] = is_open_now(weekday_text, state, now)
    else:
        open_now = opening_hours.get("open_now")

    return ClinicRecord(
        id=str(row.get("place_id") or row.get("id")),
        name=row.get("display_name") or "",
        address=row.get("formatted_address"),
        city=row.get("city"),
        state=state,
        postal_code=row.get("postal_code"),
        category=row.get("primary_type"),
        tags=tuple(row.get("types") or ()),
        services=tuple(row.get("services") or website_services.get("mentioned_services") or ()) or None,
        description=row.get("description"),
        rating=row.get("rating"),
        review_count=row.get("user_rating_count"),
        business_status=row.get("business_status"),
        location=location if location.get("lat") is not None and location.get("lng") is not None else None,
        open_now=open_now,
        phone=row.get("phone"),
        website=row.get("website"),
        accessibility=_snake_case_options(row.get("accessibility_options"), ACCESSIBILITY_KEYS),
        parking=_snake_case_options(row.get("parking_options"), PARKING_KEYS),
        opening_hours={"weekday_text": tuple(weekday_text)} if weekday_text else None,
        website_services={
            "mentioned_services": tuple(website_services.get("mentioned_services") or ()),
            "has_online_booking": website_services.get("has_online_booking"),
            "has_telehealth": website_services.get("has_telehealth"),
            "has_patient_portal": website_services.get("has_patient_portal"),
            "insurance_mentioned": website_services.get("insurance_mentioned"),
        } if website_services else None,
    )


class ClinicRepository(BaseRepository):
    """
    Record store for clinics.

    Criteria are hints that shrink the candidate set; scoring and
    filtering happen afterwards in the search core.
    """

    def build_query(self, criteria: FetchCriteria) -> Tuple[str, tuple]:
        clauses: List[str] = ["state_code = ANY(%s)"]
        params: List[Any] = [sorted(VALID_US_STATES)]

        if criteria.state:
            clauses.append("state_code = %s")
            params.append(criteria.state.upper())

        if criteria.city:
            clauses.append("city ILIKE %s")
            params.append(f"%{criteria.city}%")

        if criteria.postal_code:
            clauses.append("postal_code = %s")
            params.append(criteria.postal_code)

        if criteria.query:
            term = f"%{criteria.query}%"
            if criteria.nationwide or not criteria.has_location_context:
                # Nationwide: cast a broader net, the core refines.
                clauses.append(
                    "(display_name ILIKE %s OR formatted_address ILIKE %s OR primary_type ILIKE %s"
                    " OR city ILIKE %s OR state_code ILIKE %s)"
                )
                params.extend([term] * 5)
            else:
                clauses.append("(display_name ILIKE %s OR formatted_address ILIKE %s)")
                params.extend([term] * 2)

        if criteria.origin is not None:
            lat_delta = criteria.radius_miles / MILES_PER_DEGREE_LAT
            lng_delta = lat_delta / max(0.01, abs(math.cos(math.radians(criteria.origin.lat))))
            clauses.append(
                "(location->>'lat')::float BETWEEN %s AND %s AND (location->>'lng')::float BETWEEN %s AND %s"
            )
            params.extend([
                criteria.origin.lat - lat_delta,
                criteria.origin.lat + lat_delta,
                criteria.origin.lng - lng_delta,
                criteria.origin.lng + lng_delta,
            ])

        sql = f"""
            SELECT *, COUNT(*) OVER() AS total_count
            FROM clinics
            WHERE {' AND '.join(clauses)}
            ORDER BY rating DESC NULLS LAST
            LIMIT %s OFFSET %s
        """
        params.extend([criteria.per_page, (criteria.page - 1) * criteria.per_page])
        return sql, tuple(params)

    def fetch_clinics(self, criteria: FetchCriteria) -> ClinicPage:
        sql, params = self.build_query(criteria)
        rows = self.fetchall(sql, params)

        total = int(rows[0]["total_count"]) if rows else 0
        records = []
        for row in rows:
            # Only US states are listed, even if the store ignored the WHERE clause.
            if (row.get("state_code") or "").upper() not in VALID_US_STATES:
                total -= 1
                continue
            records.append(row_to_clinic(row))

        logger.info("Fetched %d clinics (total %d)", len(records), total)
        return ClinicPage(records=tuple(records), total=max(total, 0))
