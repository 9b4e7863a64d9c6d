from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Tuple


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class AccessibilityOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    wheelchair_accessible_entrance: Optional[bool] = None
    wheelchair_accessible_parking: Optional[bool] = None
    wheelchair_accessible_restroom: Optional[bool] = None
    wheelchair_accessible_seating: Optional[bool] = None


class ParkingOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    free_parking_lot: Optional[bool] = None
    paid_parking_lot: Optional[bool] = None
    free_street_parking: Optional[bool] = None
    paid_street_parking: Optional[bool] = None
    valet_parking: Optional[bool] = None
    free_garage_parking: Optional[bool] = None
    paid_garage_parking: Optional[bool] = None


class OpeningHours(BaseModel):
    model_config = ConfigDict(frozen=True)

    weekday_text: Tuple[str, ...] = ()


class WebsiteServices(BaseModel):
    model_config = ConfigDict(frozen=True)

    mentioned_services: Tuple[str, ...] = ()
    has_online_booking: Optional[bool] = None
    has_telehealth: Optional[bool] = None
    has_patient_portal: Optional[bool] = None
    insurance_mentioned: Optional[bool] = None


class ClinicRecord(BaseModel):
    """
    One clinic as delivered by the record store.

    Read-only and hashable by value. Every field except the identifier is
    optional; a missing field only shrinks what a query can match.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    name: str = ""
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    category: Optional[str] = None
    tags: Tuple[str, ...] = ()
    services: Optional[Tuple[str, ...]] = None
    description: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    review_count: Optional[int] = Field(default=None, ge=0)
    business_status: Optional[str] = None
    location: Optional[Coordinate] = None
    open_now: Optional[bool] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    accessibility: Optional[AccessibilityOptions] = None
    parking: Optional[ParkingOptions] = None
    opening_hours: Optional[OpeningHours] = None
    website_services: Optional[WebsiteServices] = None
