"""Shared pytest configuration and fixtures for clinic search tests."""

import asyncio
from typing import Dict, List, Optional

import pytest

from app.core.exceptions import RecordStoreError
from app.services.cache import CacheService
from app.services.search import SearchService
from schemas.clinic import ClinicRecord
from schemas.search import ClinicPage, FetchCriteria


def make_clinic(id: str, **fields) -> ClinicRecord:
    """Build a ClinicRecord; tests only spell out the fields they care about."""
    return ClinicRecord(id=id, **fields)


class FakeClinicStore:
    """
    In-memory async record store for assembler tests.

    pages maps criteria to records; gates hold a fetch open until the test
    sets the matching asyncio.Event, so completions can be reordered.
    """

    def __init__(self, records: Optional[List[ClinicRecord]] = None):
        self.default = list(records or [])
        self.pages: Dict[FetchCriteria, List[ClinicRecord]] = {}
        self.gates: Dict[FetchCriteria, asyncio.Event] = {}
        self.errors: Dict[FetchCriteria, Exception] = {}
        self.calls: List[FetchCriteria] = []

    async def fetch(self, criteria: FetchCriteria) -> ClinicPage:
        self.calls.append(criteria)
        gate = self.gates.get(criteria)
        if gate is not None:
            await gate.wait()
        if criteria in self.errors:
            raise self.errors[criteria]
        records = self.pages.get(criteria, self.default)
        return ClinicPage(records=tuple(records), total=len(records))


class FakeClinicRepository:
    """Synchronous stand-in for ClinicRepository."""

    def __init__(self, records: Optional[List[ClinicRecord]] = None):
        self.records = list(records or [])
        self.fail = False
        self.calls: List[FetchCriteria] = []

    def fetch_clinics(self, criteria: FetchCriteria) -> ClinicPage:
        self.calls.append(criteria)
        if self.fail:
            raise RecordStoreError("Failed to fetch clinics: connection refused")
        return ClinicPage(records=tuple(self.records), total=len(self.records))


class FakeRedis:
    """Dict-backed subset of the redis client API used by CacheService."""

    def __init__(self):
        self.store: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl


@pytest.fixture
def sample_clinics():
    """A small directory spanning two states."""
    return [
        make_clinic(
            "austin-derm",
            name="Austin Dermatology Associates",
            address="100 Congress Ave, Austin, TX 78701",
            city="Austin",
            state="TX",
            postal_code="78701",
            category="dermatologist",
            tags=("dermatologist", "health"),
            services=("Eczema treatment", "Acne treatment", "Skin cancer screening"),
            rating=4.8,
            review_count=320,
            business_status="OPERATIONAL",
            open_now=True,
        ),
        make_clinic(
            "glow-spa",
            name="Glow Med Spa",
            address="22 Lamar Blvd, Austin, TX 78704",
            city="Austin",
            state="TX",
            postal_code="78704",
            category="beauty_salon",
            tags=("spa",),
            services=("Botox", "Fillers", "Laser hair removal"),
            rating=4.2,
            review_count=85,
            business_status="OPERATIONAL",
            open_now=False,
        ),
        make_clinic(
            "mohs-center",
            name="Skin Cancer & Mohs Surgery Center",
            address="5 Main St, Dallas, TX 75201",
            city="Dallas",
            state="TX",
            postal_code="75201",
            category="dermatologist",
            rating=4.6,
            review_count=150,
            business_status="OPERATIONAL",
        ),
        make_clinic(
            "kids-skin",
            name="Little Ones Pediatric Dermatology",
            address="9 Broadway, New York, NY 10001",
            city="New York",
            state="NY",
            postal_code="10001",
            category="dermatologist",
            rating=4.4,
            review_count=40,
        ),
        make_clinic("bare", name="Bare Clinic"),
    ]


@pytest.fixture
def clinic_store(sample_clinics):
    return FakeClinicStore(sample_clinics)


@pytest.fixture
def clinic_repo(sample_clinics):
    return FakeClinicRepository(sample_clinics)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def search_service(clinic_repo, fake_redis):
    return SearchService(repo=clinic_repo, cache=CacheService(client=fake_redis), cache_ttl=120)


@pytest.fixture
def clinic_factory():
    return make_clinic
