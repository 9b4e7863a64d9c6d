"""Unit tests for structured filters, sorting and result computation."""

import pytest

from app.services.filters import distance_from, haversine_miles, matches_service, sort_results
from app.services.results import compute_results
from app.services.scoring import SearchContext, get_scorer
from schemas.clinic import Coordinate
from schemas.filters import FilterState, SortKey, SortOrder
from schemas.search import FallbackLevel, ScoredResult

AUSTIN = Coordinate(lat=30.2672, lng=-97.7431)
DALLAS = Coordinate(lat=32.7767, lng=-96.7970)
HOUSTON = Coordinate(lat=29.7604, lng=-95.3698)


def ids(results):
    return [clinic.id for clinic in results.results]


@pytest.fixture
def five_clinics(clinic_factory):
    """Three California clinics and two in New York, none rated 4.5 or more."""
    return [
        clinic_factory("ca-1", name="Bay Derm", state="CA", rating=4.0),
        clinic_factory("ny-1", name="Empire Skin", state="NY", rating=4.4),
        clinic_factory("ca-2", name="Coast Skin", state="CA", rating=3.5),
        clinic_factory("ca-3", name="Valley Derm", state="CA", rating=4.2),
        clinic_factory("ny-2", name="Hudson Derm", state="NY", rating=4.1),
    ]


class TestComputeResults:
    """Test the pure recomputation entry point."""

    def test_empty_candidates(self):
        results = compute_results([], FilterState(query="acne", min_rating=4))
        assert results.results == []
        assert results.fell_back_to_unfiltered is False
        assert results.fallback is FallbackLevel.NONE

    def test_no_constraints_sorts_by_rating(self, five_clinics):
        results = compute_results(five_clinics, FilterState())
        assert ids(results) == ["ny-1", "ca-3", "ny-2", "ca-1", "ca-2"]
        assert not results.fell_back_to_unfiltered

    def test_filters_that_match_never_fall_back(self, five_clinics):
        results = compute_results(five_clinics, FilterState(states={"ca"}, min_rating=4.0))
        assert ids(results) == ["ca-3", "ca-1"]
        assert results.fallback is FallbackLevel.NONE

    def test_rating_filter_falls_back_to_state_scope(self, five_clinics):
        """Test an empty rating + state filter falls back to the state-only set."""
        results = compute_results(five_clinics, FilterState(states={"CA"}, min_rating=4.5))
        assert ids(results) == ["ca-3", "ca-1", "ca-2"]
        assert results.fell_back_to_unfiltered is True
        assert results.fallback is FallbackLevel.RELAXED_FILTERS

    def test_query_miss_falls_back_to_location(self, five_clinics):
        results = compute_results(five_clinics, FilterState(query="tattoo removal", states={"NY"}))
        assert sorted(ids(results)) == ["ny-1", "ny-2"]
        assert results.fallback is FallbackLevel.LOCATION_ONLY

    def test_out_of_scope_states_fall_back_to_unfiltered(self, five_clinics):
        results = compute_results(five_clinics, FilterState(states={"TX"}))
        assert len(results.results) == 5
        assert results.fallback is FallbackLevel.UNFILTERED

    def test_text_query_ranks_by_relevance(self, sample_clinics):
        results = compute_results(sample_clinics, FilterState(query="mohs surgery"))
        assert ids(results)[0] == "mohs-center"
        scores = [item.score for item in results.scored]
        assert scores == sorted(scores, reverse=True)
        assert all(score > 0 for score in scores)

    def test_misspelled_query(self, sample_clinics):
        results = compute_results(sample_clinics, FilterState(query="eczwma"))
        assert "austin-derm" in ids(results)
        assert "glow-spa" not in ids(results)
        assert results.fallback is FallbackLevel.NONE

    def test_open_now_only_query_filters_by_flag(self, sample_clinics):
        """Test a query of just "open now" filters by the flag, not by text."""
        results = compute_results(sample_clinics, FilterState(query="open now"))
        assert ids(results) == ["austin-derm"]
        assert results.scored[0].score == 0

    def test_open_now_in_query_combines_with_text(self, sample_clinics):
        results = compute_results(sample_clinics, FilterState(query="botox open now"))
        # Glow Med Spa matches botox but is closed, so the filter is relaxed.
        assert results.fallback is FallbackLevel.RELAXED_FILTERS
        assert ids(results) == ["glow-spa"]

    def test_zip_query_matches_postal_code(self, sample_clinics):
        results = compute_results(sample_clinics, FilterState(query="78704"))
        assert ids(results) == ["glow-spa"]

    def test_short_query_is_not_text_filtering(self, sample_clinics):
        results = compute_results(sample_clinics, FilterState(query="a"))
        assert len(results.results) == len(sample_clinics)
        assert results.fallback is FallbackLevel.NONE

    def test_recompute_is_independent_of_previous_filters(self, five_clinics):
        """Test clearing a filter restores results from the full candidate set."""
        narrow = FilterState(states={"CA"}, min_rating=4.1)
        assert ids(compute_results(five_clinics, narrow)) == ["ca-3"]
        widened = narrow.replace(min_rating=None)
        assert ids(compute_results(five_clinics, widened)) == ["ca-3", "ca-1", "ca-2"]

    def test_nationwide_scorer(self, sample_clinics):
        results = compute_results(
            sample_clinics,
            FilterState(query="glow med spa", sort_by=SortKey.RELEVANCE),
            scorer=get_scorer(SearchContext.NATIONWIDE),
        )
        assert ids(results) == ["glow-spa"]


class TestRefinements:
    """Test individual structured predicates through compute_results."""

    def test_missing_rating_counts_as_zero(self, clinic_factory):
        clinics = [clinic_factory("rated", rating=4.0), clinic_factory("unrated")]
        assert ids(compute_results(clinics, FilterState(min_rating=1))) == ["rated"]

    def test_amenities(self, clinic_factory):
        clinics = [
            clinic_factory(
                "full",
                accessibility={"wheelchair_accessible_entrance": True},
                parking={"free_parking_lot": True},
            ),
            clinic_factory("partial", accessibility={"wheelchair_accessible_entrance": True}),
            clinic_factory("none"),
        ]
        assert ids(compute_results(clinics, FilterState(wheelchair_accessible=True, free_parking=True))) == ["full"]

    def test_contact_and_website_services(self, clinic_factory):
        clinics = [
            clinic_factory(
                "online",
                phone="512-555-0100",
                website="https://example.com",
                website_services={"has_online_booking": True, "has_telehealth": True},
            ),
            clinic_factory("phone-only", phone="512-555-0101", website="  "),
        ]
        filters = FilterState(has_website=True, has_phone=True, has_online_booking=True, has_telehealth=True)
        assert ids(compute_results(clinics, filters)) == ["online"]

    def test_specialty_flags(self, sample_clinics):
        assert ids(compute_results(sample_clinics, FilterState(pediatric=True))) == ["kids-skin"]
        assert ids(compute_results(sample_clinics, FilterState(mohs_surgery=True))) == ["mohs-center"]
        assert ids(compute_results(sample_clinics, FilterState(cosmetic=True))) == ["glow-spa"]

    def test_service_keywords(self, clinic_factory):
        clinic = clinic_factory("c", name="Smith", website_services={"mentioned_services": ["Chemical Peels"]})
        assert matches_service(clinic, ["chemical peel"])
        assert not matches_service(clinic, ["tattoo"])


class TestSortResults:
    """Test ordering and tie stability."""

    def test_ties_keep_input_order(self, clinic_factory):
        items = [ScoredResult(clinic=clinic_factory(str(i), rating=4.0)) for i in range(5)]
        ordered = sort_results(items, FilterState(), ranked=False)
        assert [item.clinic.id for item in ordered] == ["0", "1", "2", "3", "4"]

    def test_equal_scores_keep_input_order(self, clinic_factory):
        items = [
            ScoredResult(clinic=clinic_factory("a"), score=2),
            ScoredResult(clinic=clinic_factory("b"), score=3),
            ScoredResult(clinic=clinic_factory("c"), score=2),
        ]
        ordered = sort_results(items, FilterState(), ranked=True)
        assert [item.clinic.id for item in ordered] == ["b", "a", "c"]

    def test_explicit_keys(self, clinic_factory):
        items = [
            ScoredResult(clinic=clinic_factory("a", name="Zen Skin", review_count=5)),
            ScoredResult(clinic=clinic_factory("b", name="acme derm")),
            ScoredResult(clinic=clinic_factory("c", name="Élan Derm", review_count=50)),
        ]
        by_name = sort_results(items, FilterState(sort_by=SortKey.NAME, sort_order=SortOrder.ASC), ranked=False)
        assert [item.clinic.id for item in by_name] == ["b", "c", "a"]
        by_reviews = sort_results(items, FilterState(sort_by=SortKey.REVIEWS), ranked=False)
        assert [item.clinic.id for item in by_reviews] == ["c", "a", "b"]

    def test_distance_nearest_first_unlocated_last(self, clinic_factory):
        items = [
            ScoredResult(clinic=clinic_factory("nowhere")),
            ScoredResult(clinic=clinic_factory("houston", location=HOUSTON)),
            ScoredResult(clinic=clinic_factory("austin", location=AUSTIN)),
            ScoredResult(clinic=clinic_factory("dallas", location=DALLAS)),
        ]
        filters = FilterState(sort_by=SortKey.DISTANCE, origin=AUSTIN)
        ordered = sort_results(items, filters, ranked=False)
        assert [item.clinic.id for item in ordered] == ["austin", "houston", "dallas", "nowhere"]

    def test_distance_without_origin_keeps_order(self, clinic_factory):
        items = [ScoredResult(clinic=clinic_factory("b")), ScoredResult(clinic=clinic_factory("a"))]
        ordered = sort_results(items, FilterState(sort_by=SortKey.DISTANCE), ranked=False)
        assert [item.clinic.id for item in ordered] == ["b", "a"]


class TestDistance:
    def test_haversine(self):
        assert haversine_miles(AUSTIN, AUSTIN) == 0
        assert haversine_miles(AUSTIN, DALLAS) == pytest.approx(182, abs=3)

    def test_distance_from_missing_location(self, clinic_factory):
        assert distance_from(AUSTIN, clinic_factory("x")) is None
        assert distance_from(None, clinic_factory("x", location=AUSTIN)) is None
