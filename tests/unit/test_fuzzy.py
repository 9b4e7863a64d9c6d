"""Unit tests for app.services.fuzzy module."""

import pytest

from app.services.fuzzy import allowed_distance, edit_distance


class TestEditDistance:
    """Test bounded Levenshtein distance."""

    def test_identical_strings(self):
        assert edit_distance("eczema", "eczema", 0) == 0
        assert edit_distance("", "", 2) == 0

    def test_within_bound(self):
        assert edit_distance("eczwma", "eczema", 1) == 1
        assert edit_distance("psoriasus", "psoriasis", 2) == 1
        assert edit_distance("kitten", "sitting", 3) == 3

    def test_above_bound_is_bound_plus_one(self):
        """Test distances beyond the bound are reported as bound + 1."""
        assert edit_distance("kitten", "sitting", 2) == 3
        assert edit_distance("acne", "botox", 1) == 2

    def test_length_difference_short_circuits(self):
        assert edit_distance("a", "abcd", 1) == 2
        assert edit_distance("mohs", "dermatology", 2) == 3

    @pytest.mark.parametrize("a, b", [("acne", "akne"), ("botox", "btx"), ("laser", "lazer"), ("abc", "xyz")])
    def test_symmetric(self, a, b):
        for bound in (0, 1, 2):
            assert edit_distance(a, b, bound) == edit_distance(b, a, bound)

    def test_negative_bound(self):
        with pytest.raises(ValueError, match="max_distance must be >= 0"):
            edit_distance("a", "b", -1)


class TestAllowedDistance:
    @pytest.mark.parametrize(
        "term, expected",
        [("acne", 1), ("eczema", 1), ("rosacea", 2), ("psoriasis", 2)],
    )
    def test_by_length(self, term, expected):
        """Test terms of seven or more characters tolerate two edits."""
        assert allowed_distance(term) == expected
