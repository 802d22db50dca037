"""
Unit tests for src/matching/batch.py
"""

from decimal import Decimal

import pytest

from config.settings import MatchWeights
from src.matching.batch import (
    BatchMatcher,
    MatchWarning,
    coerce_records,
    match_client_profiles,
    match_property,
)
from src.matching.exceptions import WeightConfigurationError
from src.matching.scorer import MatchScorer
from src.modules.properties import Property
from src.modules.purchase_profiles import PurchaseProfile
from tests.fixtures.matching import make_profile, make_property

# Import fixtures
pytest_plugins = ["tests.fixtures.matching"]


@pytest.fixture
def matcher():
    """Sequential matcher with the reference table and threshold 60."""
    scorer = MatchScorer(weights=MatchWeights(), price_tolerance=0.10)
    return BatchMatcher(scorer=scorer, min_score=60, max_workers=1)


def pair_ids(batch):
    return [(m.purchase_profile_id, m.property_id) for m in batch.matches]


# ============================================================
# coerce_records tests
# ============================================================


class TestCoerceRecords:
    """Tests for coerce_records function."""

    def test_models_pass_through(self):
        """Model instances are kept as-is."""
        prop = make_property()
        valid, warnings = coerce_records([prop], Property, "property")
        assert valid[0] is prop
        assert warnings == []

    def test_dicts_validated(self, sample_property_row):
        """Raw rows are validated into models."""
        valid, warnings = coerce_records([sample_property_row], Property, "property")
        assert isinstance(valid[0], Property)
        assert valid[0].features == frozenset({"parking", "elevator"})
        assert warnings == []

    def test_malformed_skipped(self, sample_property_row):
        """Malformed rows become warnings, valid rows survive."""
        bad = {**sample_property_row, "id": "bad-1", "property_type": "castle"}
        valid, warnings = coerce_records(
            [bad, sample_property_row], Property, "property"
        )
        assert [p.id for p in valid] == ["prop-berlin-1"]
        assert len(warnings) == 1
        assert warnings[0].entity_type == "property"
        assert warnings[0].entity_id == "bad-1"
        assert "property_type" in warnings[0].message

    def test_inverted_profile_bounds(self, sample_profile_row):
        """Profiles with min > max are rejected with a warning."""
        bad = {**sample_profile_row, "min_price": 3_000_000, "max_price": 1_000_000}
        valid, warnings = coerce_records([bad], PurchaseProfile, "purchase_profile")
        assert valid == []
        assert "min_price > max_price" in warnings[0].message


# ============================================================
# BatchMatcher tests
# ============================================================


class TestBatchMatcherInit:
    """Tests for BatchMatcher construction."""

    @pytest.mark.parametrize("min_score", [-1, 101, 250])
    def test_min_score_out_of_range(self, min_score):
        """Thresholds outside [0, 100] are rejected."""
        scorer = MatchScorer(weights=MatchWeights(), price_tolerance=0.1)
        with pytest.raises(WeightConfigurationError, match="min_score"):
            BatchMatcher(scorer=scorer, min_score=min_score)

    @pytest.mark.parametrize("min_score", [0, 100])
    def test_min_score_bounds_inclusive(self, min_score):
        """0 and 100 are valid thresholds."""
        scorer = MatchScorer(weights=MatchWeights(), price_tolerance=0.1)
        assert BatchMatcher(scorer=scorer, min_score=min_score).min_score == min_score

    def test_entry_point_override_checked(self, profile_pool):
        """Out-of-range overrides on the module entry points are rejected."""
        with pytest.raises(WeightConfigurationError):
            match_property(make_property(), profile_pool, min_score=120)


class TestMatchProperty:
    """Tests for BatchMatcher.match_property."""

    def test_filters_and_orders(self, matcher, profile_pool):
        """Gate failures and inactive profiles are dropped; highest score first."""
        batch = matcher.match_property(make_property(id="prop-new"), profile_pool)
        assert pair_ids(batch) == [("profile-a", "prop-new"), ("profile-d", "prop-new")]
        assert [m.score for m in batch.matches] == [80, 68]
        assert batch.evaluated == 3
        assert batch.warnings == []

    def test_threshold(self, profile_pool):
        """Nothing below the threshold is returned."""
        scorer = MatchScorer(weights=MatchWeights(), price_tolerance=0.1)
        strict = BatchMatcher(scorer=scorer, min_score=75, max_workers=1)
        batch = strict.match_property(make_property(), profile_pool)
        assert [m.score for m in batch.matches] == [80]

    def test_zero_threshold_excludes_gate_failures(self, profile_pool):
        """Zero scores are never matches, even with threshold 0."""
        scorer = MatchScorer(weights=MatchWeights(), price_tolerance=0.1)
        lenient = BatchMatcher(scorer=scorer, min_score=0, max_workers=1)
        batch = lenient.match_property(make_property(), profile_pool)
        assert all(m.score > 0 for m in batch.matches)
        assert "profile-b" not in [m.purchase_profile_id for m in batch.matches]

    def test_no_candidates(self, matcher):
        """Empty candidate set returns zero matches, not an error."""
        batch = matcher.match_property(make_property(), [])
        assert batch.matches == []
        assert batch.evaluated == 0

    def test_malformed_anchor(self, matcher, profile_pool):
        """Malformed anchor property yields a warning and no matches."""
        batch = matcher.match_property({"id": "broken"}, profile_pool)
        assert batch.matches == []
        assert batch.warnings[0].entity_id == "broken"

    def test_malformed_profile_skipped(self, matcher, sample_profile_row):
        """One bad profile does not abort the batch."""
        bad = {**sample_profile_row, "id": "bad", "locations": []}
        batch = matcher.match_property(make_property(), [bad, sample_profile_row])
        assert pair_ids(batch) == [("profile-1", "prop-1")]
        assert batch.warnings == [
            MatchWarning("purchase_profile", "bad", batch.warnings[0].message)
        ]

    def test_unvalidated_pair_skipped(self, matcher):
        """Pair-level validation failures become warnings."""
        broken = PurchaseProfile.model_construct(
            **{**make_profile(id="broken").model_dump(), "min_size": 900.0}
        )
        batch = matcher.match_property(make_property(), [broken, make_profile()])
        assert len(batch.matches) == 1
        assert batch.warnings[0].entity_type == "pair"
        assert batch.warnings[0].entity_id == "broken/prop-1"

    def test_non_numeric_bound_skipped(self, matcher):
        """A bound that cannot be compared becomes a pair warning."""
        broken = PurchaseProfile.model_construct(
            **{**make_profile(id="broken").model_dump(), "max_price": "two million"}
        )
        batch = matcher.match_property(make_property(), [broken, make_profile()])
        assert pair_ids(batch) == [("profile-1", "prop-1")]
        assert batch.warnings[0].entity_type == "pair"
        assert batch.warnings[0].entity_id == "broken/prop-1"
        assert batch.warnings[0].message.startswith("cannot score")

    def test_inputs_not_mutated(self, matcher, profile_pool):
        """Running twice gives identical output and leaves inputs alone."""
        snapshot = [p.model_dump() for p in profile_pool]
        first = matcher.match_property(make_property(), profile_pool)
        second = matcher.match_property(make_property(), profile_pool)
        assert first.matches == second.matches
        assert [p.model_dump() for p in profile_pool] == snapshot


class TestMatchProfiles:
    """Tests for BatchMatcher.match_profiles."""

    def test_ordering(self, matcher, profile_pool, property_pool):
        """Score desc, then newest property, then generation order."""
        batch = matcher.match_profiles(profile_pool, property_pool)
        assert pair_ids(batch) == [
            ("profile-a", "prop-new"),
            ("profile-a", "prop-old"),
            ("profile-b", "prop-munich"),
            ("profile-d", "prop-new"),
            ("profile-d", "prop-old"),
            ("profile-a", "prop-pricey"),
        ]
        assert [m.score for m in batch.matches] == [80, 80, 80, 68, 68, 65]

    def test_price_concern(self, matcher, profile_pool, property_pool):
        """Price inside the tolerance band shows up as a concern."""
        batch = matcher.match_profiles(profile_pool, property_pool)
        pricey = next(m for m in batch.matches if m.property_id == "prop-pricey")
        assert pricey.concerns == [
            "Price 2600000 is above budget range (max 2500000) but within 10% tolerance"
        ]

    def test_parallel_matches_sequential(self, profile_pool, property_pool):
        """The worker pool gives the same ordered output as inline scoring."""
        scorer = MatchScorer(weights=MatchWeights(), price_tolerance=0.1)
        sequential = BatchMatcher(scorer=scorer, min_score=60, max_workers=1)
        parallel = BatchMatcher(
            scorer=scorer, min_score=60, max_workers=4, parallel_min_pairs=1
        )
        assert (
            parallel.match_profiles(profile_pool, property_pool).matches
            == sequential.match_profiles(profile_pool, property_pool).matches
        )


class TestMatchClient:
    """Tests for BatchMatcher.match_client."""

    def test_client_profiles_only(self, matcher, profile_pool, property_pool):
        """Only the client's active profiles are anchors."""
        batch = matcher.match_client("client-1", profile_pool, property_pool)
        assert {m.client_id for m in batch.matches} == {"client-1"}
        assert len(batch.matches) == 4

    def test_client_without_profiles(self, matcher, property_pool):
        """Client without profiles gets an empty batch."""
        batch = matcher.match_client("client-x", [], property_pool)
        assert batch.matches == []


# ============================================================
# Module-level entry point tests
# ============================================================


class TestEntryPoints:
    """Tests for match_property / match_client_profiles functions."""

    def test_match_property_reference(self, sample_property_row, sample_profile_row):
        """Raw rows in, ordered MatchResults out."""
        results = match_property(sample_property_row, [sample_profile_row], min_score=60)
        assert len(results) == 1
        assert results[0].score == 80

    def test_match_property_threshold(self, profile_pool):
        """No result below the threshold is returned."""
        for threshold in (0, 50, 70, 90):
            results = match_property(make_property(), profile_pool, min_score=threshold)
            assert all(r.score >= threshold for r in results)

    def test_match_client_profiles(self, profile_pool, property_pool):
        """Profiles x properties with the default threshold from settings."""
        results = match_client_profiles(
            [p for p in profile_pool if p.client_id == "client-2"],
            property_pool,
            min_score=60,
        )
        assert [r.property_id for r in results] == ["prop-new", "prop-old"]

    def test_price_partial_band(self):
        """max_price 1.9M keeps the pair at 70 on partial price points."""
        profile = make_profile(max_price=Decimal("1900000"))
        results = match_property(make_property(), [profile], min_score=60)
        assert results[0].score == 70
