"""
Unit tests for src/jobs/matching.py
"""

import asyncio

import pytest

from config.settings import MatchWeights
from src.jobs.emitter import MatchEmitter
from src.jobs.matching import MatchingService
from src.matching import BatchMatcher, EntityNotFoundError, MatchScorer
from tests.fixtures.repositories import FakeProfileRepository, FakePropertyRepository

# Import fixtures
pytest_plugins = ["tests.fixtures.repositories"]


@pytest.fixture
def matcher():
    scorer = MatchScorer(weights=MatchWeights(), price_tolerance=0.1)
    return BatchMatcher(scorer=scorer, min_score=60, max_workers=1)


@pytest.fixture
def property_rows(sample_property_row):
    return [
        sample_property_row,
        {**sample_property_row, "id": "prop-munich", "city": "Munich"},
        {**sample_property_row, "id": "prop-off", "status": "inactive"},
    ]


@pytest.fixture
def profile_rows(sample_profile_row):
    return [
        sample_profile_row,
        {**sample_profile_row, "id": "profile-2", "client_id": "client-2", "locations": ["Munich"]},
        {**sample_profile_row, "id": "profile-3", "client_id": "client-3", "is_active": False},
    ]


@pytest.fixture
def service(matcher, property_rows, profile_rows, match_repo, notification_repo):
    return MatchingService(
        matcher=matcher,
        property_repo=FakePropertyRepository(property_rows),
        profile_repo=FakeProfileRepository(profile_rows),
        emitter=MatchEmitter(match_repo, notification_repo),
    )


class TestFindMatchesForProperty:
    """Tests for MatchingService.find_matches_for_property."""

    def test_matches_and_emits(self, service, match_repo):
        """Matching profiles are returned and persisted."""
        batch, stats = asyncio.run(service.find_matches_for_property("prop-berlin-1"))

        assert [m.purchase_profile_id for m in batch.matches] == ["profile-1"]
        assert batch.matches[0].score == 80
        assert stats["saved"] == 1
        assert ("profile-1", "prop-berlin-1") in match_repo.rows

    def test_unknown_property(self, service):
        """Unknown property raises EntityNotFoundError."""
        with pytest.raises(EntityNotFoundError):
            asyncio.run(service.find_matches_for_property("missing"))

    def test_inactive_anchor_still_matched(self, service):
        """An explicitly requested inactive property is still scored."""
        batch, _ = asyncio.run(service.find_matches_for_property("prop-off"))
        assert [m.purchase_profile_id for m in batch.matches] == ["profile-1"]

    def test_emit_disabled(self, matcher, property_rows, profile_rows):
        """With emitting disabled nothing is persisted."""
        service = MatchingService(
            matcher=matcher,
            property_repo=FakePropertyRepository(property_rows),
            profile_repo=FakeProfileRepository(profile_rows),
            enable_emit=False,
        )
        batch, stats = asyncio.run(service.find_matches_for_property("prop-munich"))
        assert [m.purchase_profile_id for m in batch.matches] == ["profile-2"]
        assert stats == {}


class TestFindMatchesForClient:
    """Tests for MatchingService.find_matches_for_client."""

    def test_matches_active_properties(self, service, notification_repo):
        """Client profiles are matched against active properties only."""
        batch, stats = asyncio.run(service.find_matches_for_client("client-1"))

        assert [m.property_id for m in batch.matches] == ["prop-berlin-1"]
        assert batch.evaluated == 2
        assert stats["notified"] == 1
        assert notification_repo.created[0]["entity_id"] == "client-1"

    def test_client_without_active_profiles(self, service):
        """Known client with no active profiles gets an empty result."""
        batch, stats = asyncio.run(service.find_matches_for_client("client-3"))
        assert batch.matches == []
        assert stats == {}

    def test_unknown_client(self, service):
        """Unknown client raises EntityNotFoundError."""
        with pytest.raises(EntityNotFoundError):
            asyncio.run(service.find_matches_for_client("client-x"))
