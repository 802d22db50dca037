"""
Shared pytest fixtures for all tests.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from src.modules.properties import Property, PropertyType
from src.modules.purchase_profiles import PurchaseProfile


# ============================================================
# Sample Data Fixtures
# ============================================================


@pytest.fixture
def sample_property_row() -> dict:
    """Sample property row as loaded from the database."""
    return {
        "id": "prop-berlin-1",
        "title": "Büroetage Mitte",
        "property_type": "office",
        "status": "active",
        "price": Decimal("2000000"),
        "size": 400.0,
        "bedrooms": None,
        "bathrooms": None,
        "city": "Berlin",
        "features": ["parking", "elevator"],
        "updated_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_profile_row() -> dict:
    """Sample purchase profile row as loaded from the database."""
    return {
        "id": "profile-1",
        "client_id": "client-1",
        "name": "Office Berlin",
        "property_types": ["office"],
        "locations": ["Berlin"],
        "min_price": Decimal("1500000"),
        "max_price": Decimal("2500000"),
        "min_size": 300,
        "max_size": 500,
        "min_bedrooms": None,
        "max_bedrooms": None,
        "min_bathrooms": None,
        "max_bathrooms": None,
        "required_features": ["parking"],
        "desired_features": ["elevator", "cafeteria"],
        "is_active": True,
        "updated_at": None,
    }


@pytest.fixture
def sample_property(sample_property_row) -> Property:
    """Berlin office property."""
    return Property.model_validate(sample_property_row)


@pytest.fixture
def sample_profile(sample_profile_row) -> PurchaseProfile:
    """Berlin office purchase profile."""
    return PurchaseProfile.model_validate(sample_profile_row)


@pytest.fixture
def open_profile() -> PurchaseProfile:
    """Profile with only type and location constraints."""
    return PurchaseProfile(
        id="profile-open",
        client_id="client-2",
        property_types=[PropertyType.OFFICE],
        locations=["Berlin"],
    )
