"""
Property Models.

Pydantic models for commercial property listings.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PropertyType(str, Enum):
    """Property use types."""

    OFFICE = "office"
    RETAIL = "retail"
    INDUSTRIAL = "industrial"
    LOGISTICS = "logistics"
    RESIDENTIAL = "residential"
    MIXED = "mixed"
    HOTEL = "hotel"
    HEALTHCARE = "healthcare"
    LAND = "land"
    OTHER = "other"


class PropertyStatus(str, Enum):
    """Listing status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


def normalize_tags(value: Any) -> frozenset[str]:
    """
    Normalize a feature tag collection.

    Args:
        value: Iterable of tag strings, or None

    Returns:
        Frozenset of trimmed, lower-cased, non-empty tags

    Examples:
        >>> sorted(normalize_tags([" Parking", "ELEVATOR", ""]))
        ['elevator', 'parking']
        >>> normalize_tags(None)
        frozenset()
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = [value]
    return frozenset(str(tag).strip().lower() for tag in value if str(tag).strip())


class Property(BaseModel):
    """Commercial property listing, as loaded for a matching run."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(..., min_length=1)
    title: str | None = None
    property_type: PropertyType
    status: PropertyStatus = PropertyStatus.ACTIVE

    price: Decimal | None = Field(None, ge=0)
    size: float | None = Field(None, ge=0, description="Floor area in m²")
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)

    city: str = Field(..., min_length=1)
    features: frozenset[str] = frozenset()

    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        """Accept UUID or integer identifiers."""
        if v is None:
            return v
        return str(v)

    @field_validator("features", mode="before")
    @classmethod
    def parse_features(cls, v: Any) -> frozenset[str]:
        """Features column is nullable in the database."""
        return normalize_tags(v)

    @property
    def is_active(self) -> bool:
        """Whether the listing is available for matching."""
        return self.status == PropertyStatus.ACTIVE
