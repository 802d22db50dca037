"""
Purchase Profile Models.

Pydantic model for a client's structured search criteria.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.modules.properties.models import PropertyType, normalize_tags

# (min field, max field) pairs that must be ordered when both are set
BOUND_PAIRS = [
    ("min_price", "max_price"),
    ("min_size", "max_size"),
    ("min_bedrooms", "max_bedrooms"),
    ("min_bathrooms", "max_bathrooms"),
]


def find_inverted_bounds(profile: Any) -> list[str]:
    """
    List the bound pairs whose minimum exceeds the maximum.

    Args:
        profile: PurchaseProfile (or anything with the bound attributes)

    Returns:
        List like ["min_price > max_price"], empty if all bounds are ordered
    """
    inverted = []
    for low_name, high_name in BOUND_PAIRS:
        low = getattr(profile, low_name, None)
        high = getattr(profile, high_name, None)
        if low is not None and high is not None and low > high:
            inverted.append(f"{low_name} > {high_name}")
    return inverted


class PurchaseProfile(BaseModel):
    """Purchase profile owned by a client."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(..., min_length=1)
    client_id: str = Field(..., min_length=1)
    name: str | None = None

    # Must-match criteria
    property_types: frozenset[PropertyType] = Field(..., min_length=1)
    locations: frozenset[str] = Field(..., min_length=1)

    # Range criteria (None = no limit)
    min_price: Decimal | None = Field(None, ge=0)
    max_price: Decimal | None = Field(None, ge=0)
    min_size: float | None = Field(None, ge=0)
    max_size: float | None = Field(None, ge=0)
    min_bedrooms: int | None = Field(None, ge=0)
    max_bedrooms: int | None = Field(None, ge=0)
    min_bathrooms: int | None = Field(None, ge=0)
    max_bathrooms: int | None = Field(None, ge=0)

    # Feature criteria
    required_features: frozenset[str] = frozenset()
    desired_features: frozenset[str] = frozenset()

    is_active: bool = True
    updated_at: datetime | None = None

    @field_validator("id", "client_id", mode="before")
    @classmethod
    def stringify_ids(cls, v: Any) -> Any:
        """Accept UUID or integer identifiers."""
        if v is None:
            return v
        return str(v)

    @field_validator("locations", mode="before")
    @classmethod
    def parse_locations(cls, v: Any) -> Any:
        """Drop blank entries so an all-blank list fails min_length."""
        if v is None or isinstance(v, str):
            return v
        return frozenset(str(loc).strip() for loc in v if str(loc).strip())

    @field_validator("required_features", "desired_features", mode="before")
    @classmethod
    def parse_features(cls, v: Any) -> frozenset[str]:
        """Feature columns are nullable in the database."""
        return normalize_tags(v)

    @model_validator(mode="after")
    def check_bounds(self) -> "PurchaseProfile":
        """Reject profiles whose minimum bound exceeds the maximum."""
        inverted = find_inverted_bounds(self)
        if inverted:
            raise ValueError(f"inverted bounds: {', '.join(inverted)}")
        return self
