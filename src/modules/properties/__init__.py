"""Properties module."""

from src.modules.properties.models import (
    Property,
    PropertyStatus,
    PropertyType,
    normalize_tags,
)
from src.modules.properties.repository import PropertyRepository

__all__ = [
    "Property",
    "PropertyStatus",
    "PropertyType",
    "PropertyRepository",
    "normalize_tags",
]
