"""Purchase profiles module."""

from src.modules.purchase_profiles.models import (
    PurchaseProfile,
    find_inverted_bounds,
)
from src.modules.purchase_profiles.repository import PurchaseProfileRepository

__all__ = [
    "PurchaseProfile",
    "PurchaseProfileRepository",
    "find_inverted_bounds",
]
