"""Modules package - Domain modules with repository pattern."""

from src.modules.matches import (
    Match,
    MatchListResponse,
    MatchRepository,
    MatchResult,
    MatchStatus,
    MatchStatusUpdate,
)
from src.modules.notifications import (
    NotificationRepository,
    NotificationType,
)
from src.modules.properties import (
    Property,
    PropertyRepository,
    PropertyStatus,
    PropertyType,
)
from src.modules.purchase_profiles import (
    PurchaseProfile,
    PurchaseProfileRepository,
)

__all__ = [
    # Properties
    "Property",
    "PropertyStatus",
    "PropertyType",
    "PropertyRepository",
    # Purchase profiles
    "PurchaseProfile",
    "PurchaseProfileRepository",
    # Matches
    "Match",
    "MatchResult",
    "MatchStatus",
    "MatchStatusUpdate",
    "MatchListResponse",
    "MatchRepository",
    # Notifications
    "NotificationType",
    "NotificationRepository",
]
