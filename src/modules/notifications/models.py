"""
Notification Models.
"""

from enum import Enum


class NotificationType(str, Enum):
    """Notification categories raised by matching runs."""

    NEW_MATCH = "new_match"
    WARNING = "warning"
