"""Notifications module."""

from src.modules.notifications.models import NotificationType
from src.modules.notifications.repository import NotificationRepository

__all__ = [
    "NotificationType",
    "NotificationRepository",
]
