"""
Notification Repository.

Data access layer for in-app notifications.
"""

from asyncpg import Pool
from loguru import logger

from src.modules.notifications.models import NotificationType


class NotificationRepository:
    """Repository for notification database operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def create(
        self,
        title: str,
        message: str,
        type: NotificationType,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> str:
        """
        Create an unread notification.

        Args:
            title: Short title
            message: Notification body
            type: Notification type
            entity_type: Related table name (e.g. "clients")
            entity_id: Related row ID

        Returns:
            ID of the created notification
        """
        query = """
        INSERT INTO notifications (title, message, type, entity_type, entity_id, is_read)
        VALUES ($1, $2, $3, $4, $5, FALSE)
        RETURNING id
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                query, title, message, type.value, entity_type, entity_id
            )
            logger.debug(f"Created {type.value} notification: {title}")
            return str(row["id"])
