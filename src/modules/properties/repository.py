"""
Property Repository.

Data access layer for property listings (read side used by matching).
"""

from typing import Optional

from asyncpg import Pool

PROPERTY_COLUMNS = """
    id, title, property_type, status, price, size,
    bedrooms, bathrooms, city, features, updated_at
"""


class PropertyRepository:
    """Repository for property database operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def get_by_id(self, property_id: str) -> Optional[dict]:
        """
        Get property by ID.

        Args:
            property_id: Property ID

        Returns:
            Property record or None
        """
        query = f"SELECT {PROPERTY_COLUMNS} FROM properties WHERE id = $1"
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(query, property_id)
            return dict(row) if row else None

    async def get_active(self) -> list[dict]:
        """
        Get all properties listed as active.

        Rows are returned unvalidated; the matcher skips malformed ones.

        Returns:
            List of property records, most recently updated first
        """
        query = f"""
        SELECT {PROPERTY_COLUMNS} FROM properties
        WHERE status = 'active'
        ORDER BY updated_at DESC, id
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query)
            return [dict(row) for row in rows]
