"""
Purchase Profile Repository.

Data access layer for purchase profile operations.
"""

from asyncpg import Pool

PROFILE_COLUMNS = """
    id, client_id, name, property_types, locations,
    min_price, max_price, min_size, max_size,
    min_bedrooms, max_bedrooms, min_bathrooms, max_bathrooms,
    required_features, desired_features, is_active, updated_at
"""


class PurchaseProfileRepository:
    """Repository for purchase profile database operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def get_active(self) -> list[dict]:
        """
        Get all active purchase profiles.

        Returns:
            List of profile records
        """
        query = f"""
        SELECT {PROFILE_COLUMNS} FROM purchase_profiles
        WHERE is_active = TRUE
        ORDER BY created_at, id
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query)
            return [dict(row) for row in rows]

    async def get_by_client(self, client_id: str) -> list[dict]:
        """
        Get the active purchase profiles owned by a client.

        Args:
            client_id: Client ID

        Returns:
            List of profile records
        """
        query = f"""
        SELECT {PROFILE_COLUMNS} FROM purchase_profiles
        WHERE client_id = $1
          AND is_active = TRUE
        ORDER BY created_at, id
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, client_id)
            return [dict(row) for row in rows]

    async def client_exists(self, client_id: str) -> bool:
        """Check if client exists in database."""
        query = "SELECT 1 FROM clients WHERE id = $1"
        async with self._pool.acquire() as conn:
            result = await conn.fetchrow(query, client_id)
            return result is not None
