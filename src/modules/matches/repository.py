"""
Match Repository.

Data access layer for stored matches.
"""

from typing import Optional

from asyncpg import Pool

from src.modules.matches.models import Match, MatchResult, MatchStatus


def _row_to_match(row) -> Match:
    """Convert a database row to a Match, stringifying UUID columns."""
    data = dict(row)
    for key in ("id", "purchase_profile_id", "property_id", "client_id"):
        if data.get(key) is not None:
            data[key] = str(data[key])
    data["reasons"] = data.get("reasons") or []
    data["concerns"] = data.get("concerns") or []
    return Match(**data)


class MatchRepository:
    """Repository for match database operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    async def upsert(self, result: MatchResult) -> bool:
        """
        Save a match result, superseding the previous run for the same pair.

        Score, reasons and concerns are replaced; the CRM-managed status
        and notes are kept.

        Args:
            result: MatchResult from the matching engine

        Returns:
            True if inserted (new), False if an existing row was updated
        """
        query = """
        INSERT INTO matches (
            purchase_profile_id, property_id, client_id,
            score, reasons, concerns, status
        ) VALUES ($1, $2, $3, $4, $5, $6, $7)
        ON CONFLICT (purchase_profile_id, property_id) DO UPDATE SET
            score = EXCLUDED.score,
            reasons = EXCLUDED.reasons,
            concerns = EXCLUDED.concerns,
            updated_at = NOW()
        RETURNING (xmax = 0) AS inserted
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                query,
                result.purchase_profile_id,
                result.property_id,
                result.client_id,
                result.score,
                result.reasons,
                result.concerns,
                MatchStatus.PENDING.value,
            )
            return row["inserted"]

    async def get_by_id(self, match_id: str) -> Optional[Match]:
        """Get match by ID."""
        query = "SELECT * FROM matches WHERE id = $1"
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(query, match_id)
            return _row_to_match(row) if row else None

    async def get_by_client(self, client_id: str) -> list[Match]:
        """
        Get stored matches for a client.

        Args:
            client_id: Client ID

        Returns:
            Matches ordered by score (highest first)
        """
        query = """
        SELECT * FROM matches
        WHERE client_id = $1
        ORDER BY score DESC, updated_at DESC
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, client_id)
            return [_row_to_match(row) for row in rows]

    async def get_by_property(self, property_id: str) -> list[Match]:
        """
        Get stored matches for a property.

        Args:
            property_id: Property ID

        Returns:
            Matches ordered by score (highest first)
        """
        query = """
        SELECT * FROM matches
        WHERE property_id = $1
        ORDER BY score DESC, updated_at DESC
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, property_id)
            return [_row_to_match(row) for row in rows]

    async def update_status(
        self, match_id: str, status: MatchStatus, notes: str | None = None
    ) -> Optional[Match]:
        """
        Update the CRM status of a match.

        Args:
            match_id: Match ID
            status: New status
            notes: Optional notes (kept unchanged when None)

        Returns:
            Updated match or None if not found
        """
        query = """
        UPDATE matches
        SET status = $2,
            notes = COALESCE($3, notes),
            updated_at = NOW()
        WHERE id = $1
        RETURNING *
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(query, match_id, status.value, notes)
            return _row_to_match(row) if row else None
