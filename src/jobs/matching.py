"""
Matching Service Module.

Loads properties and purchase profiles, runs batch matching and hands
the results to the emitter.
"""

from loguru import logger

from src.connections.postgres import PostgresConnection, get_postgres
from src.jobs.emitter import MatchEmitter
from src.matching import BatchMatcher, EntityNotFoundError, MatchBatch, get_batch_matcher
from src.modules.matches import MatchRepository
from src.modules.notifications import NotificationRepository
from src.modules.properties import PropertyRepository
from src.modules.purchase_profiles import PurchaseProfileRepository

service_log = logger.bind(module="Matching")


class MatchingService:
    """
    Runs matching against the database.

    Workflow:
    1. Load the anchor (property, or client's active profiles)
    2. Load the candidate set (active profiles, or active properties)
    3. Score and filter with the BatchMatcher (pure, in memory)
    4. Persist results and notify through the MatchEmitter
    """

    def __init__(
        self,
        postgres: PostgresConnection | None = None,
        matcher: BatchMatcher | None = None,
        property_repo: PropertyRepository | None = None,
        profile_repo: PurchaseProfileRepository | None = None,
        emitter: MatchEmitter | None = None,
        enable_emit: bool = True,
    ):
        """
        Initialize MatchingService.

        Args:
            postgres: PostgreSQL connection (will be created if not provided)
            matcher: BatchMatcher (settings-based singleton if not provided)
            property_repo: Property repository (built from the pool if not provided)
            profile_repo: Purchase profile repository (built from the pool if not provided)
            emitter: MatchEmitter (built from the pool if not provided)
            enable_emit: Whether to persist matches and notify (default True)
        """
        self._postgres = postgres
        self.matcher = matcher or get_batch_matcher()
        self._property_repo = property_repo
        self._profile_repo = profile_repo
        self._emitter = emitter
        self._enable_emit = enable_emit

    async def _ensure_connections(self) -> None:
        """Ensure repositories are available."""
        needs_pool = (
            self._property_repo is None
            or self._profile_repo is None
            or (self._emitter is None and self._enable_emit)
        )
        if needs_pool and self._postgres is None:
            self._postgres = await get_postgres()
        if self._property_repo is None:
            self._property_repo = PropertyRepository(self._postgres.pool)
        if self._profile_repo is None:
            self._profile_repo = PurchaseProfileRepository(self._postgres.pool)
        if self._emitter is None and self._enable_emit:
            self._emitter = MatchEmitter(
                MatchRepository(self._postgres.pool),
                NotificationRepository(self._postgres.pool),
            )

    async def find_matches_for_property(self, property_id: str) -> tuple[MatchBatch, dict]:
        """
        Match a property against all active purchase profiles.

        Args:
            property_id: Property ID

        Returns:
            Tuple of (batch, emit_stats); emit_stats is empty when emitting is disabled

        Raises:
            EntityNotFoundError: If the property does not exist
        """
        await self._ensure_connections()

        prop = await self._property_repo.get_by_id(property_id)
        if prop is None:
            raise EntityNotFoundError(f"Property with ID {property_id} not found")

        profiles = await self._profile_repo.get_active()
        service_log.info(
            f"Matching property {property_id} against {len(profiles)} active profiles"
        )

        batch = self.matcher.match_property(prop, profiles)
        return batch, await self._emit(batch)

    async def find_matches_for_client(self, client_id: str) -> tuple[MatchBatch, dict]:
        """
        Match a client's active purchase profiles against all active properties.

        Args:
            client_id: Client ID

        Returns:
            Tuple of (batch, emit_stats); empty batch if the client has no active profiles

        Raises:
            EntityNotFoundError: If the client does not exist
        """
        await self._ensure_connections()

        profiles = await self._profile_repo.get_by_client(client_id)
        if not profiles:
            if not await self._profile_repo.client_exists(client_id):
                raise EntityNotFoundError(f"Client with ID {client_id} not found")
            service_log.info(f"Client {client_id} has no active purchase profiles")
            return MatchBatch(), {}

        properties = await self._property_repo.get_active()
        service_log.info(
            f"Matching {len(profiles)} profiles of client {client_id} "
            f"against {len(properties)} active properties"
        )

        batch = self.matcher.match_client(client_id, profiles, properties)
        return batch, await self._emit(batch)

    async def _emit(self, batch: MatchBatch) -> dict:
        """Hand results to the emitter if enabled."""
        if not self._enable_emit or self._emitter is None:
            return {}
        return await self._emitter.emit(batch)


# Service instance (lazy initialized)
_service: MatchingService | None = None


def get_matching_service() -> MatchingService:
    """Get or create matching service instance."""
    global _service
    if _service is None:
        _service = MatchingService()
    return _service


def close_matching_service() -> None:
    """Drop the matching service instance."""
    global _service
    _service = None
