"""
Match Emitter Module.

Persists batch results and raises in-app notifications.
"""

from collections import Counter

from loguru import logger

from src.matching import MatchBatch
from src.modules.matches import MatchRepository
from src.modules.notifications import NotificationRepository, NotificationType

emit_log = logger.bind(module="Emitter")


class MatchEmitter:
    """
    Saves match results and notifies about new ones.

    A failed insert for one match is logged and counted; the rest of
    the batch is still saved.
    """

    def __init__(
        self,
        match_repo: MatchRepository,
        notification_repo: NotificationRepository,
    ):
        """
        Initialize MatchEmitter.

        Args:
            match_repo: Repository used to upsert matches
            notification_repo: Repository used to create notifications
        """
        self._match_repo = match_repo
        self._notification_repo = notification_repo

    async def emit(self, batch: MatchBatch) -> dict:
        """
        Persist a batch and create notifications.

        One "new_match" notification per client with newly inserted
        matches; one "warning" notification if records were skipped.

        Args:
            batch: MatchBatch from the batch matcher

        Returns:
            Dict with stats: {"total", "saved", "failed", "notified", "warnings"}
        """
        saved = 0
        failed = 0
        new_per_client: Counter[str] = Counter()

        for result in batch.matches:
            try:
                inserted = await self._match_repo.upsert(result)
            except Exception as e:
                emit_log.error(
                    f"Failed to save match {result.purchase_profile_id}/{result.property_id}: {e}"
                )
                failed += 1
                continue

            saved += 1
            if inserted:
                new_per_client[result.client_id] += 1

        notified = 0
        for client_id, count in new_per_client.items():
            if await self._notify(
                title="New Match Found" if count == 1 else "New Matches Found",
                message=f"{count} new {'match' if count == 1 else 'matches'} found for client {client_id}",
                type=NotificationType.NEW_MATCH,
                entity_type="clients",
                entity_id=client_id,
            ):
                notified += 1

        if batch.warnings:
            skipped = ", ".join(
                f"{w.entity_type} {w.entity_id or '?'}" for w in batch.warnings[:5]
            )
            more = len(batch.warnings) - 5
            if more > 0:
                skipped += f" and {more} more"
            if await self._notify(
                title="Matching skipped records",
                message=f"{len(batch.warnings)} records were skipped: {skipped}",
                type=NotificationType.WARNING,
            ):
                notified += 1

        emit_log.info(
            f"Emit complete: {saved}/{len(batch.matches)} saved, {failed} failed, "
            f"{notified} notifications"
        )
        return {
            "total": len(batch.matches),
            "saved": saved,
            "failed": failed,
            "notified": notified,
            "warnings": len(batch.warnings),
        }

    async def _notify(self, **kwargs) -> bool:
        """Create a notification, logging failures."""
        try:
            await self._notification_repo.create(**kwargs)
            return True
        except Exception as e:
            emit_log.error(f"Failed to create notification '{kwargs.get('title')}': {e}")
            return False
