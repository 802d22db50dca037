"""Matching run routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from src.jobs.matching import MatchingService, get_matching_service
from src.matching import EntityNotFoundError, MatchBatch

matching_log = logger.bind(module="MatchingAPI")

router = APIRouter(prefix="/matching", tags=["Matching"])


async def get_service() -> MatchingService:
    """Get matching service instance."""
    return get_matching_service()


Service = Annotated[MatchingService, Depends(get_service)]


def _batch_response(batch: MatchBatch, emitted: dict) -> dict:
    """Serialize a batch run."""
    return {
        "success": True,
        "total": len(batch.matches),
        "evaluated": batch.evaluated,
        "matches": [m.model_dump() for m in batch.matches],
        "warnings": [
            {
                "entity_type": w.entity_type,
                "entity_id": w.entity_id,
                "message": w.message,
            }
            for w in batch.warnings
        ],
        "emitted": emitted,
    }


@router.post("/properties/{property_id}")
async def match_property(property_id: str, service: Service) -> dict:
    """
    Find purchase profiles matching a property.

    Args:
        property_id: Property ID
    """
    try:
        batch, emitted = await service.find_matches_for_property(property_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    matching_log.info(f"Property {property_id}: {len(batch.matches)} matches")
    return _batch_response(batch, emitted)


@router.post("/clients/{client_id}")
async def match_client(client_id: str, service: Service) -> dict:
    """
    Find properties matching a client's active purchase profiles.

    Args:
        client_id: Client ID
    """
    try:
        batch, emitted = await service.find_matches_for_client(client_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    matching_log.info(f"Client {client_id}: {len(batch.matches)} matches")
    return _batch_response(batch, emitted)
