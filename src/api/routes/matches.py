"""Stored match routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from src.connections.postgres import get_postgres
from src.modules.matches import (
    Match,
    MatchListResponse,
    MatchRepository,
    MatchStatusUpdate,
)

matches_log = logger.bind(module="Matches")

router = APIRouter(prefix="/matches", tags=["Matches"])


async def get_repository() -> MatchRepository:
    """Get match repository instance."""
    postgres = await get_postgres()
    return MatchRepository(postgres.pool)


Repository = Annotated[MatchRepository, Depends(get_repository)]


@router.get("", response_model=MatchListResponse)
async def list_matches(
    repo: Repository,
    client_id: Optional[str] = None,
    property_id: Optional[str] = None,
) -> dict:
    """
    List stored matches for a client or a property.

    Exactly one of client_id / property_id is required.
    """
    if (client_id is None) == (property_id is None):
        raise HTTPException(
            status_code=400,
            detail="Either client_id or property_id must be provided",
        )

    if client_id is not None:
        items = await repo.get_by_client(client_id)
    else:
        items = await repo.get_by_property(property_id)

    return {"total": len(items), "items": items}


@router.get("/{match_id}", response_model=Match)
async def get_match(match_id: str, repo: Repository) -> Match:
    """Get a stored match by ID."""
    match = await repo.get_by_id(match_id)
    if match is None:
        raise HTTPException(status_code=404, detail=f"Match {match_id} not found")
    return match


@router.patch("/{match_id}/status", response_model=Match)
async def update_match_status(
    match_id: str,
    data: MatchStatusUpdate,
    repo: Repository,
) -> Match:
    """
    Update the CRM status of a match.

    Args:
        match_id: Match ID
        data: New status and optional notes
    """
    match = await repo.update_status(match_id, data.status, data.notes)
    if match is None:
        raise HTTPException(status_code=404, detail=f"Match {match_id} not found")

    matches_log.info(f"Match {match_id} -> {data.status.value}")
    return match
