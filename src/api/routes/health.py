"""Health check routes."""

from fastapi import APIRouter

from config.settings import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health() -> dict:
    """Health check endpoint, with the active match threshold."""
    return {"status": True, "min_score": get_settings().matching.min_score}
