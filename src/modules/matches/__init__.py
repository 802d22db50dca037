"""Matches module."""

from src.modules.matches.models import (
    Match,
    MatchListResponse,
    MatchResult,
    MatchStatus,
    MatchStatusUpdate,
)
from src.modules.matches.repository import MatchRepository

__all__ = [
    "Match",
    "MatchListResponse",
    "MatchResult",
    "MatchStatus",
    "MatchStatusUpdate",
    "MatchRepository",
]
