"""Jobs module for matching runs."""

from src.jobs.emitter import MatchEmitter
from src.jobs.matching import (
    MatchingService,
    close_matching_service,
    get_matching_service,
)

__all__ = [
    "MatchEmitter",
    "MatchingService",
    "get_matching_service",
    "close_matching_service",
]
