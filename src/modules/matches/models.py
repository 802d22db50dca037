"""
Match Models.

MatchResult is what the matching engine produces; Match is the stored
row the CRM manages afterwards.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MatchStatus(str, Enum):
    """CRM workflow status of a stored match."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CONTACTED = "contacted"


class MatchResult(BaseModel):
    """Scored (property, purchase profile) pair."""

    model_config = ConfigDict(frozen=True)

    purchase_profile_id: str
    property_id: str
    client_id: str
    score: int = Field(..., ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)


class Match(BaseModel):
    """Match model from database."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    purchase_profile_id: str
    property_id: str
    client_id: str
    score: int
    reasons: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    status: MatchStatus = MatchStatus.PENDING
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class MatchStatusUpdate(BaseModel):
    """Model for updating the CRM status of a match."""

    status: MatchStatus
    notes: str | None = Field(None, max_length=2000)


class MatchListResponse(BaseModel):
    """Model for stored match listings."""

    total: int
    items: list[Match]
