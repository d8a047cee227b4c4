"""Pydantic schemas for Profile API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileCreate(BaseModel):
    """Schema for creating a Profile.

    Handle rules are enforced by the registry so that each violation gets
    its own error code.
    """

    handle: str = Field(..., max_length=64)
    content_pointer: str = Field(..., max_length=512)


class ProfileContentUpdate(BaseModel):
    """Schema for replacing a profile's content pointer."""

    content_pointer: str = Field(..., max_length=512)


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "identity": "0x52908400098527886E0F7030069857D2E4169EE7",
                "handle": "alice",
                "content_pointer": "bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi",
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
                "view_count": 0,
            }
        },
    )

    identity: str
    handle: str
    content_pointer: str
    created_at: datetime
    updated_at: datetime
    view_count: int


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse


class ProfileUpdateResponse(BaseModel):
    """Schema for a content update, including the replaced pointer."""

    data: ProfileResponse
    previous_content_pointer: str


class IdentityPage(BaseModel):
    """Schema for one page of the roster."""

    offset: int
    limit: int
    total: int
    identities: list[str]


class IdentityPageResponse(BaseModel):
    """Schema for roster pagination."""

    data: IdentityPage


class HandleAvailability(BaseModel):
    """Schema for a handle check with the outcome of each rule."""

    handle: str
    available: bool
    valid_length: bool
    valid_charset: bool
    claimed: bool


class HandleAvailabilityResponse(BaseModel):
    """Schema for handle availability."""

    data: HandleAvailability


class LeaderboardEntryResponse(BaseModel):
    """Schema for one leaderboard row."""

    model_config = ConfigDict(from_attributes=True)

    rank: int
    identity: str
    handle: str
    view_count: int


class LeaderboardResponse(BaseModel):
    """Schema for the leaderboard."""

    data: list[LeaderboardEntryResponse]


class StatsResponseData(BaseModel):
    """Schema for registry totals."""

    model_config = ConfigDict(from_attributes=True)

    total_profiles: int
    total_views: int


class StatsResponse(BaseModel):
    """Schema for registry stats."""

    data: StatsResponseData


class ProfileEventResponse(BaseModel):
    """Schema for a recorded registry fact."""

    id: UUID
    kind: str
    identity: str
    actor: str | None = None
    payload: dict[str, Any]
    timestamp: datetime


class ProfileEventListResponse(BaseModel):
    """Schema for a list of registry facts."""

    data: list[ProfileEventResponse]
