"""Registry-wide API routes: handle checks, leaderboard and stats."""

from fastapi import APIRouter, Depends, Query, Request

from api.v1.dependencies import get_profile_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.profile import (
    HandleAvailability,
    HandleAvailabilityResponse,
    LeaderboardEntryResponse,
    LeaderboardResponse,
    StatsResponse,
    StatsResponseData,
)
from core.config import settings
from core.rate_limit import limiter
from domain.entities.handle import is_valid_handle_charset, is_valid_handle_length
from domain.services.profile_service import ProfileService

router = APIRouter(tags=["registry"])

DEFAULT_LEADERBOARD_SIZE = 10


@router.get(
    "/handles/{handle}/availability",
    response_model=HandleAvailabilityResponse,
    summary="Check whether a handle can be claimed",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def check_handle(
    request: Request,
    handle: str,
    service: ProfileService = Depends(get_profile_service),
) -> HandleAvailabilityResponse:
    """Report availability together with the result of each handle rule."""
    return HandleAvailabilityResponse(
        data=HandleAvailability(
            handle=handle,
            available=service.is_handle_available(handle),
            valid_length=is_valid_handle_length(handle),
            valid_charset=is_valid_handle_charset(handle),
            claimed=service.is_handle_claimed(handle),
        )
    )


@router.get(
    "/leaderboard",
    response_model=LeaderboardResponse,
    summary="Most viewed profiles",
    responses={400: {"model": ErrorResponse, "description": "Limit exceeds registered profiles"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_leaderboard(
    request: Request,
    limit: int | None = Query(None, le=settings.leaderboard_max_limit),
    service: ProfileService = Depends(get_profile_service),
) -> LeaderboardResponse:
    """Profiles ranked by view count; ties keep registration order.

    Without ``limit`` the board shows up to ten profiles. An explicit limit
    larger than the registry is rejected.
    """
    if limit is None:
        limit = min(DEFAULT_LEADERBOARD_SIZE, service.stats().total_profiles)
    return LeaderboardResponse(
        data=[
            LeaderboardEntryResponse.model_validate(entry)
            for entry in service.top_profiles(limit)
        ]
    )


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Registry totals",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_stats(
    request: Request,
    service: ProfileService = Depends(get_profile_service),
) -> StatsResponse:
    """Total profiles and total views across the registry."""
    return StatsResponse(data=StatsResponseData.model_validate(service.stats()))
