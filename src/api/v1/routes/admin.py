"""Admin API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentCaller
from api.v1.dependencies import get_profile_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.profile import ProfileContentUpdate, ProfileResponse, ProfileUpdateResponse
from core.rate_limit import limiter
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.put(
    "/profiles/{identity}/content",
    response_model=ProfileUpdateResponse,
    summary="Override a profile's content pointer",
    responses={
        403: {"model": ErrorResponse, "description": "Caller is not the admin identity"},
        404: {"model": ErrorResponse, "description": "Profile not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def override_profile_content(
    request: Request,
    identity: str,
    body: ProfileContentUpdate,
    caller: CurrentCaller,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileUpdateResponse:
    """Replace any profile's content pointer. Restricted to the admin identity."""
    profile, previous = await service.override_profile(
        caller.identity, identity, body.content_pointer
    )
    return ProfileUpdateResponse(
        data=ProfileResponse.model_validate(profile),
        previous_content_pointer=previous,
    )
