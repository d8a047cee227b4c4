"""Profile API routes."""

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentCaller, OptionalCaller
from api.v1.dependencies import get_profile_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.profile import (
    IdentityPage,
    IdentityPageResponse,
    ProfileContentUpdate,
    ProfileCreate,
    ProfileDetailResponse,
    ProfileEventListResponse,
    ProfileEventResponse,
    ProfileResponse,
    ProfileUpdateResponse,
)
from core.config import settings
from core.rate_limit import limiter
from domain.entities.profile import Profile
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


def _to_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse.model_validate(profile)


@router.post(
    "",
    response_model=ProfileDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create your profile",
    responses={
        201: {"description": "Profile created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid handle or empty content pointer"},
        409: {"model": ErrorResponse, "description": "Handle taken or profile already exists"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_profile(
    request: Request,
    body: ProfileCreate,
    caller: CurrentCaller,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Register a profile for the calling identity. One profile per identity."""
    profile = await service.create_profile(
        caller=caller.identity,
        content_pointer=body.content_pointer,
        handle=body.handle,
    )
    return ProfileDetailResponse(data=_to_response(profile))


@router.get(
    "",
    response_model=IdentityPageResponse,
    summary="List identities in creation order",
    responses={400: {"model": ErrorResponse, "description": "Offset or limit out of range"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_identities(
    request: Request,
    offset: int = Query(0),
    limit: int = Query(20, le=settings.list_max_limit),
    service: ProfileService = Depends(get_profile_service),
) -> IdentityPageResponse:
    """Page through every identity that has registered a profile."""
    identities = service.list_identities(offset, limit)
    return IdentityPageResponse(
        data=IdentityPage(
            offset=offset,
            limit=limit,
            total=service.stats().total_profiles,
            identities=identities,
        )
    )


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get your profile",
    responses={404: {"model": ErrorResponse, "description": "You have no profile"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    caller: CurrentCaller,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the calling identity's profile."""
    return ProfileDetailResponse(data=_to_response(service.get_profile(caller.identity)))


@router.patch(
    "/me",
    response_model=ProfileUpdateResponse,
    summary="Update your content pointer",
    responses={
        400: {"model": ErrorResponse, "description": "Empty content pointer"},
        404: {"model": ErrorResponse, "description": "You have no profile"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_my_profile(
    request: Request,
    body: ProfileContentUpdate,
    caller: CurrentCaller,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileUpdateResponse:
    """Replace the caller's content pointer. Handle and views are untouched."""
    profile, previous = await service.update_profile(caller.identity, body.content_pointer)
    return ProfileUpdateResponse(
        data=_to_response(profile),
        previous_content_pointer=previous,
    )


@router.get(
    "/by-handle/{handle}",
    response_model=ProfileDetailResponse,
    summary="Get a profile by handle",
    responses={404: {"model": ErrorResponse, "description": "Handle not registered"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile_by_handle(
    request: Request,
    handle: str,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Resolve a handle (case-sensitive) to its profile."""
    return ProfileDetailResponse(data=_to_response(service.get_profile_by_handle(handle)))


@router.get(
    "/{identity}",
    response_model=ProfileDetailResponse,
    summary="Get a profile by identity",
    responses={404: {"model": ErrorResponse, "description": "Profile not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    identity: str,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the profile owned by an identity."""
    return ProfileDetailResponse(data=_to_response(service.get_profile(identity)))


@router.post(
    "/{identity}/views",
    response_model=ProfileDetailResponse,
    summary="Record a profile view",
    responses={404: {"model": ErrorResponse, "description": "Profile not found"}},
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def record_view(
    request: Request,
    identity: str,
    caller: OptionalCaller,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Count one view. Anyone may call this, including the owner."""
    profile = await service.record_view(identity, viewer=caller.identity if caller else None)
    return ProfileDetailResponse(data=_to_response(profile))


@router.get(
    "/{identity}/events",
    response_model=ProfileEventListResponse,
    summary="Get a profile's event history",
    responses={404: {"model": ErrorResponse, "description": "Profile not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile_events(
    request: Request,
    identity: str,
    limit: int = Query(50, ge=1, le=200),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileEventListResponse:
    """Get recorded facts for a profile, newest first."""
    events = await service.get_recent_events(identity, limit=limit)
    return ProfileEventListResponse(
        data=[
            ProfileEventResponse(
                id=event.id,
                kind=event.kind.value,
                identity=event.identity,
                actor=event.actor,
                payload=event.payload,
                timestamp=event.timestamp,
            )
            for event in events
        ]
    )
