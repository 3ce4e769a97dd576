"""Invite API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser, OptionalUser
from api.v1.dependencies import get_invite_service
from api.v1.schemas.invite import (
    CreateInviteRequest,
    InviteLinkResponse,
    InviteRevokedResponse,
    InviteValidationResponse,
    JoinProjectResponse,
)
from core.rate_limit import limiter
from domain.services.invite_service import InviteService

# Project-scoped invite routes
project_invites_router = APIRouter(
    prefix="/projects/{project_id}/invites",
    tags=["invites"],
)

# Code-scoped invite routes (validate, join, revoke)
invites_router = APIRouter(
    prefix="/invites",
    tags=["invites"],
)


@project_invites_router.post(
    "",
    response_model=InviteLinkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create invite link",
    responses={
        403: {"description": "Not an active project member"},
        404: {"description": "Project not found"},
        500: {"description": "Could not allocate a unique invite code"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_invite(
    request: Request,
    project_id: str,
    body: CreateInviteRequest,
    user: CurrentUser,
    service: InviteService = Depends(get_invite_service),
) -> InviteLinkResponse:
    """Create a shareable invite link for a project."""
    link = (
        await service.generate_invite_link(
            project_id,
            user.id,
            expires_in_hours=body.expires_in_hours,
            max_uses=body.max_uses,
        )
    ).get_or_raise()
    return InviteLinkResponse.model_validate(link)


@invites_router.get(
    "/{invite_code}",
    response_model=InviteValidationResponse,
    summary="Validate invite code",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def validate_invite(
    request: Request,
    invite_code: str,
    user: OptionalUser,
    service: InviteService = Depends(get_invite_service),
) -> InviteValidationResponse:
    """Check an invite code. Works without authentication; with a token the
    response also says whether the caller already belongs to the project."""
    validation = (
        await service.validate_invite_code(invite_code, user.id if user else None)
    ).get_or_raise()
    return InviteValidationResponse.model_validate(validation)


@invites_router.post(
    "/{invite_code}/join",
    response_model=JoinProjectResponse,
    summary="Join project with invite",
    responses={
        403: {"description": "Invite unusable or user blocked"},
        404: {"description": "Invite, user or project not found"},
        409: {"description": "Already a member"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def join_project(
    request: Request,
    invite_code: str,
    user: CurrentUser,
    service: InviteService = Depends(get_invite_service),
) -> JoinProjectResponse:
    """Join the invite's project as the current user."""
    joined = (await service.join_project_with_invite(invite_code, user.id)).get_or_raise()
    return JoinProjectResponse.model_validate(joined)


@invites_router.delete(
    "/{invite_code}",
    response_model=InviteRevokedResponse,
    summary="Revoke invite",
    responses={403: {"description": "Not the project owner or invite creator"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def revoke_invite(
    request: Request,
    invite_code: str,
    user: CurrentUser,
    service: InviteService = Depends(get_invite_service),
) -> InviteRevokedResponse:
    """Revoke an invite."""
    revoked = (await service.revoke_invite(invite_code, user.id)).get_or_raise()
    return InviteRevokedResponse.model_validate(revoked)
