"""DM API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_dm_service
from api.v1.schemas.dm import DMChannelBlockedResponse, DMChannelUnblockedResponse
from core.rate_limit import limiter
from domain.services.dm_service import DMService

router = APIRouter(prefix="/dm", tags=["dm"])


@router.post(
    "/{channel_id}/block",
    response_model=DMChannelBlockedResponse,
    summary="Block DM channel",
    responses={
        403: {"description": "Not a participant"},
        404: {"description": "Channel not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def block_dm_channel(
    request: Request,
    channel_id: str,
    user: CurrentUser,
    service: DMService = Depends(get_dm_service),
) -> DMChannelBlockedResponse:
    """Block a DM channel for the current user."""
    blocked = (await service.block_dm_channel(user.id, channel_id)).get_or_raise()
    return DMChannelBlockedResponse.model_validate(blocked)


@router.post(
    "/{channel_id}/unblock",
    response_model=DMChannelUnblockedResponse,
    summary="Unblock DM channel",
    responses={
        403: {"description": "Not a participant"},
        404: {"description": "Channel not found"},
        409: {"description": "Channel not blocked by the caller"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def unblock_dm_channel(
    request: Request,
    channel_id: str,
    user: CurrentUser,
    service: DMService = Depends(get_dm_service),
) -> DMChannelUnblockedResponse:
    """Lift the current user's block on a DM channel."""
    unblocked = (await service.unblock_dm_channel(user.id, channel_id)).get_or_raise()
    return DMChannelUnblockedResponse.model_validate(unblocked)
