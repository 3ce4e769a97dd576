"""Friend API routes."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_friend_service
from api.v1.schemas.friend import (
    AnswerFriendRequestRequest,
    FriendListResponse,
    FriendRemovedResponse,
    FriendRequestAnsweredResponse,
    FriendRequestListResponse,
    FriendRequestResponse,
    FriendRequestSentResponse,
    FriendResponse,
    SendFriendRequestRequest,
)
from core.rate_limit import limiter
from domain.services.friend_service import FriendService

router = APIRouter(prefix="/friends", tags=["friends"])


@router.get(
    "",
    response_model=FriendListResponse,
    summary="List friends",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_friends(
    request: Request,
    user: CurrentUser,
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    service: FriendService = Depends(get_friend_service),
) -> FriendListResponse:
    """List the current user's accepted friends with their public profiles."""
    page = (await service.get_friends(user.id, offset=offset, limit=limit)).get_or_raise()
    return FriendListResponse(
        data=[FriendResponse.model_validate(item) for item in page.items],
        meta={"total": page.total, "has_more": page.has_more, "offset": offset, "limit": limit},
    )


@router.get(
    "/requests",
    response_model=FriendRequestListResponse,
    summary="List friend requests",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_friend_requests(
    request: Request,
    user: CurrentUser,
    type: Literal["received", "sent"] = Query("received"),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    service: FriendService = Depends(get_friend_service),
) -> FriendRequestListResponse:
    """List open friend requests the current user received or sent."""
    page = (
        await service.get_friend_requests(user.id, type=type, offset=offset, limit=limit)
    ).get_or_raise()
    return FriendRequestListResponse(
        data=[FriendRequestResponse.model_validate(item) for item in page.items],
        meta={"total": page.total, "has_more": page.has_more, "offset": offset, "limit": limit},
    )


@router.post(
    "/requests",
    response_model=FriendRequestSentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send friend request",
    responses={
        400: {"description": "Missing IDs or request to self"},
        404: {"description": "User not found"},
        409: {"description": "Already friends or request already pending"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def send_friend_request(
    request: Request,
    body: SendFriendRequestRequest,
    user: CurrentUser,
    service: FriendService = Depends(get_friend_service),
) -> FriendRequestSentResponse:
    """Send a friend request to another user."""
    sent = (await service.send_friend_request(user.id, body.receiver_user_id)).get_or_raise()
    return FriendRequestSentResponse.model_validate(sent)


@router.post(
    "/requests/accept",
    response_model=FriendRequestAnsweredResponse,
    summary="Accept friend request",
    responses={
        404: {"description": "No pending request from this user"},
        409: {"description": "Request is no longer pending"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def accept_friend_request(
    request: Request,
    body: AnswerFriendRequestRequest,
    user: CurrentUser,
    service: FriendService = Depends(get_friend_service),
) -> FriendRequestAnsweredResponse:
    """Accept a friend request the current user received."""
    answered = (await service.accept_friend_request(body.requester_id, user.id)).get_or_raise()
    return FriendRequestAnsweredResponse.model_validate(answered)


@router.post(
    "/requests/reject",
    response_model=FriendRequestAnsweredResponse,
    summary="Reject friend request",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def reject_friend_request(
    request: Request,
    body: AnswerFriendRequestRequest,
    user: CurrentUser,
    service: FriendService = Depends(get_friend_service),
) -> FriendRequestAnsweredResponse:
    """Reject a friend request the current user received."""
    answered = (await service.reject_friend_request(body.requester_id, user.id)).get_or_raise()
    return FriendRequestAnsweredResponse.model_validate(answered)


@router.delete(
    "/{friend_user_id}",
    response_model=FriendRemovedResponse,
    summary="Remove friend",
    responses={409: {"description": "Users are not friends"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_friend(
    request: Request,
    friend_user_id: str,
    user: CurrentUser,
    hard_delete: bool = Query(False),
    service: FriendService = Depends(get_friend_service),
) -> FriendRemovedResponse:
    """End a friendship on both sides."""
    removed = (
        await service.remove_friend(user.id, friend_user_id, hard_delete=hard_delete)
    ).get_or_raise()
    return FriendRemovedResponse.model_validate(removed)
