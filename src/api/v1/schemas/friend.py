"""Pydantic schemas for Friend API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SendFriendRequestRequest(BaseModel):
    """Schema for sending a friend request."""

    receiver_user_id: str = Field(..., min_length=1, max_length=128)


class AnswerFriendRequestRequest(BaseModel):
    """Schema for accepting or rejecting a received request."""

    requester_id: str = Field(..., min_length=1, max_length=128)


class FriendRequestSentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    friend_request_id: str
    status: str
    requested_at: datetime


class FriendRequestAnsweredResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    friend_id: str
    status: str
    answered_at: datetime | None = None


class FriendRemovedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: bool
    removed_at: datetime
    sides_updated: int


class FriendResponse(BaseModel):
    """A friend with the peer's current public profile."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "user_id": "u2",
                "name": "Jane",
                "profile_image_url": None,
                "presence": "online",
                "status": "ACCEPTED",
                "requested_at": "2026-02-01T10:00:00",
                "accepted_at": "2026-02-01T10:05:00",
            }
        },
    )

    user_id: str
    name: str
    profile_image_url: str | None = None
    presence: str | None = None
    status: str
    requested_at: datetime
    accepted_at: datetime | None = None


class FriendRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    request_id: str | None = None
    requester_user_id: str
    receiver_user_id: str
    name: str
    profile_image_url: str | None = None
    presence: str | None = None
    requested_at: datetime


class FriendListResponse(BaseModel):
    data: list[FriendResponse]
    meta: dict[str, Any]


class FriendRequestListResponse(BaseModel):
    data: list[FriendRequestResponse]
    meta: dict[str, Any]
