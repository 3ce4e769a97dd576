"""Pydantic schemas for DM API."""

from pydantic import BaseModel, ConfigDict


class DMChannelBlockedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    channel_id: str
    blocked_by: list[str]
    wrapper_removed: bool


class DMChannelUnblockedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    channel_id: str
    success: bool
    message: str
    is_fully_unblocked: bool
