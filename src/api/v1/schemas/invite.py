"""Pydantic schemas for Invite API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateInviteRequest(BaseModel):
    """Schema for creating a project invite link."""

    expires_in_hours: int | None = Field(None, ge=1, le=720)
    max_uses: int | None = Field(None, ge=1)


class InviteLinkResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "invite_code": "aB3dE6gH",
                "invite_link": "https://projecting.app/invite/aB3dE6gH",
                "expires_at": "2026-02-02T10:00:00",
                "max_uses": None,
                "status": "active",
            }
        },
    )

    invite_code: str
    invite_link: str
    expires_at: datetime
    max_uses: int | None = None
    status: str


class InviteValidationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    valid: bool
    project_id: str | None = None
    project_name: str | None = None
    project_image_url: str | None = None
    expires_at: datetime | None = None
    max_uses: int | None = None
    current_uses: int | None = None
    is_already_member: bool = False
    error_message: str | None = None


class JoinProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    project_id: str
    project_name: str
    membership_id: str
    success: bool
    message: str


class InviteRevokedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    invite_code: str
    status: str
