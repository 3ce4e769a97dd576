"""Pydantic schemas for Project and membership API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CreateProjectRequest(BaseModel):
    """Schema for creating a project."""

    name: str = Field(..., min_length=1, max_length=100)
    image_url: str | None = Field(None, max_length=500)
    description: str | None = Field(None, max_length=1000)


class UpdateProjectRequest(BaseModel):
    """Schema for renaming a project or changing its image."""

    name: str | None = Field(None, min_length=1, max_length=100)
    image_url: str | None = Field(None, max_length=500)


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    owner_id: str
    description: str | None = None
    image_url: str | None = None
    status: str
    member_count: int
    created_at: datetime


class ProjectWrapperResponse(BaseModel):
    """An entry of the user's project list."""

    model_config = ConfigDict(from_attributes=True)

    project_id: str
    project_name: str
    project_image_url: str | None = None
    status: str
    joined_at: datetime


class ProjectListResponse(BaseModel):
    data: list[ProjectWrapperResponse]
    meta: dict[str, Any]


class ProjectDeletedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    project_id: str
    deleted_at: datetime


class WrappersSyncedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    project_id: str
    updated_member_count: int
    success: bool


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    user_id: str
    role_ids: list[str]
    status: str
    joined_at: datetime


class MemberListResponse(BaseModel):
    data: list[MemberResponse]
    meta: dict[str, Any]


class MemberRemovedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member_removed: bool
    project_wrapper_removed: bool


class MemberBlockedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member_blocked: bool
    project_wrapper_updated: bool
