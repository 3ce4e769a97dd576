"""Project domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import uuid4

from core.exceptions import ValidationError


class ProjectStatus(StrEnum):
    """Lifecycle status of a project."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"


@dataclass
class Project:
    """Domain entity for a Project."""

    name: str
    owner_id: str
    id: str = field(default_factory=lambda: str(uuid4()))
    description: str | None = None
    image_url: str | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    member_count: int = 1
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("name", "Project name cannot be empty")
        if len(self.name) > 100:
            raise ValidationError("name", "Project name must be at most 100 characters")

    @property
    def is_deleted(self) -> bool:
        return self.status == ProjectStatus.DELETED

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def update_member_count(self, count: int) -> None:
        if count < 0:
            raise ValidationError("member_count", "Member count cannot be negative")
        self.member_count = count
        self.updated_at = datetime.utcnow()

    def update_info(self, name: str | None = None, image_url: str | None = None) -> None:
        if name is not None:
            self.name = name
        if image_url is not None:
            self.image_url = image_url
        self.updated_at = datetime.utcnow()

    def delete(self) -> None:
        """Soft-delete the project. Members and wrappers are left in place."""
        self.status = ProjectStatus.DELETED
        self.updated_at = datetime.utcnow()
