"""Project wrapper domain entity.

A wrapper is the per-user index row that lists the projects a user belongs
to, with a denormalized snapshot of the project's name and image.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class ProjectWrapperStatus(StrEnum):
    """Status of a user's wrapper for one project."""

    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    LEFT = "LEFT"
    REMOVED = "REMOVED"


@dataclass
class ProjectWrapper:
    """Domain entity for a ProjectWrapper, keyed by ``(user_id, id)``.

    ``id`` is the project ID.
    """

    id: str
    user_id: str
    project_name: str
    project_image_url: str | None = None
    status: ProjectWrapperStatus = ProjectWrapperStatus.ACTIVE
    joined_at: datetime = field(default_factory=datetime.utcnow)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def project_id(self) -> str:
        return self.id

    @property
    def is_active(self) -> bool:
        return self.status == ProjectWrapperStatus.ACTIVE

    def _set_status(self, status: ProjectWrapperStatus) -> None:
        if self.status == status:
            return
        self.status = status
        self.updated_at = datetime.utcnow()

    def activate(self) -> None:
        """Reactivate the wrapper; a rejoin resets ``joined_at``."""
        if self.is_active:
            return
        self._set_status(ProjectWrapperStatus.ACTIVE)
        self.joined_at = self.updated_at

    def archive(self) -> None:
        self._set_status(ProjectWrapperStatus.ARCHIVED)

    def mark_as_left(self) -> None:
        self._set_status(ProjectWrapperStatus.LEFT)

    def mark_as_removed(self) -> None:
        self._set_status(ProjectWrapperStatus.REMOVED)

    def update_project_info(
        self, name: str | None = None, image_url: str | None = None
    ) -> bool:
        """Refresh the project snapshot. Returns True if anything changed."""
        changed = False
        if name and name != self.project_name:
            self.project_name = name
            changed = True
        if image_url is not None and image_url != self.project_image_url:
            self.project_image_url = image_url
            changed = True
        if changed:
            self.updated_at = datetime.utcnow()
        return changed
