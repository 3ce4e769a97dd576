"""Project wrapper repository protocol."""

from typing import Protocol

from domain.entities.project_wrapper import ProjectWrapper, ProjectWrapperStatus


class IProjectWrapperRepository(Protocol):
    """Repository interface for per-user project wrappers."""

    async def get(self, user_id: str, project_id: str) -> ProjectWrapper | None:
        ...

    async def save(self, wrapper: ProjectWrapper) -> ProjectWrapper:
        """Insert or overwrite the wrapper keyed by ``(user_id, id)``."""
        ...

    async def delete(self, user_id: str, project_id: str) -> bool:
        ...

    async def list_for_user(
        self, user_id: str, status: ProjectWrapperStatus | None = None
    ) -> list[ProjectWrapper]:
        ...

    async def list_for_project(self, project_id: str) -> list[ProjectWrapper]:
        """All wrappers pointing at a project, across users."""
        ...
