"""Project repository protocol."""

from typing import Protocol

from domain.entities.project import Project


class IProjectRepository(Protocol):
    """Repository interface for Project entities."""

    async def create(self, project: Project) -> Project:
        ...

    async def get_by_id(self, id: str) -> Project | None:
        ...

    async def update(self, project: Project) -> Project:
        ...

    async def adjust_member_count(self, id: str, delta: int) -> int | None:
        """Atomically add ``delta`` to the member counter, floored at zero.

        Returns the new count, or None if the project does not exist.
        """
        ...
