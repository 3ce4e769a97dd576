"""Member repository protocol."""

from typing import Protocol

from domain.entities.member import Member


class IMemberRepository(Protocol):
    """Repository interface for project members.

    Every lookup names its project explicitly; there is no project-scoped
    instance.
    """

    async def create(self, member: Member) -> Member:
        """Create a member. Raises ConflictError if one already exists."""
        ...

    async def get(self, project_id: str, user_id: str) -> Member | None:
        ...

    async def update(self, member: Member) -> Member:
        ...

    async def delete(self, project_id: str, user_id: str) -> bool:
        """Delete a member row. Returns False if there was none."""
        ...

    async def list_for_project(self, project_id: str) -> list[Member]:
        ...

    async def count_active(self, project_id: str) -> int:
        ...
