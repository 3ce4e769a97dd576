"""User repository protocol."""

from collections.abc import Iterable
from typing import Protocol

from domain.entities.user import User


class IUserRepository(Protocol):
    """Repository interface for User entities."""

    async def create(self, user: User) -> User:
        ...

    async def get_by_id(self, id: str) -> User | None:
        ...

    async def get_many(self, ids: Iterable[str]) -> dict[str, User]:
        """Get users by ID. Missing IDs are absent from the result."""
        ...

    async def update(self, user: User) -> User:
        ...

    async def set_friend_count(self, id: str, count: int) -> None:
        """Overwrite the denormalized friend counter."""
        ...
