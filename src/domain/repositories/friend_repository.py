"""Friend repository protocol."""

from collections.abc import Sequence
from typing import Protocol

from domain.entities.friend import Friend, FriendStatus


class IFriendRepository(Protocol):
    """Repository interface for per-user Friend rows.

    Rows are keyed by ``(owner_id, friend.id)``: the owner is the viewer,
    ``friend.id`` is the other user.
    """

    async def get(self, owner_id: str, friend_id: str) -> Friend | None:
        """Get the owner's row for another user."""
        ...

    async def save(self, owner_id: str, friend: Friend) -> Friend:
        """Insert or overwrite the owner's row for ``friend.id``."""
        ...

    async def delete(self, owner_id: str, friend_id: str) -> bool:
        """Hard-delete a row. Returns False if there was none."""
        ...

    async def list_by_status(
        self, owner_id: str, statuses: Sequence[FriendStatus]
    ) -> list[Friend]:
        """List the owner's rows in any of ``statuses``, newest request first."""
        ...

    async def count_by_status(self, owner_id: str, status: FriendStatus) -> int:
        """Count the owner's rows with ``status``."""
        ...

    async def are_users_friends(self, user_id: str, other_user_id: str) -> bool:
        """Check if ``user_id`` holds an ACCEPTED row for ``other_user_id``."""
        ...
