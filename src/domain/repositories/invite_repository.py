"""Invite repository protocol."""

from typing import Protocol

from domain.entities.invite import Invite


class IInviteRepository(Protocol):
    """Repository interface for Invite entities, keyed by invite code."""

    async def get_by_code(self, code: str) -> Invite | None:
        ...

    async def exists_by_code(self, code: str) -> bool:
        ...

    async def create_if_absent(self, invite: Invite) -> bool:
        """Insert the invite unless its code is taken.

        Returns False on a code collision instead of raising.
        """
        ...

    async def consume_use(self, code: str) -> bool:
        """Atomically record one use if the invite is still under its limit.

        Returns False if the invite is gone, no longer active, or full.
        """
        ...

    async def update(self, invite: Invite) -> Invite:
        ...
