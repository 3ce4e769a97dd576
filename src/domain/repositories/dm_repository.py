"""DM channel and DM wrapper repository protocols."""

from typing import Protocol

from domain.entities.dm import DMChannel, DMWrapper


class IDMChannelRepository(Protocol):
    """Repository interface for DM channels."""

    async def get_by_id(self, id: str) -> DMChannel | None:
        ...

    async def save(self, channel: DMChannel) -> DMChannel:
        """Insert or overwrite a channel."""
        ...


class IDMWrapperRepository(Protocol):
    """Repository interface for per-user DM wrappers."""

    async def get(self, user_id: str, other_user_id: str) -> DMWrapper | None:
        ...

    async def save(self, wrapper: DMWrapper) -> DMWrapper:
        """Insert or overwrite the wrapper keyed by ``(user_id, other_user_id)``."""
        ...

    async def delete(self, user_id: str, other_user_id: str) -> bool:
        """Delete the wrapper. Returns False when there was none."""
        ...
