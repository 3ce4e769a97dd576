"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.dm_repository import IDMChannelRepository, IDMWrapperRepository
from domain.repositories.friend_repository import IFriendRepository
from domain.repositories.invite_repository import IInviteRepository
from domain.repositories.member_repository import IMemberRepository
from domain.repositories.project_repository import IProjectRepository
from domain.repositories.project_wrapper_repository import IProjectWrapperRepository
from domain.repositories.user_repository import IUserRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    users: IUserRepository
    friends: IFriendRepository
    projects: IProjectRepository
    members: IMemberRepository
    project_wrappers: IProjectWrapperRepository
    invites: IInviteRepository
    dm_channels: IDMChannelRepository
    dm_wrappers: IDMWrapperRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
