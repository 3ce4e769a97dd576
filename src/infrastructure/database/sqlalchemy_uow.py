"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_dm_repo import (
    SQLAlchemyDMChannelRepository,
    SQLAlchemyDMWrapperRepository,
)
from infrastructure.database.repositories.sqlalchemy_friend_repo import SQLAlchemyFriendRepository
from infrastructure.database.repositories.sqlalchemy_invite_repo import SQLAlchemyInviteRepository
from infrastructure.database.repositories.sqlalchemy_member_repo import SQLAlchemyMemberRepository
from infrastructure.database.repositories.sqlalchemy_project_repo import SQLAlchemyProjectRepository
from infrastructure.database.repositories.sqlalchemy_project_wrapper_repo import (
    SQLAlchemyProjectWrapperRepository,
)
from infrastructure.database.repositories.sqlalchemy_user_repo import SQLAlchemyUserRepository


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    Each ``async with`` block opens its own session, so one instance must
    not be entered concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def users(self) -> SQLAlchemyUserRepository:
        """Get user repository."""
        return SQLAlchemyUserRepository(self._require_session())

    @property
    def friends(self) -> SQLAlchemyFriendRepository:
        """Get friend repository."""
        return SQLAlchemyFriendRepository(self._require_session())

    @property
    def projects(self) -> SQLAlchemyProjectRepository:
        """Get project repository."""
        return SQLAlchemyProjectRepository(self._require_session())

    @property
    def members(self) -> SQLAlchemyMemberRepository:
        """Get member repository."""
        return SQLAlchemyMemberRepository(self._require_session())

    @property
    def project_wrappers(self) -> SQLAlchemyProjectWrapperRepository:
        """Get project wrapper repository."""
        return SQLAlchemyProjectWrapperRepository(self._require_session())

    @property
    def invites(self) -> SQLAlchemyInviteRepository:
        """Get invite repository."""
        return SQLAlchemyInviteRepository(self._require_session())

    @property
    def dm_channels(self) -> SQLAlchemyDMChannelRepository:
        """Get DM channel repository."""
        return SQLAlchemyDMChannelRepository(self._require_session())

    @property
    def dm_wrappers(self) -> SQLAlchemyDMWrapperRepository:
        """Get DM wrapper repository."""
        return SQLAlchemyDMWrapperRepository(self._require_session())

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager and cleanup."""
        if self._session:
            if exc_type:
                await self.rollback()
            await self._session.close()
            self._session = None
