"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.dm_service import DMService
from domain.services.friend_service import FriendService
from domain.services.invite_service import InviteService
from domain.services.member_service import MemberService
from domain.services.project_service import ProjectService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_dm_service() -> DMService:
    """Get DM service instance."""
    return DMService(get_uow_factory())


@lru_cache
def get_friend_service() -> FriendService:
    """Get Friend service instance."""
    return FriendService(get_uow_factory(), dm_service=get_dm_service())


@lru_cache
def get_invite_service() -> InviteService:
    """Get Invite service instance."""
    return InviteService(get_uow_factory())


@lru_cache
def get_member_service() -> MemberService:
    """Get Member service instance."""
    return MemberService(get_uow_factory())


@lru_cache
def get_project_service() -> ProjectService:
    """Get Project service instance."""
    return ProjectService(get_uow_factory())
