"""Membership service layer: removing, leaving, blocking and listing members."""

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from core.background import best_effort
from core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from core.result import returns_result
from domain.entities.member import Member, can_manage_members
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.validation import require_ids

logger = structlog.get_logger()


@dataclass(frozen=True)
class MemberRemoved:
    member_removed: bool
    project_wrapper_removed: bool


@dataclass(frozen=True)
class MemberBlocked:
    member_blocked: bool
    project_wrapper_updated: bool


class MemberService:
    """Service layer for project membership."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    @returns_result
    async def remove_member(
        self, project_id: str, user_id: str, removed_by: str
    ) -> MemberRemoved:
        """Remove another user from a project.

        Deleting the member row is authoritative. The user's wrapper and the
        project's member counter follow on a best-effort basis.

        Raises:
            ValidationError: If an ID is missing or the remover targets themselves.
            NotFoundError: If the project or the target member does not exist.
            UnauthorizedError: If the remover may not manage members.
        """
        require_ids(project_id=project_id, user_id=user_id, removed_by=removed_by)
        if user_id == removed_by:
            raise ValidationError("user_id", "Cannot remove yourself; leave the project instead")

        async with self._uow_factory() as uow:
            await self._require_manager(uow, project_id, removed_by)
            await self._require_member(uow, project_id, user_id)
            await uow.members.delete(project_id, user_id)
            await uow.commit()

        logger.info(
            "member_removed", project_id=project_id, user_id=user_id, removed_by=removed_by
        )
        wrapper_removed = await self._detach(project_id, user_id)
        return MemberRemoved(member_removed=True, project_wrapper_removed=wrapper_removed)

    @returns_result
    async def leave_member(self, project_id: str, user_id: str) -> MemberRemoved:
        """Leave a project. Same effect as removal, without the actor checks.

        A blocked member cannot leave: the BLOCKED row is what keeps them
        from rejoining.
        """
        require_ids(project_id=project_id, user_id=user_id)

        async with self._uow_factory() as uow:
            if await uow.projects.get_by_id(project_id) is None:
                raise NotFoundError("project", project_id)
            member = await self._require_member(uow, project_id, user_id)
            if member.is_blocked:
                raise UnauthorizedError("You have been blocked from this project")
            await uow.members.delete(project_id, user_id)
            await uow.commit()

        logger.info("member_left", project_id=project_id, user_id=user_id)
        wrapper_removed = await self._detach(project_id, user_id)
        return MemberRemoved(member_removed=True, project_wrapper_removed=wrapper_removed)

    @returns_result
    async def block_member(
        self, project_id: str, user_id: str, blocked_by: str
    ) -> MemberBlocked:
        """Block a member. The member row is kept so the user cannot rejoin."""
        require_ids(project_id=project_id, user_id=user_id, blocked_by=blocked_by)
        if user_id == blocked_by:
            raise ValidationError("user_id", "Cannot block yourself")

        async with self._uow_factory() as uow:
            await self._require_manager(uow, project_id, blocked_by)
            member = await self._require_member(uow, project_id, user_id)
            member.block()
            await uow.members.update(member)
            await uow.commit()

        logger.info(
            "member_blocked", project_id=project_id, user_id=user_id, blocked_by=blocked_by
        )
        updated = await best_effort(
            "mark_wrapper_removed",
            self._mark_wrapper_removed(project_id, user_id),
            project_id=project_id,
            user_id=user_id,
        )
        return MemberBlocked(member_blocked=True, project_wrapper_updated=bool(updated))

    @returns_result
    async def get_members(self, project_id: str, user_id: str) -> list[Member]:
        """List a project's members. The caller must be an active member."""
        require_ids(project_id=project_id, user_id=user_id)

        async with self._uow_factory() as uow:
            if await uow.projects.get_by_id(project_id) is None:
                raise NotFoundError("project", project_id)
            caller = await uow.members.get(project_id, user_id)
            if caller is None or not caller.is_active:
                raise UnauthorizedError("Only project members can view the member list")
            return await uow.members.list_for_project(project_id)

    async def _require_manager(self, uow: IUnitOfWork, project_id: str, actor_id: str) -> None:
        if await uow.projects.get_by_id(project_id) is None:
            raise NotFoundError("project", project_id)
        actor = await uow.members.get(project_id, actor_id)
        if not can_manage_members(actor):
            raise UnauthorizedError("You do not have permission to manage members")

    async def _require_member(self, uow: IUnitOfWork, project_id: str, user_id: str) -> Member:
        member = await uow.members.get(project_id, user_id)
        if member is None:
            raise NotFoundError("member", user_id)
        return member

    async def _detach(self, project_id: str, user_id: str) -> bool:
        """Best-effort follow-up after a member row was deleted."""
        removed = await best_effort(
            "remove_project_wrapper",
            self._remove_wrapper(project_id, user_id),
            project_id=project_id,
            user_id=user_id,
        )
        await best_effort(
            "decrement_member_count",
            self._decrement_member_count(project_id),
            project_id=project_id,
        )
        await best_effort(
            "check_active_members",
            self._warn_if_no_active_members(project_id),
            project_id=project_id,
        )
        return bool(removed)

    async def _remove_wrapper(self, project_id: str, user_id: str) -> bool:
        async with self._uow_factory() as uow:
            removed = await uow.project_wrappers.delete(user_id, project_id)
            await uow.commit()
            return removed

    async def _mark_wrapper_removed(self, project_id: str, user_id: str) -> bool:
        async with self._uow_factory() as uow:
            wrapper = await uow.project_wrappers.get(user_id, project_id)
            if wrapper is None:
                return False
            wrapper.mark_as_removed()
            await uow.project_wrappers.save(wrapper)
            await uow.commit()
            return True

    async def _decrement_member_count(self, project_id: str) -> None:
        async with self._uow_factory() as uow:
            await uow.projects.adjust_member_count(project_id, -1)
            await uow.commit()

    async def _warn_if_no_active_members(self, project_id: str) -> None:
        async with self._uow_factory() as uow:
            remaining = await uow.members.count_active(project_id)
        if remaining == 0:
            logger.warning("project_has_no_active_members", project_id=project_id)
