"""Integration tests for the SQLAlchemy repositories on SQLite."""

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

import pytest

from domain.entities.friend import Friend, FriendStatus
from domain.entities.invite import Invite, InviteStatus
from domain.entities.member import Member
from domain.entities.project import Project
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

UowFactory = Callable[[], SQLAlchemyUnitOfWork]
CreateUser = Callable[..., Awaitable[str]]


async def _project(uow_factory: UowFactory, owner_id: str, member_count: int = 1) -> Project:
    async with uow_factory() as uow:
        project = await uow.projects.create(
            Project(name="Alpha", owner_id=owner_id, member_count=member_count)
        )
        await uow.commit()
    return project


def _invite(project_id: str, created_by: str, code: str, **kwargs) -> Invite:
    return Invite(
        id=code,
        project_id=project_id,
        created_by=created_by,
        expires_at=kwargs.pop("expires_at", datetime.utcnow() + timedelta(hours=1)),
        **kwargs,
    )


class TestInviteRepository:
    @pytest.mark.asyncio
    async def test_create_if_absent_refuses_duplicate_code(
        self, uow_factory: UowFactory, create_user: CreateUser
    ) -> None:
        owner = await create_user("Owner")
        project = await _project(uow_factory, owner)
        code = f"dup{owner[-5:]}"

        async with uow_factory() as uow:
            first = await uow.invites.create_if_absent(_invite(project.id, owner, code))
            second = await uow.invites.create_if_absent(
                _invite(project.id, owner, code, max_uses=9)
            )
            await uow.commit()

        assert first is True
        assert second is False
        async with uow_factory() as uow:
            stored = await uow.invites.get_by_code(code)
            assert await uow.invites.exists_by_code(code)
        assert stored is not None
        assert stored.max_uses is None

    @pytest.mark.asyncio
    async def test_consume_use_expires_at_limit(
        self, uow_factory: UowFactory, create_user: CreateUser
    ) -> None:
        owner = await create_user("Owner")
        project = await _project(uow_factory, owner)
        code = f"lim{owner[-5:]}"
        async with uow_factory() as uow:
            await uow.invites.create_if_absent(_invite(project.id, owner, code, max_uses=2))
            await uow.commit()

        outcomes = []
        for _ in range(3):
            async with uow_factory() as uow:
                outcomes.append(await uow.invites.consume_use(code))
                await uow.commit()

        assert outcomes == [True, True, False]
        async with uow_factory() as uow:
            invite = await uow.invites.get_by_code(code)
        assert invite is not None
        assert invite.current_uses == 2
        assert invite.status == InviteStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_consume_use_refuses_expired_invite(
        self, uow_factory: UowFactory, create_user: CreateUser
    ) -> None:
        owner = await create_user("Owner")
        project = await _project(uow_factory, owner)
        code = f"old{owner[-5:]}"
        async with uow_factory() as uow:
            await uow.invites.create_if_absent(
                _invite(
                    project.id, owner, code, expires_at=datetime.utcnow() - timedelta(seconds=1)
                )
            )
            consumed = await uow.invites.consume_use(code)
            await uow.commit()

        assert consumed is False


class TestProjectRepository:
    @pytest.mark.asyncio
    async def test_adjust_member_count_never_goes_negative(
        self, uow_factory: UowFactory, create_user: CreateUser
    ) -> None:
        owner = await create_user("Owner")
        project = await _project(uow_factory, owner, member_count=1)

        async with uow_factory() as uow:
            assert await uow.projects.adjust_member_count(project.id, 1) == 2
            assert await uow.projects.adjust_member_count(project.id, -5) == 0
            await uow.commit()

    @pytest.mark.asyncio
    async def test_adjust_unknown_project_returns_none(self, uow_factory: UowFactory) -> None:
        async with uow_factory() as uow:
            assert await uow.projects.adjust_member_count("no-such-project", 1) is None


class TestMemberRepository:
    @pytest.mark.asyncio
    async def test_count_active_skips_blocked(
        self, uow_factory: UowFactory, create_user: CreateUser
    ) -> None:
        owner = await create_user("Owner")
        other = await create_user("Other")
        project = await _project(uow_factory, owner)

        async with uow_factory() as uow:
            await uow.members.create(Member(project_id=project.id, user_id=owner))
            blocked = await uow.members.create(Member(project_id=project.id, user_id=other))
            blocked.block()
            await uow.members.update(blocked)
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.members.count_active(project.id) == 1
            assert len(await uow.members.list_for_project(project.id)) == 2


class TestFriendRepository:
    @pytest.mark.asyncio
    async def test_save_upserts_and_lists_by_status(
        self, uow_factory: UowFactory, create_user: CreateUser
    ) -> None:
        alice = await create_user("Alice")
        bob = await create_user("Bob")
        now = datetime.utcnow()

        async with uow_factory() as uow:
            row = Friend.received_request(bob, "Bob", None, "req", now)
            await uow.friends.save(alice, row)
            await uow.commit()

        async with uow_factory() as uow:
            pending = await uow.friends.list_by_status(alice, [FriendStatus.PENDING])
            assert [f.id for f in pending] == [bob]
            row = await uow.friends.get(alice, bob)
            assert row is not None
            row.accept()
            await uow.friends.save(alice, row)
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.friends.are_users_friends(alice, bob)
            assert not await uow.friends.are_users_friends(bob, alice)
            assert await uow.friends.count_by_status(alice, FriendStatus.ACCEPTED) == 1
