"""Unit tests for InviteService."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    ConflictError,
    InviteCodeGenerationError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from domain.entities.invite import MAX_USES_MESSAGE, REVOKED_MESSAGE, Invite, InviteStatus
from domain.entities.member import Member, MemberStatus
from domain.entities.project import Project, ProjectStatus
from domain.entities.project_wrapper import ProjectWrapper, ProjectWrapperStatus
from domain.services.invite_service import (
    INVITE_NOT_FOUND_MESSAGE,
    PROJECT_GONE_MESSAGE,
    InviteService,
)
from tests.unit.conftest import FakeUnitOfWork, make_user


@pytest.fixture
def service(uow: FakeUnitOfWork) -> InviteService:
    return InviteService(
        lambda: uow, base_url="https://app.example.com/", code_length=8, max_attempts=3
    )


@pytest.fixture
def project(project_id: str) -> Project:
    return Project(id=project_id, name="Alpha", owner_id="user-owner", image_url="alpha.png")


@pytest.fixture
def invite(project_id: str) -> Invite:
    return Invite(
        id="Code1234",
        project_id=project_id,
        created_by="user-owner",
        expires_at=datetime.utcnow() + timedelta(hours=1),
        max_uses=5,
    )


async def _echo(entity):
    return entity


# --- generate_invite_link ---


class TestGenerateInviteLink:
    @pytest.fixture(autouse=True)
    def _member_inviter(self, uow: FakeUnitOfWork, project: Project, user_id: str) -> None:
        uow.projects.get_by_id.return_value = project
        uow.members.get.return_value = Member(project_id=project.id, user_id=user_id)
        uow.invites.exists_by_code.return_value = False
        uow.invites.create_if_absent.return_value = True

    @pytest.mark.asyncio
    async def test_creates_invite_with_link(
        self, service: InviteService, uow: FakeUnitOfWork, project_id: str, user_id: str
    ) -> None:
        result = await service.generate_invite_link(project_id, user_id, max_uses=10)

        link = result.get_or_raise()
        assert len(link.invite_code) == 8
        assert link.invite_link == f"https://app.example.com/invite/{link.invite_code}"
        assert link.max_uses == 10
        assert link.status == InviteStatus.ACTIVE
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_default_expiry_is_24_hours(
        self, service: InviteService, project_id: str, user_id: str
    ) -> None:
        before = datetime.utcnow()

        link = (await service.generate_invite_link(project_id, user_id)).get_or_raise()

        assert before + timedelta(hours=24) <= link.expires_at
        assert link.expires_at <= datetime.utcnow() + timedelta(hours=24)

    @pytest.mark.asyncio
    async def test_retries_on_collision(
        self, service: InviteService, uow: FakeUnitOfWork, project_id: str, user_id: str
    ) -> None:
        uow.invites.exists_by_code.side_effect = [True, False, False]
        uow.invites.create_if_absent.side_effect = [False, True]

        result = await service.generate_invite_link(project_id, user_id)

        assert result.success
        assert uow.invites.exists_by_code.await_count == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(
        self, service: InviteService, uow: FakeUnitOfWork, project_id: str, user_id: str
    ) -> None:
        uow.invites.exists_by_code.return_value = True

        result = await service.generate_invite_link(project_id, user_id)

        assert isinstance(result.error, InviteCodeGenerationError)
        assert uow.invites.exists_by_code.await_count == 3
        uow.invites.create_if_absent.assert_not_called()
        assert not uow.committed

    @pytest.mark.parametrize("hours", [0, -1, 721])
    @pytest.mark.asyncio
    async def test_rejects_out_of_range_expiry(
        self, service: InviteService, project_id: str, user_id: str, hours: int
    ) -> None:
        result = await service.generate_invite_link(project_id, user_id, expires_in_hours=hours)

        assert isinstance(result.error, ValidationError)

    @pytest.mark.asyncio
    async def test_rejects_zero_max_uses(
        self, service: InviteService, project_id: str, user_id: str
    ) -> None:
        result = await service.generate_invite_link(project_id, user_id, max_uses=0)

        assert isinstance(result.error, ValidationError)

    @pytest.mark.asyncio
    async def test_deleted_project_is_not_found(
        self, service: InviteService, project: Project, project_id: str, user_id: str
    ) -> None:
        project.delete()

        result = await service.generate_invite_link(project_id, user_id)

        assert isinstance(result.error, NotFoundError)

    @pytest.mark.asyncio
    async def test_non_member_cannot_invite(
        self, service: InviteService, uow: FakeUnitOfWork, project_id: str, user_id: str
    ) -> None:
        uow.members.get.return_value = None

        result = await service.generate_invite_link(project_id, user_id)

        assert isinstance(result.error, UnauthorizedError)


# --- validate_invite_code ---


class TestValidateInviteCode:
    @pytest.mark.asyncio
    async def test_valid_invite(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        invite: Invite,
        project: Project,
        user_id: str,
    ) -> None:
        uow.invites.get_by_code.return_value = invite
        uow.projects.get_by_id.return_value = project
        uow.members.get.return_value = None

        validation = (await service.validate_invite_code(invite.code, user_id)).get_or_raise()

        assert validation.valid
        assert validation.project_name == "Alpha"
        assert validation.max_uses == 5
        assert not validation.is_already_member
        assert validation.error_message is None

    @pytest.mark.asyncio
    async def test_unknown_code_reports_invalid(
        self, service: InviteService, uow: FakeUnitOfWork
    ) -> None:
        uow.invites.get_by_code.return_value = None

        validation = (await service.validate_invite_code("nope")).get_or_raise()

        assert not validation.valid
        assert validation.error_message == INVITE_NOT_FOUND_MESSAGE

    @pytest.mark.asyncio
    async def test_deleted_project_reports_invalid(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        invite: Invite,
        project: Project,
    ) -> None:
        project.status = ProjectStatus.DELETED
        uow.invites.get_by_code.return_value = invite
        uow.projects.get_by_id.return_value = project

        validation = (await service.validate_invite_code(invite.code)).get_or_raise()

        assert not validation.valid
        assert validation.error_message == PROJECT_GONE_MESSAGE

    @pytest.mark.asyncio
    async def test_revoked_invite_reports_reason(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        invite: Invite,
        project: Project,
    ) -> None:
        invite.revoke()
        uow.invites.get_by_code.return_value = invite
        uow.projects.get_by_id.return_value = project

        validation = (await service.validate_invite_code(invite.code)).get_or_raise()

        assert not validation.valid
        assert validation.error_message == REVOKED_MESSAGE

    @pytest.mark.asyncio
    async def test_flags_existing_member(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        invite: Invite,
        project: Project,
        user_id: str,
    ) -> None:
        uow.invites.get_by_code.return_value = invite
        uow.projects.get_by_id.return_value = project
        uow.members.get.return_value = Member(project_id=project.id, user_id=user_id)

        validation = (await service.validate_invite_code(invite.code, user_id)).get_or_raise()

        assert validation.is_already_member
        assert not uow.committed


# --- join_project_with_invite ---


class TestJoinProjectWithInvite:
    @pytest.fixture(autouse=True)
    def _joinable(
        self, uow: FakeUnitOfWork, invite: Invite, project: Project, user_id: str
    ) -> None:
        uow.invites.get_by_code.return_value = invite
        uow.invites.consume_use.return_value = True
        uow.users.get_by_id.return_value = make_user(user_id)
        uow.projects.get_by_id.return_value = project
        uow.projects.adjust_member_count.return_value = 2
        uow.members.get.return_value = None
        uow.members.create.side_effect = _echo
        uow.project_wrappers.get.return_value = None

    @pytest.mark.asyncio
    async def test_joins_and_creates_wrapper(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        invite: Invite,
        project: Project,
        user_id: str,
    ) -> None:
        result = await service.join_project_with_invite(invite.code, user_id)

        joined = result.get_or_raise()
        assert joined.success
        assert joined.project_id == project.id
        assert joined.project_name == "Alpha"
        member = uow.members.create.await_args.args[0]
        assert member.role_ids == ["member"]
        assert joined.membership_id == member.id
        wrapper = uow.project_wrappers.save.await_args.args[0]
        assert wrapper.user_id == user_id
        assert wrapper.project_image_url == "alpha.png"
        uow.invites.consume_use.assert_awaited_once_with(invite.code)
        uow.projects.adjust_member_count.assert_awaited_once_with(project.id, 1)

    @pytest.mark.asyncio
    async def test_reactivates_left_wrapper(
        self, service: InviteService, uow: FakeUnitOfWork, invite: Invite, user_id: str
    ) -> None:
        stale = ProjectWrapper(
            id=invite.project_id,
            user_id=user_id,
            project_name="Old name",
            status=ProjectWrapperStatus.LEFT,
        )
        uow.project_wrappers.get.return_value = stale

        result = await service.join_project_with_invite(invite.code, user_id)

        assert result.success
        assert stale.is_active
        assert stale.project_name == "Alpha"

    @pytest.mark.asyncio
    async def test_existing_member_conflicts(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        invite: Invite,
        project: Project,
        user_id: str,
    ) -> None:
        uow.members.get.return_value = Member(project_id=project.id, user_id=user_id)

        result = await service.join_project_with_invite(invite.code, user_id)

        assert isinstance(result.error, ConflictError)
        uow.invites.consume_use.assert_not_called()

    @pytest.mark.asyncio
    async def test_blocked_member_is_refused(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        invite: Invite,
        project: Project,
        user_id: str,
    ) -> None:
        uow.members.get.return_value = Member(
            project_id=project.id, user_id=user_id, status=MemberStatus.BLOCKED
        )

        result = await service.join_project_with_invite(invite.code, user_id)

        assert isinstance(result.error, UnauthorizedError)
        assert result.error.message == "You have been blocked from this project"

    @pytest.mark.asyncio
    async def test_expired_invite_is_refused(
        self, service: InviteService, invite: Invite, user_id: str
    ) -> None:
        invite.expires_at = datetime.utcnow() - timedelta(minutes=1)

        result = await service.join_project_with_invite(invite.code, user_id)

        assert isinstance(result.error, UnauthorizedError)
        assert result.error.message == "This invite has expired"

    @pytest.mark.asyncio
    async def test_lost_race_for_last_use(
        self, service: InviteService, uow: FakeUnitOfWork, invite: Invite, user_id: str
    ) -> None:
        uow.invites.consume_use.return_value = False

        result = await service.join_project_with_invite(invite.code, user_id)

        assert isinstance(result.error, UnauthorizedError)
        assert result.error.message == MAX_USES_MESSAGE
        uow.members.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_join_surfaces_as_conflict(
        self, service: InviteService, uow: FakeUnitOfWork, invite: Invite, user_id: str
    ) -> None:
        uow.members.create.side_effect = IntegrityError(
            "INSERT INTO members",
            {},
            Exception("UNIQUE constraint failed: members.project_id, members.user_id"),
        )

        result = await service.join_project_with_invite(invite.code, user_id)

        assert isinstance(result.error, ConflictError)
        assert uow.rolled_back
        uow.projects.adjust_member_count.assert_not_called()

    @pytest.mark.asyncio
    async def test_member_count_failure_does_not_fail_join(
        self, service: InviteService, uow: FakeUnitOfWork, invite: Invite, user_id: str
    ) -> None:
        uow.projects.adjust_member_count.side_effect = RuntimeError("lock timeout")

        result = await service.join_project_with_invite(invite.code, user_id)

        assert result.success

    @pytest.mark.asyncio
    async def test_unknown_invite_is_not_found(
        self, service: InviteService, uow: FakeUnitOfWork, user_id: str
    ) -> None:
        uow.invites.get_by_code.return_value = None

        result = await service.join_project_with_invite("missing", user_id)

        assert isinstance(result.error, NotFoundError)


# --- revoke_invite ---


class TestRevokeInvite:
    @pytest.mark.asyncio
    async def test_owner_revokes(
        self, service: InviteService, uow: FakeUnitOfWork, invite: Invite, project: Project
    ) -> None:
        invite.created_by = "someone-else"
        uow.invites.get_by_code.return_value = invite
        uow.projects.get_by_id.return_value = project

        revoked = (await service.revoke_invite(invite.code, project.owner_id)).get_or_raise()

        assert revoked.status == InviteStatus.REVOKED
        uow.invites.update.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stranger_cannot_revoke(
        self, service: InviteService, uow: FakeUnitOfWork, invite: Invite, project: Project
    ) -> None:
        uow.invites.get_by_code.return_value = invite
        uow.projects.get_by_id.return_value = project

        result = await service.revoke_invite(invite.code, "user-stranger")

        assert isinstance(result.error, UnauthorizedError)

    @pytest.mark.asyncio
    async def test_revoking_twice_writes_once(
        self, service: InviteService, uow: FakeUnitOfWork, invite: Invite, project: Project
    ) -> None:
        uow.invites.get_by_code.return_value = invite
        uow.projects.get_by_id.return_value = project

        await service.revoke_invite(invite.code, invite.created_by)
        result = await service.revoke_invite(invite.code, invite.created_by)

        assert result.success
        assert uow.invites.update.await_count == 1
