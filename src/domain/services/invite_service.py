"""Invite service layer: invite links, validation and joining by code."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog
from sqlalchemy.exc import IntegrityError

from core.background import best_effort
from core.config import settings
from core.exceptions import (
    ConflictError,
    InviteCodeGenerationError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from core.result import returns_result
from domain.entities.invite import MAX_USES_MESSAGE, Invite, InviteStatus
from domain.entities.member import Member
from domain.entities.project_wrapper import ProjectWrapper
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.validation import require_ids

logger = structlog.get_logger()

INVITE_NOT_FOUND_MESSAGE = "Invite not found"
PROJECT_GONE_MESSAGE = "The project for this invite no longer exists"


@dataclass(frozen=True)
class InviteLink:
    invite_code: str
    invite_link: str
    expires_at: datetime
    max_uses: int | None
    status: InviteStatus


@dataclass(frozen=True)
class InviteValidation:
    valid: bool
    project_id: str | None = None
    project_name: str | None = None
    project_image_url: str | None = None
    expires_at: datetime | None = None
    max_uses: int | None = None
    current_uses: int | None = None
    is_already_member: bool = False
    error_message: str | None = None


@dataclass(frozen=True)
class ProjectJoined:
    project_id: str
    project_name: str
    membership_id: str
    success: bool
    message: str


@dataclass(frozen=True)
class InviteRevoked:
    invite_code: str
    status: InviteStatus


class InviteService:
    """Service layer for project invites."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        base_url: str | None = None,
        code_length: int | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._base_url = (base_url or settings.invite_base_url).rstrip("/")
        self._code_length = code_length or settings.invite_code_length
        self._max_attempts = max_attempts or settings.invite_code_max_attempts

    def build_link(self, code: str) -> str:
        return f"{self._base_url}/invite/{code}"

    @returns_result
    async def generate_invite_link(
        self,
        project_id: str,
        inviter_id: str,
        expires_in_hours: int | None = None,
        max_uses: int | None = None,
    ) -> InviteLink:
        """Create an invite for a project and return its shareable link.

        Args:
            project_id: The project to invite into.
            inviter_id: The user creating the invite (must be an active member).
            expires_in_hours: Lifetime of the invite; defaults to 24 hours.
            max_uses: Optional cap on the number of joins.

        Raises:
            ValidationError: If an argument is missing or out of range.
            NotFoundError: If the project does not exist or was deleted.
            UnauthorizedError: If the inviter is not an active member.
            InviteCodeGenerationError: If every candidate code collided.
        """
        require_ids(project_id=project_id, inviter_id=inviter_id)
        hours = expires_in_hours
        if hours is None:
            hours = settings.invite_default_expiry_hours
        if hours <= 0 or hours > settings.invite_max_expiry_hours:
            raise ValidationError(
                "expires_in_hours",
                f"expires_in_hours must be between 1 and {settings.invite_max_expiry_hours}",
            )
        if max_uses is not None and max_uses < 1:
            raise ValidationError("max_uses", "max_uses must be at least 1")

        async with self._uow_factory() as uow:
            project = await uow.projects.get_by_id(project_id)
            if project is None or project.is_deleted:
                raise NotFoundError("project", project_id)

            inviter = await uow.members.get(project_id, inviter_id)
            if inviter is None or not inviter.is_active:
                raise UnauthorizedError("Only active project members can create invites")

            expires_at = datetime.utcnow() + timedelta(hours=hours)
            invite = await self._create_with_unique_code(
                uow, project_id, inviter_id, expires_at, max_uses
            )
            await uow.commit()

        logger.info(
            "invite_created",
            project_id=project_id,
            inviter_id=inviter_id,
            expires_at=expires_at.isoformat(),
            max_uses=max_uses,
        )
        return InviteLink(
            invite_code=invite.code,
            invite_link=self.build_link(invite.code),
            expires_at=invite.expires_at,
            max_uses=invite.max_uses,
            status=invite.status,
        )

    async def _create_with_unique_code(
        self,
        uow: IUnitOfWork,
        project_id: str,
        inviter_id: str,
        expires_at: datetime,
        max_uses: int | None,
    ) -> Invite:
        for attempt in range(1, self._max_attempts + 1):
            code = Invite.generate_code(self._code_length)
            if await uow.invites.exists_by_code(code):
                logger.debug("invite_code_collision", attempt=attempt, stage="lookup")
                continue
            invite = Invite(
                id=code,
                project_id=project_id,
                created_by=inviter_id,
                expires_at=expires_at,
                max_uses=max_uses,
            )
            if await uow.invites.create_if_absent(invite):
                return invite
            logger.debug("invite_code_collision", attempt=attempt, stage="insert")

        logger.error("invite_code_exhausted", project_id=project_id, attempts=self._max_attempts)
        raise InviteCodeGenerationError(self._max_attempts)

    @returns_result
    async def validate_invite_code(
        self, invite_code: str, user_id: str | None = None
    ) -> InviteValidation:
        """Check whether an invite can be used, without side effects.

        A missing or unusable invite is reported through ``valid=False``
        and ``error_message`` rather than as a failure.
        """
        require_ids(invite_code=invite_code)

        async with self._uow_factory() as uow:
            invite = await uow.invites.get_by_code(invite_code)
            if invite is None:
                return InviteValidation(valid=False, error_message=INVITE_NOT_FOUND_MESSAGE)

            project = await uow.projects.get_by_id(invite.project_id)
            if project is None or project.is_deleted:
                return InviteValidation(
                    valid=False,
                    project_id=invite.project_id,
                    error_message=PROJECT_GONE_MESSAGE,
                )

            is_member = False
            if user_id:
                member = await uow.members.get(project.id, user_id)
                is_member = member is not None and member.is_active

        reason = invite.unusable_reason()
        return InviteValidation(
            valid=reason is None,
            project_id=project.id,
            project_name=project.name,
            project_image_url=project.image_url,
            expires_at=invite.expires_at,
            max_uses=invite.max_uses,
            current_uses=invite.current_uses,
            is_already_member=is_member,
            error_message=reason,
        )

    @returns_result
    async def join_project_with_invite(self, invite_code: str, user_id: str) -> ProjectJoined:
        """Join a project using an invite code.

        Consuming the invite use, creating the member and activating the
        user's wrapper happen in one transaction. The project's member
        counter is bumped afterwards and may lag on failure.

        Raises:
            ValidationError: If an argument is missing.
            NotFoundError: If the invite, user or project does not exist.
            UnauthorizedError: If the invite is unusable or the user is blocked.
            ConflictError: If the user already belongs to the project.
        """
        require_ids(invite_code=invite_code, user_id=user_id)

        async with self._uow_factory() as uow:
            invite = await uow.invites.get_by_code(invite_code)
            if invite is None:
                raise NotFoundError("invite", invite_code)
            if not invite.can_be_used():
                raise UnauthorizedError(invite.unusable_reason() or "This invite cannot be used")

            user = await uow.users.get_by_id(user_id)
            if user is None:
                raise NotFoundError("user", user_id)
            project = await uow.projects.get_by_id(invite.project_id)
            if project is None or project.is_deleted:
                raise NotFoundError("project", invite.project_id)

            existing = await uow.members.get(project.id, user_id)
            if existing is not None:
                if existing.is_blocked:
                    raise UnauthorizedError("You have been blocked from this project")
                raise ConflictError(
                    "member",
                    "user_id",
                    user_id,
                    message="User is already a member of this project",
                )

            wrapper = await uow.project_wrappers.get(user_id, project.id)
            if wrapper is not None and wrapper.is_active:
                raise ConflictError(
                    "project_wrapper",
                    "project_id",
                    project.id,
                    message="Project is already in the user's project list",
                )

            if not await uow.invites.consume_use(invite.code):
                raise UnauthorizedError(MAX_USES_MESSAGE)

            try:
                member = await uow.members.create(
                    Member(
                        project_id=project.id,
                        user_id=user_id,
                        role_ids=[settings.default_member_role],
                    )
                )
                if wrapper is None:
                    wrapper = ProjectWrapper(
                        id=project.id,
                        user_id=user_id,
                        project_name=project.name,
                        project_image_url=project.image_url,
                    )
                else:
                    wrapper.update_project_info(project.name, project.image_url)
                    wrapper.activate()
                await uow.project_wrappers.save(wrapper)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                # Unique (project_id, user_id): a concurrent join won the race.
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" in orig or "duplicate" in orig:
                    raise ConflictError(
                        "member",
                        "user_id",
                        user_id,
                        message="User is already a member of this project",
                    ) from exc
                raise

        await best_effort(
            "increment_member_count",
            self._adjust_member_count(project.id, 1),
            project_id=project.id,
        )

        logger.info(
            "project_joined", project_id=project.id, user_id=user_id, invite_code=invite.code
        )
        return ProjectJoined(
            project_id=project.id,
            project_name=project.name,
            membership_id=member.id,
            success=True,
            message=f"Joined {project.name}",
        )

    @returns_result
    async def revoke_invite(self, invite_code: str, revoked_by: str) -> InviteRevoked:
        """Revoke an invite. Only the project owner or the invite creator may do so."""
        require_ids(invite_code=invite_code, revoked_by=revoked_by)

        async with self._uow_factory() as uow:
            invite = await uow.invites.get_by_code(invite_code)
            if invite is None:
                raise NotFoundError("invite", invite_code)

            project = await uow.projects.get_by_id(invite.project_id)
            is_owner = project is not None and project.is_owned_by(revoked_by)
            if not is_owner and invite.created_by != revoked_by:
                raise UnauthorizedError(
                    "Only the project owner or the invite creator can revoke this invite"
                )

            if not invite.is_revoked:
                invite.revoke()
                await uow.invites.update(invite)
                await uow.commit()
                logger.info("invite_revoked", invite_code=invite_code, revoked_by=revoked_by)

        return InviteRevoked(invite_code=invite.code, status=invite.status)

    async def _adjust_member_count(self, project_id: str, delta: int) -> int | None:
        async with self._uow_factory() as uow:
            count = await uow.projects.adjust_member_count(project_id, delta)
            await uow.commit()
            return count
