"""Project service layer: lifecycle and the per-user project list."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import structlog

from core.background import best_effort
from core.config import settings
from core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from core.result import returns_result
from domain.entities.member import Member
from domain.entities.project import Project
from domain.entities.project_wrapper import ProjectWrapper, ProjectWrapperStatus
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.validation import require_ids

logger = structlog.get_logger()


@dataclass(frozen=True)
class ProjectDeleted:
    project_id: str
    deleted_at: datetime


@dataclass(frozen=True)
class WrappersSynced:
    project_id: str
    updated_member_count: int
    success: bool


@dataclass(frozen=True)
class ProjectReconciled:
    project_id: str
    archived_wrappers: int


class ProjectService:
    """Service layer for projects and their wrappers."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    @returns_result
    async def create_project(
        self,
        owner_id: str,
        name: str,
        image_url: str | None = None,
        description: str | None = None,
    ) -> Project:
        """Create a project with its owner as the first member.

        The project, the owner's member row and the owner's wrapper are
        written in one transaction.
        """
        require_ids(owner_id=owner_id, name=name)

        async with self._uow_factory() as uow:
            if await uow.users.get_by_id(owner_id) is None:
                raise NotFoundError("user", owner_id)

            project = await uow.projects.create(
                Project(
                    name=name.strip(),
                    owner_id=owner_id,
                    image_url=image_url,
                    description=description,
                )
            )
            await uow.members.create(
                Member(
                    project_id=project.id,
                    user_id=owner_id,
                    role_ids=[settings.owner_role],
                )
            )
            await uow.project_wrappers.save(
                ProjectWrapper(
                    id=project.id,
                    user_id=owner_id,
                    project_name=project.name,
                    project_image_url=project.image_url,
                )
            )
            await uow.commit()

        logger.info("project_created", project_id=project.id, owner_id=owner_id)
        return project

    @returns_result
    async def delete_project(self, project_id: str, deleted_by: str) -> ProjectDeleted:
        """Soft-delete a project. Only the owner may delete it.

        Member rows and wrappers are left in place; stale wrappers are
        archived lazily by ``get_user_projects`` or by
        ``reconcile_deleted_project``.
        """
        require_ids(project_id=project_id, deleted_by=deleted_by)

        async with self._uow_factory() as uow:
            project = await uow.projects.get_by_id(project_id)
            if project is None or project.is_deleted:
                raise NotFoundError("project", project_id)
            if not project.is_owned_by(deleted_by):
                raise UnauthorizedError("Only the project owner can delete this project")

            project.delete()
            await uow.projects.update(project)
            await uow.commit()

        logger.info("project_deleted", project_id=project_id, deleted_by=deleted_by)
        return ProjectDeleted(project_id=project_id, deleted_at=project.updated_at)

    @returns_result
    async def get_user_projects(self, user_id: str) -> list[ProjectWrapper]:
        """List the user's active projects.

        Wrappers whose project is gone or deleted are archived on the way
        and left out of the result.
        """
        require_ids(user_id=user_id)

        visible: list[ProjectWrapper] = []
        stale: list[ProjectWrapper] = []
        async with self._uow_factory() as uow:
            wrappers = await uow.project_wrappers.list_for_user(
                user_id, ProjectWrapperStatus.ACTIVE
            )
            for wrapper in wrappers:
                project = await uow.projects.get_by_id(wrapper.project_id)
                if project is None or project.is_deleted:
                    stale.append(wrapper)
                else:
                    visible.append(wrapper)

        for wrapper in stale:
            await best_effort(
                "archive_stale_wrapper",
                self._archive_wrappers([wrapper]),
                user_id=user_id,
                project_id=wrapper.project_id,
            )
        return visible

    @returns_result
    async def sync_project_wrappers(
        self,
        project_id: str,
        name: str | None = None,
        image_url: str | None = None,
        updated_by: str | None = None,
    ) -> WrappersSynced:
        """Apply a project name/image change and copy it to every wrapper.

        When ``updated_by`` is given it must be the project owner.
        """
        require_ids(project_id=project_id)
        if name is None and image_url is None:
            raise ValidationError(
                "updates", "At least one update field (name or image_url) is required"
            )
        if name is not None and not name.strip():
            raise ValidationError("name", "Project name cannot be empty")

        async with self._uow_factory() as uow:
            project = await uow.projects.get_by_id(project_id)
            if project is None or project.is_deleted:
                raise NotFoundError("project", project_id)
            if updated_by is not None and not project.is_owned_by(updated_by):
                raise UnauthorizedError("Only the project owner can update this project")

            project.update_info(name=name, image_url=image_url)
            await uow.projects.update(project)

            updated = 0
            for wrapper in await uow.project_wrappers.list_for_project(project_id):
                if wrapper.update_project_info(project.name, project.image_url):
                    await uow.project_wrappers.save(wrapper)
                    updated += 1
            await uow.commit()

        logger.info("project_wrappers_synced", project_id=project_id, updated=updated)
        return WrappersSynced(project_id=project_id, updated_member_count=updated, success=True)

    @returns_result
    async def reconcile_deleted_project(self, project_id: str) -> ProjectReconciled:
        """Archive every active wrapper of a deleted project.

        Intended for a background job; ``delete_project`` does not call it.
        """
        require_ids(project_id=project_id)

        async with self._uow_factory() as uow:
            project = await uow.projects.get_by_id(project_id)
            if project is not None and not project.is_deleted:
                raise ValidationError("project_id", "Project is not deleted")
            wrappers = [
                w for w in await uow.project_wrappers.list_for_project(project_id) if w.is_active
            ]

        archived = await self._archive_wrappers(wrappers)
        logger.info("deleted_project_reconciled", project_id=project_id, archived=archived)
        return ProjectReconciled(project_id=project_id, archived_wrappers=archived)

    async def _archive_wrappers(self, wrappers: list[ProjectWrapper]) -> int:
        async with self._uow_factory() as uow:
            for wrapper in wrappers:
                wrapper.archive()
                await uow.project_wrappers.save(wrapper)
            await uow.commit()
        return len(wrappers)
