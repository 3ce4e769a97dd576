"""SQLAlchemy implementation of ProjectWrapper repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.project_wrapper import ProjectWrapper, ProjectWrapperStatus
from infrastructure.database.models import ProjectWrapperModel


class SQLAlchemyProjectWrapperRepository:
    """SQLAlchemy implementation of IProjectWrapperRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str, project_id: str) -> ProjectWrapper | None:
        model = await self._session.get(ProjectWrapperModel, (user_id, project_id))
        return self._to_entity(model) if model else None

    async def save(self, wrapper: ProjectWrapper) -> ProjectWrapper:
        model = await self._session.merge(self._to_model(wrapper))
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, user_id: str, project_id: str) -> bool:
        model = await self._session.get(ProjectWrapperModel, (user_id, project_id))
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def list_for_user(
        self, user_id: str, status: ProjectWrapperStatus | None = None
    ) -> list[ProjectWrapper]:
        stmt = select(ProjectWrapperModel).where(ProjectWrapperModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(ProjectWrapperModel.status == status.value)
        stmt = stmt.order_by(ProjectWrapperModel.joined_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_for_project(self, project_id: str) -> list[ProjectWrapper]:
        stmt = select(ProjectWrapperModel).where(ProjectWrapperModel.project_id == project_id)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: ProjectWrapperModel) -> ProjectWrapper:
        return ProjectWrapper(
            id=model.project_id,
            user_id=model.user_id,
            project_name=model.project_name,
            project_image_url=model.project_image_url,
            status=ProjectWrapperStatus(model.status),
            joined_at=model.joined_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: ProjectWrapper) -> ProjectWrapperModel:
        return ProjectWrapperModel(
            user_id=entity.user_id,
            project_id=entity.id,
            project_name=entity.project_name,
            project_image_url=entity.project_image_url,
            status=entity.status.value,
            joined_at=entity.joined_at,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
