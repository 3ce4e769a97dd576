"""SQLAlchemy implementation of Project repository."""

from datetime import datetime

from sqlalchemy import case, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.project import Project, ProjectStatus
from infrastructure.database.models import ProjectModel


class SQLAlchemyProjectRepository:
    """SQLAlchemy implementation of IProjectRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, project: Project) -> Project:
        model = self._to_model(project)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get_by_id(self, id: str) -> Project | None:
        model = await self._session.get(ProjectModel, id)
        return self._to_entity(model) if model else None

    async def update(self, project: Project) -> Project:
        model = await self._session.get(ProjectModel, project.id)
        if not model:
            raise ValueError(f"Project {project.id} not found")

        model.name = project.name
        model.description = project.description
        model.image_url = project.image_url
        model.status = project.status.value
        model.member_count = project.member_count
        model.updated_at = project.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def adjust_member_count(self, id: str, delta: int) -> int | None:
        new_count = ProjectModel.member_count + delta
        stmt = (
            update(ProjectModel)
            .where(ProjectModel.id == id)
            .values(
                member_count=case((new_count < 0, 0), else_=new_count),
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None

        model = await self._session.get(ProjectModel, id, populate_existing=True)
        return model.member_count if model else None

    def _to_entity(self, model: ProjectModel) -> Project:
        return Project(
            id=model.id,
            name=model.name,
            owner_id=model.owner_id,
            description=model.description,
            image_url=model.image_url,
            status=ProjectStatus(model.status),
            member_count=model.member_count,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Project) -> ProjectModel:
        return ProjectModel(
            id=entity.id,
            name=entity.name,
            owner_id=entity.owner_id,
            description=entity.description,
            image_url=entity.image_url,
            status=entity.status.value,
            member_count=entity.member_count,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
