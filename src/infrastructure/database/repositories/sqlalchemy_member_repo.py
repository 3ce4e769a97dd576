"""SQLAlchemy implementation of Member repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.member import Member, MemberStatus
from infrastructure.database.models import MemberModel


class SQLAlchemyMemberRepository:
    """SQLAlchemy implementation of IMemberRepository.

    ``create`` lets the unique (project_id, user_id) constraint surface as
    an IntegrityError; the caller decides whether it is a conflict.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, member: Member) -> Member:
        model = self._to_model(member)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get(self, project_id: str, user_id: str) -> Member | None:
        model = await self._get_model(project_id, user_id)
        return self._to_entity(model) if model else None

    async def update(self, member: Member) -> Member:
        model = await self._get_model(member.project_id, member.user_id)
        if not model:
            raise ValueError(f"Member {member.user_id} not found in project {member.project_id}")

        model.role_ids = list(member.role_ids)
        model.status = member.status.value
        model.updated_at = member.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, project_id: str, user_id: str) -> bool:
        model = await self._get_model(project_id, user_id)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def list_for_project(self, project_id: str) -> list[Member]:
        stmt = (
            select(MemberModel)
            .where(MemberModel.project_id == project_id)
            .order_by(MemberModel.joined_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count_active(self, project_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(MemberModel)
            .where(
                MemberModel.project_id == project_id,
                MemberModel.status == MemberStatus.ACTIVE.value,
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _get_model(self, project_id: str, user_id: str) -> MemberModel | None:
        stmt = select(MemberModel).where(
            MemberModel.project_id == project_id,
            MemberModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: MemberModel) -> Member:
        return Member(
            id=model.id,
            project_id=model.project_id,
            user_id=model.user_id,
            role_ids=list(model.role_ids or []),
            status=MemberStatus(model.status),
            joined_at=model.joined_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Member) -> MemberModel:
        return MemberModel(
            id=entity.id,
            project_id=entity.project_id,
            user_id=entity.user_id,
            role_ids=list(entity.role_ids),
            status=entity.status.value,
            joined_at=entity.joined_at,
            updated_at=entity.updated_at,
        )
