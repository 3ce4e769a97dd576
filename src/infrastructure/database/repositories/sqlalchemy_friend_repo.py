"""SQLAlchemy implementation of Friend repository."""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.friend import Friend, FriendStatus
from infrastructure.database.models import FriendModel


class SQLAlchemyFriendRepository:
    """SQLAlchemy implementation of IFriendRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, owner_id: str, friend_id: str) -> Friend | None:
        model = await self._session.get(FriendModel, (owner_id, friend_id))
        return self._to_entity(model) if model else None

    async def save(self, owner_id: str, friend: Friend) -> Friend:
        model = await self._session.merge(self._to_model(owner_id, friend))
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, owner_id: str, friend_id: str) -> bool:
        model = await self._session.get(FriendModel, (owner_id, friend_id))
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def list_by_status(
        self, owner_id: str, statuses: Sequence[FriendStatus]
    ) -> list[Friend]:
        stmt = (
            select(FriendModel)
            .where(
                FriendModel.owner_id == owner_id,
                FriendModel.status.in_([s.value for s in statuses]),
            )
            .order_by(FriendModel.requested_at.desc(), FriendModel.friend_id)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count_by_status(self, owner_id: str, status: FriendStatus) -> int:
        stmt = (
            select(func.count())
            .select_from(FriendModel)
            .where(FriendModel.owner_id == owner_id, FriendModel.status == status.value)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def are_users_friends(self, user_id: str, other_user_id: str) -> bool:
        row = await self.get(user_id, other_user_id)
        return row is not None and row.is_accepted

    def _to_entity(self, model: FriendModel) -> Friend:
        return Friend(
            id=model.friend_id,
            name=model.name,
            profile_image_url=model.profile_image_url,
            status=FriendStatus(model.status),
            request_id=model.request_id,
            requested_at=model.requested_at,
            accepted_at=model.accepted_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, owner_id: str, entity: Friend) -> FriendModel:
        return FriendModel(
            owner_id=owner_id,
            friend_id=entity.id,
            name=entity.name,
            profile_image_url=entity.profile_image_url,
            status=entity.status.value,
            request_id=entity.request_id,
            requested_at=entity.requested_at,
            accepted_at=entity.accepted_at,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
