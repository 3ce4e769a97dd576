"""SQLAlchemy implementation of User repository."""

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.user import AccountStatus, User, UserStatus
from infrastructure.database.models import UserModel


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of IUserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user: User) -> User:
        model = self._to_model(user)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get_by_id(self, id: str) -> User | None:
        model = await self._session.get(UserModel, id)
        return self._to_entity(model) if model else None

    async def get_many(self, ids: Iterable[str]) -> dict[str, User]:
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return {}
        stmt = select(UserModel).where(UserModel.id.in_(wanted))
        result = await self._session.execute(stmt)
        return {model.id: self._to_entity(model) for model in result.scalars()}

    async def update(self, user: User) -> User:
        model = await self._session.get(UserModel, user.id)
        if not model:
            raise ValueError(f"User {user.id} not found")

        model.name = user.name
        model.profile_image_url = user.profile_image_url
        model.status = user.status.value
        model.account_status = user.account_status.value
        model.accepts_friend_requests = user.accepts_friend_requests
        model.friend_count = user.friend_count
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def set_friend_count(self, id: str, count: int) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == id)
            .values(friend_count=max(count, 0), updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    def _to_entity(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            name=model.name,
            profile_image_url=model.profile_image_url,
            status=UserStatus(model.status),
            account_status=AccountStatus(model.account_status),
            accepts_friend_requests=model.accepts_friend_requests,
            friend_count=model.friend_count,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: User) -> UserModel:
        return UserModel(
            id=entity.id,
            email=entity.email,
            name=entity.name,
            profile_image_url=entity.profile_image_url,
            status=entity.status.value,
            account_status=entity.account_status.value,
            accepts_friend_requests=entity.accepts_friend_requests,
            friend_count=entity.friend_count,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
