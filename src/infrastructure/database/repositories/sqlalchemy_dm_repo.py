"""SQLAlchemy implementations of the DM channel and DM wrapper repositories."""

from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.dm import DMChannel, DMChannelStatus, DMWrapper
from infrastructure.database.models import DMChannelModel, DMWrapperModel


class SQLAlchemyDMChannelRepository:
    """SQLAlchemy implementation of IDMChannelRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, id: str) -> DMChannel | None:
        model = await self._session.get(DMChannelModel, id)
        if not model:
            return None
        return DMChannel(
            id=model.id,
            participants=list(model.participants or []),
            blocked_by=list(model.blocked_by or []),
            status=DMChannelStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def save(self, channel: DMChannel) -> DMChannel:
        await self._session.merge(
            DMChannelModel(
                id=channel.id,
                participants=list(channel.participants),
                blocked_by=list(channel.blocked_by),
                status=channel.status.value,
                created_at=channel.created_at,
                updated_at=channel.updated_at,
            )
        )
        await self._session.flush()
        return channel


class SQLAlchemyDMWrapperRepository:
    """SQLAlchemy implementation of IDMWrapperRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str, other_user_id: str) -> DMWrapper | None:
        model = await self._session.get(DMWrapperModel, (user_id, other_user_id))
        if not model:
            return None
        return DMWrapper(
            user_id=model.user_id,
            other_user_id=model.other_user_id,
            channel_id=model.channel_id,
            other_user_name=model.other_user_name,
            other_user_image_url=model.other_user_image_url,
            last_message_preview=model.last_message_preview,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def save(self, wrapper: DMWrapper) -> DMWrapper:
        await self._session.merge(
            DMWrapperModel(
                user_id=wrapper.user_id,
                other_user_id=wrapper.other_user_id,
                channel_id=wrapper.channel_id,
                other_user_name=wrapper.other_user_name,
                other_user_image_url=wrapper.other_user_image_url,
                last_message_preview=wrapper.last_message_preview,
                created_at=wrapper.created_at,
                updated_at=wrapper.updated_at,
            )
        )
        await self._session.flush()
        return wrapper

    async def delete(self, user_id: str, other_user_id: str) -> bool:
        model = await self._session.get(DMWrapperModel, (user_id, other_user_id))
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True
