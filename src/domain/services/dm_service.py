"""DM channel service: channel bootstrap after a friendship, blocking and unblocking."""

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from core.background import best_effort
from core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from core.result import returns_result
from domain.entities.dm import DMChannel, DMWrapper, dm_channel_id
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.validation import require_ids

logger = structlog.get_logger()

FULLY_UNBLOCKED_MESSAGE = "DM channel has been fully unblocked and is now active"
PARTIALLY_UNBLOCKED_MESSAGE = (
    "You have unblocked this DM channel, but it remains blocked by the other user"
)


@dataclass(frozen=True)
class DMChannelReady:
    channel_id: str
    created: bool
    wrappers_created: int


@dataclass(frozen=True)
class DMChannelBlocked:
    channel_id: str
    blocked_by: list[str]
    wrapper_removed: bool


@dataclass(frozen=True)
class DMChannelUnblocked:
    channel_id: str
    success: bool
    message: str
    is_fully_unblocked: bool


class DMService:
    """Service layer for DM channel bookkeeping."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    @returns_result
    async def ensure_dm_channel(self, user_a: str, user_b: str) -> DMChannelReady:
        """Create the DM channel for a pair and a wrapper on each side.

        Safe to call repeatedly: existing rows are left untouched.
        """
        require_ids(user_a=user_a, user_b=user_b)
        if user_a == user_b:
            raise ValidationError("user_b", "Cannot open a DM channel with yourself")

        channel_id = dm_channel_id(user_a, user_b)
        async with self._uow_factory() as uow:
            users = await uow.users.get_many([user_a, user_b])
            for user_id in (user_a, user_b):
                if user_id not in users:
                    raise NotFoundError("user", user_id)

            created = False
            channel = await uow.dm_channels.get_by_id(channel_id)
            if channel is None:
                channel = await uow.dm_channels.save(DMChannel.for_pair(user_a, user_b))
                created = True

            wrappers_created = 0
            for owner_id, other_id in ((user_a, user_b), (user_b, user_a)):
                if await uow.dm_wrappers.get(owner_id, other_id) is not None:
                    continue
                other = users[other_id]
                await uow.dm_wrappers.save(
                    DMWrapper(
                        user_id=owner_id,
                        other_user_id=other_id,
                        channel_id=channel.id,
                        other_user_name=other.name,
                        other_user_image_url=other.profile_image_url,
                    )
                )
                wrappers_created += 1

            await uow.commit()

        if created or wrappers_created:
            logger.info(
                "dm_channel_ensured",
                channel_id=channel_id,
                created=created,
                wrappers_created=wrappers_created,
            )
        return DMChannelReady(
            channel_id=channel_id, created=created, wrappers_created=wrappers_created
        )

    @returns_result
    async def block_dm_channel(self, current_user_id: str, channel_id: str) -> DMChannelBlocked:
        """Block a DM channel for the caller and hide it from their DM list.

        Blocking twice is a no-op. The caller's wrapper is removed
        best-effort; ``unblock_dm_channel`` recreates it.
        """
        require_ids(current_user_id=current_user_id, channel_id=channel_id)

        async with self._uow_factory() as uow:
            channel = await uow.dm_channels.get_by_id(channel_id)
            if channel is None:
                raise NotFoundError("dm_channel", channel_id)
            if not channel.is_participant(current_user_id):
                raise UnauthorizedError("You are not a participant of this DM channel")

            if not channel.is_blocked_by(current_user_id):
                channel.block(current_user_id)
                await uow.dm_channels.save(channel)
                await uow.commit()
                logger.info("dm_channel_blocked", channel_id=channel_id, user_id=current_user_id)

        wrapper_removed = False
        other_user_id = channel.other_participant(current_user_id)
        if other_user_id:
            wrapper_removed = bool(
                await best_effort(
                    "remove_dm_wrapper",
                    self._remove_wrapper(current_user_id, other_user_id),
                    user_id=current_user_id,
                    channel_id=channel_id,
                )
            )
        return DMChannelBlocked(
            channel_id=channel_id,
            blocked_by=list(channel.blocked_by),
            wrapper_removed=wrapper_removed,
        )

    @returns_result
    async def unblock_dm_channel(
        self, current_user_id: str, channel_id: str
    ) -> DMChannelUnblocked:
        """Lift the caller's block on a DM channel.

        Raises:
            ValidationError: If an identifier is missing.
            NotFoundError: If the channel does not exist.
            UnauthorizedError: If the caller is not a participant.
            ConflictError: If the caller has not blocked the channel.
        """
        require_ids(current_user_id=current_user_id, channel_id=channel_id)

        async with self._uow_factory() as uow:
            channel = await uow.dm_channels.get_by_id(channel_id)
            if channel is None:
                raise NotFoundError("dm_channel", channel_id)
            if not channel.is_participant(current_user_id):
                raise UnauthorizedError("You are not a participant of this DM channel")

            channel.unblock(current_user_id)
            await uow.dm_channels.save(channel)
            await uow.commit()

        other_user_id = channel.other_participant(current_user_id)
        if other_user_id:
            await best_effort(
                "restore_dm_wrapper",
                self._restore_wrapper(current_user_id, other_user_id, channel_id),
                user_id=current_user_id,
                channel_id=channel_id,
            )

        fully = channel.is_fully_unblocked
        return DMChannelUnblocked(
            channel_id=channel_id,
            success=True,
            message=FULLY_UNBLOCKED_MESSAGE if fully else PARTIALLY_UNBLOCKED_MESSAGE,
            is_fully_unblocked=fully,
        )

    async def _remove_wrapper(self, user_id: str, other_user_id: str) -> bool:
        async with self._uow_factory() as uow:
            removed = await uow.dm_wrappers.delete(user_id, other_user_id)
            await uow.commit()
            return removed

    async def _restore_wrapper(self, user_id: str, other_user_id: str, channel_id: str) -> None:
        async with self._uow_factory() as uow:
            other = await uow.users.get_by_id(other_user_id)
            if other is None:
                raise NotFoundError("user", other_user_id)
            await uow.dm_wrappers.save(
                DMWrapper(
                    user_id=user_id,
                    other_user_id=other_user_id,
                    channel_id=channel_id,
                    other_user_name=other.name,
                    other_user_image_url=other.profile_image_url,
                )
            )
            await uow.commit()
