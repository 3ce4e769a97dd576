"""Friend workflow service layer.

A friendship is stored as two rows, one per user. The row owned by the user
acting on a request is authoritative and is committed first; the reciprocal
row is brought in line in a separate, best-effort transaction, and the
``repair_friendship`` job restores symmetry when that write is lost.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

import structlog

from core.background import best_effort, spawn
from core.exceptions import (
    ConflictError,
    InternalError,
    InvalidStateTransitionError,
    NotFoundError,
    ValidationError,
)
from core.result import returns_result
from domain.entities.friend import Friend, FriendStatus, make_friend_request_id
from domain.entities.user import User, UserStatus
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.dm_service import DMService
from domain.services.validation import require_ids, require_pagination

logger = structlog.get_logger()

RequestDirection = Literal["received", "sent"]


@dataclass(frozen=True)
class FriendRequestSent:
    friend_request_id: str
    status: FriendStatus
    requested_at: datetime


@dataclass(frozen=True)
class FriendRequestAnswered:
    friend_id: str
    status: FriendStatus
    answered_at: datetime | None


@dataclass(frozen=True)
class FriendRemoved:
    success: bool
    removed_at: datetime
    sides_updated: int


@dataclass(frozen=True)
class FriendView:
    """A friend row hydrated with the peer's current public profile."""

    user_id: str
    name: str
    profile_image_url: str | None
    presence: UserStatus | None
    status: FriendStatus
    requested_at: datetime
    accepted_at: datetime | None


@dataclass(frozen=True)
class FriendRequestView:
    request_id: str | None
    requester_user_id: str
    receiver_user_id: str
    name: str
    profile_image_url: str | None
    presence: UserStatus | None
    requested_at: datetime


@dataclass(frozen=True)
class Page:
    items: list
    total: int
    has_more: bool


@dataclass(frozen=True)
class FriendshipRepair:
    repaired: bool
    status: FriendStatus


class FriendService:
    """Service layer for friend requests and friendships."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        dm_service: Optional["DMService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._dm = dm_service

    @returns_result
    async def send_friend_request(
        self, requester_id: str, receiver_user_id: str
    ) -> FriendRequestSent:
        """Send a friend request from ``requester_id`` to ``receiver_user_id``.

        Both rows (REQUESTED on the requester's side, PENDING on the
        receiver's) are written in one transaction.

        Raises:
            ValidationError: If an ID is missing or both IDs are the same.
            NotFoundError: If either user does not exist.
            ConflictError: If the receiver does not accept requests, the users
                are already friends, or a request is already open.
        """
        require_ids(requester_id=requester_id, receiver_user_id=receiver_user_id)
        if requester_id == receiver_user_id:
            raise ValidationError("receiver_user_id", "Cannot send a friend request to yourself")

        async with self._uow_factory() as uow:
            requester, receiver = await self._load_pair(uow, requester_id, receiver_user_id)

            if not receiver.can_receive_friend_requests:
                raise ConflictError(
                    "friend_request",
                    "receiver_user_id",
                    receiver_user_id,
                    message="This user is not accepting friend requests",
                )
            if await uow.friends.are_users_friends(requester_id, receiver_user_id):
                raise ConflictError(
                    "friend",
                    "receiver_user_id",
                    receiver_user_id,
                    message="Users are already friends",
                )

            outgoing = await uow.friends.get(requester_id, receiver_user_id)
            incoming = await uow.friends.get(receiver_user_id, requester_id)
            if any(row is not None and row.is_pending for row in (outgoing, incoming)):
                raise ConflictError(
                    "friend_request",
                    "receiver_user_id",
                    receiver_user_id,
                    message="A friend request between these users already exists",
                )

            now = datetime.utcnow()
            request_id = make_friend_request_id(requester_id, receiver_user_id, now)
            await uow.friends.save(
                requester_id,
                Friend.new_request(
                    receiver.id, receiver.name, receiver.profile_image_url, request_id, now
                ),
            )
            await uow.friends.save(
                receiver_user_id,
                Friend.received_request(
                    requester.id, requester.name, requester.profile_image_url, request_id, now
                ),
            )
            await uow.commit()

        logger.info(
            "friend_request_sent",
            requester_id=requester_id,
            receiver_id=receiver_user_id,
            request_id=request_id,
        )
        return FriendRequestSent(
            friend_request_id=request_id,
            status=FriendStatus.REQUESTED,
            requested_at=now,
        )

    @returns_result
    async def accept_friend_request(
        self, requester_id: str, receiver_id: str
    ) -> FriendRequestAnswered:
        """Accept the request ``requester_id`` sent to ``receiver_id``.

        The receiver's row is authoritative. The requester's row is updated
        (or rebuilt) afterwards without affecting the result, and friend
        counts and the DM channel are refreshed in the background.
        """
        require_ids(requester_id=requester_id, receiver_id=receiver_id)
        if requester_id == receiver_id:
            raise ValidationError("requester_id", "Cannot accept a friend request from yourself")

        async with self._uow_factory() as uow:
            row = await self._require_incoming_request(uow, receiver_id, requester_id, "accept")
            row.accept()
            await uow.friends.save(receiver_id, row)
            await uow.commit()

        await best_effort(
            "mirror_accepted_friend",
            self._sync_reciprocal(requester_id, receiver_id, row, rebuild_missing=True),
            requester_id=requester_id,
            receiver_id=receiver_id,
        )
        spawn(
            self._refresh_friend_counts(requester_id, receiver_id),
            name=f"friend-counts:{requester_id}:{receiver_id}",
        )
        if self._dm is not None:
            spawn(
                self._dm.ensure_dm_channel(requester_id, receiver_id),
                name=f"dm-bootstrap:{requester_id}:{receiver_id}",
            )

        logger.info("friend_request_accepted", requester_id=requester_id, receiver_id=receiver_id)
        return FriendRequestAnswered(
            friend_id=requester_id, status=row.status, answered_at=row.accepted_at
        )

    @returns_result
    async def reject_friend_request(
        self, requester_id: str, receiver_id: str
    ) -> FriendRequestAnswered:
        """Reject the request ``requester_id`` sent to ``receiver_id``."""
        require_ids(requester_id=requester_id, receiver_id=receiver_id)
        if requester_id == receiver_id:
            raise ValidationError("requester_id", "Cannot reject a friend request from yourself")

        async with self._uow_factory() as uow:
            row = await self._require_incoming_request(uow, receiver_id, requester_id, "reject")
            row.reject()
            await uow.friends.save(receiver_id, row)
            await uow.commit()

        await best_effort(
            "mirror_rejected_friend",
            self._sync_reciprocal(requester_id, receiver_id, row, rebuild_missing=False),
            requester_id=requester_id,
            receiver_id=receiver_id,
        )

        logger.info("friend_request_rejected", requester_id=requester_id, receiver_id=receiver_id)
        return FriendRequestAnswered(
            friend_id=requester_id, status=row.status, answered_at=row.updated_at
        )

    @returns_result
    async def remove_friend(
        self, user_id: str, friend_user_id: str, hard_delete: bool = False
    ) -> FriendRemoved:
        """End a friendship on both sides.

        Each side is written in its own transaction. The call succeeds when
        at least one side was updated.

        Args:
            user_id: The user removing the friend.
            friend_user_id: The friend being removed.
            hard_delete: Delete both rows instead of marking them REMOVED.
        """
        require_ids(user_id=user_id, friend_user_id=friend_user_id)
        if user_id == friend_user_id:
            raise ValidationError("friend_user_id", "Cannot remove yourself as a friend")

        async with self._uow_factory() as uow:
            await self._load_pair(uow, user_id, friend_user_id)
            friends = await uow.friends.are_users_friends(
                user_id, friend_user_id
            ) or await uow.friends.are_users_friends(friend_user_id, user_id)
            if not friends:
                raise ConflictError(
                    "friend", "friend_user_id", friend_user_id, message="Users are not friends"
                )

        removed_at = datetime.utcnow()
        sides_updated = 0
        for owner_id, other_id in ((user_id, friend_user_id), (friend_user_id, user_id)):
            updated = await best_effort(
                "remove_friend_side",
                self._remove_side(owner_id, other_id, hard_delete),
                owner_id=owner_id,
                other_id=other_id,
            )
            if updated:
                sides_updated += 1

        if sides_updated == 0:
            raise InternalError("Failed to remove friend relationship")
        if sides_updated == 1:
            logger.warning(
                "friend_removal_partial", user_id=user_id, friend_user_id=friend_user_id
            )

        spawn(
            self._refresh_friend_counts(user_id, friend_user_id),
            name=f"friend-counts:{user_id}:{friend_user_id}",
        )
        return FriendRemoved(success=True, removed_at=removed_at, sides_updated=sides_updated)

    @returns_result
    async def get_friends(
        self,
        user_id: str,
        status: FriendStatus = FriendStatus.ACCEPTED,
        offset: int = 0,
        limit: int = 50,
    ) -> Page:
        """List the user's friend rows with the given status."""
        require_ids(user_id=user_id)
        require_pagination(offset, limit)

        async with self._uow_factory() as uow:
            rows = await uow.friends.list_by_status(user_id, [status])
            page = rows[offset : offset + limit]
            profiles = await uow.users.get_many([row.id for row in page])

        items = [self._friend_view(row, profiles.get(row.id)) for row in page]
        return Page(items=items, total=len(rows), has_more=len(rows) > offset + limit)

    @returns_result
    async def get_friend_requests(
        self,
        user_id: str,
        type: RequestDirection = "received",
        offset: int = 0,
        limit: int = 50,
    ) -> Page:
        """List open requests the user received or sent."""
        require_ids(user_id=user_id)
        require_pagination(offset, limit)
        if type not in ("received", "sent"):
            raise ValidationError("type", "type must be 'received' or 'sent'")

        status = FriendStatus.PENDING if type == "received" else FriendStatus.REQUESTED
        async with self._uow_factory() as uow:
            rows = await uow.friends.list_by_status(user_id, [status])
            page = rows[offset : offset + limit]
            profiles = await uow.users.get_many([row.id for row in page])

        items = []
        for row in page:
            profile = profiles.get(row.id)
            requester, receiver = (row.id, user_id) if type == "received" else (user_id, row.id)
            items.append(
                FriendRequestView(
                    request_id=row.request_id,
                    requester_user_id=requester,
                    receiver_user_id=receiver,
                    name=profile.name if profile else row.name,
                    profile_image_url=(
                        profile.profile_image_url if profile else row.profile_image_url
                    ),
                    presence=profile.status if profile else None,
                    requested_at=row.requested_at,
                )
            )
        return Page(items=items, total=len(rows), has_more=len(rows) > offset + limit)

    @returns_result
    async def repair_friendship(self, user_id: str, other_user_id: str) -> FriendshipRepair:
        """Copy the decided side of a relationship onto a lagging reciprocal row.

        A row counts as decided once it left PENDING/REQUESTED. When both
        sides are decided but disagree, the most recently updated one wins.
        """
        require_ids(user_id=user_id, other_user_id=other_user_id)
        if user_id == other_user_id:
            raise ValidationError("other_user_id", "Cannot repair a relationship with yourself")

        async with self._uow_factory() as uow:
            rows = {
                user_id: await uow.friends.get(user_id, other_user_id),
                other_user_id: await uow.friends.get(other_user_id, user_id),
            }
            present = [(owner, row) for owner, row in rows.items() if row is not None]
            if not present:
                raise NotFoundError("friend_relationship", f"{user_id}/{other_user_id}")

            decided = [(owner, row) for owner, row in present if not row.is_pending]
            if not decided:
                return FriendshipRepair(repaired=False, status=present[0][1].status)

            source_owner, source = max(decided, key=lambda item: item[1].updated_at)
            target_owner = other_user_id if source_owner == user_id else user_id
            target = rows[target_owner]

            if target is not None and target.status == source.status:
                return FriendshipRepair(repaired=False, status=source.status)
            if target is None:
                if not source.is_accepted:
                    return FriendshipRepair(repaired=False, status=source.status)
                peer = await uow.users.get_by_id(source_owner)
                if peer is None:
                    raise NotFoundError("user", source_owner)
                target = self._rebuild_row(peer, source)
            else:
                target.mirror(source)

            await uow.friends.save(target_owner, target)
            await uow.commit()

        logger.info(
            "friendship_repaired",
            owner_id=target_owner,
            other_id=source_owner,
            status=source.status.value,
        )
        return FriendshipRepair(repaired=True, status=source.status)

    async def _load_pair(
        self, uow: IUnitOfWork, first_id: str, second_id: str
    ) -> tuple[User, User]:
        users = await uow.users.get_many([first_id, second_id])
        for user_id in (first_id, second_id):
            if user_id not in users:
                raise NotFoundError("user", user_id)
        return users[first_id], users[second_id]

    async def _require_incoming_request(
        self, uow: IUnitOfWork, receiver_id: str, requester_id: str, action: str
    ) -> Friend:
        row = await uow.friends.get(receiver_id, requester_id)
        if row is None:
            raise NotFoundError("friend_request", f"{requester_id} -> {receiver_id}")
        if row.status != FriendStatus.PENDING:
            raise InvalidStateTransitionError("friend request", row.status, action)
        return row

    async def _sync_reciprocal(
        self,
        owner_id: str,
        other_id: str,
        authoritative: Friend,
        rebuild_missing: bool,
    ) -> None:
        """Bring ``owner_id``'s row for ``other_id`` in line with ``authoritative``."""
        async with self._uow_factory() as uow:
            reciprocal = await uow.friends.get(owner_id, other_id)
            if reciprocal is None:
                if not rebuild_missing:
                    return
                peer = await uow.users.get_by_id(other_id)
                if peer is None:
                    raise NotFoundError("user", other_id)
                reciprocal = self._rebuild_row(peer, authoritative)
            else:
                reciprocal.mirror(authoritative)
            await uow.friends.save(owner_id, reciprocal)
            await uow.commit()

    async def _remove_side(self, owner_id: str, other_id: str, hard_delete: bool) -> bool:
        async with self._uow_factory() as uow:
            row = await uow.friends.get(owner_id, other_id)
            if row is None:
                return False
            if hard_delete:
                deleted = await uow.friends.delete(owner_id, other_id)
            else:
                if not row.is_accepted:
                    return False
                row.remove()
                await uow.friends.save(owner_id, row)
                deleted = True
            await uow.commit()
            return deleted

    async def _refresh_friend_counts(self, *user_ids: str) -> None:
        for user_id in user_ids:
            await best_effort(
                "refresh_friend_count", self._refresh_friend_count(user_id), user_id=user_id
            )

    async def _refresh_friend_count(self, user_id: str) -> None:
        async with self._uow_factory() as uow:
            count = await uow.friends.count_by_status(user_id, FriendStatus.ACCEPTED)
            await uow.users.set_friend_count(user_id, count)
            await uow.commit()

    @staticmethod
    def _rebuild_row(peer: User, authoritative: Friend) -> Friend:
        return Friend(
            id=peer.id,
            name=peer.name,
            profile_image_url=peer.profile_image_url,
            status=authoritative.status,
            request_id=authoritative.request_id,
            requested_at=authoritative.requested_at,
            accepted_at=authoritative.accepted_at,
        )

    @staticmethod
    def _friend_view(row: Friend, profile: User | None) -> FriendView:
        return FriendView(
            user_id=row.id,
            name=profile.name if profile else row.name,
            profile_image_url=profile.profile_image_url if profile else row.profile_image_url,
            presence=profile.status if profile else None,
            status=row.status,
            requested_at=row.requested_at,
            accepted_at=row.accepted_at,
        )
