"""Friend relationship domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from core.exceptions import InvalidStateTransitionError


class FriendStatus(StrEnum):
    """Status of one side of a friend relationship."""

    PENDING = "PENDING"  # receiver side, awaiting a response
    REQUESTED = "REQUESTED"  # requester side, awaiting a response
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    REMOVED = "REMOVED"


OPEN_REQUEST_STATUSES = (FriendStatus.PENDING, FriendStatus.REQUESTED)


def make_friend_request_id(requester_id: str, receiver_id: str, at: datetime) -> str:
    """Build the synthetic request ID shared by both sides of a request."""
    return f"{requester_id}_{receiver_id}_{int(at.timestamp() * 1000)}"


@dataclass
class Friend:
    """One directed edge stored in the viewer's friend rows.

    ``id`` is the *other* user's ID; the viewer is implied by where the row
    is stored. ``name`` and ``profile_image_url`` are a snapshot of the peer
    taken when the row was written.
    """

    id: str
    name: str
    status: FriendStatus
    profile_image_url: str | None = None
    request_id: str | None = None
    requested_at: datetime = field(default_factory=datetime.utcnow)
    accepted_at: datetime | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def new_request(
        cls,
        receiver_id: str,
        name: str,
        profile_image_url: str | None,
        request_id: str,
        requested_at: datetime,
    ) -> "Friend":
        """Requester-side row pointing at the receiver."""
        return cls(
            id=receiver_id,
            name=name,
            profile_image_url=profile_image_url,
            status=FriendStatus.REQUESTED,
            request_id=request_id,
            requested_at=requested_at,
            created_at=requested_at,
            updated_at=requested_at,
        )

    @classmethod
    def received_request(
        cls,
        requester_id: str,
        name: str,
        profile_image_url: str | None,
        request_id: str,
        requested_at: datetime,
    ) -> "Friend":
        """Receiver-side row pointing at the requester."""
        return cls(
            id=requester_id,
            name=name,
            profile_image_url=profile_image_url,
            status=FriendStatus.PENDING,
            request_id=request_id,
            requested_at=requested_at,
            created_at=requested_at,
            updated_at=requested_at,
        )

    @property
    def is_accepted(self) -> bool:
        return self.status == FriendStatus.ACCEPTED

    @property
    def is_pending(self) -> bool:
        """True while the request is open on either side."""
        return self.status in OPEN_REQUEST_STATUSES

    def accept(self) -> None:
        """Mark the relationship as accepted."""
        if not self.is_pending:
            raise InvalidStateTransitionError("friend request", self.status, "accept")
        now = datetime.utcnow()
        self.status = FriendStatus.ACCEPTED
        self.accepted_at = now
        self.updated_at = now

    def reject(self) -> None:
        """Mark the request as rejected."""
        if not self.is_pending:
            raise InvalidStateTransitionError("friend request", self.status, "reject")
        self.status = FriendStatus.REJECTED
        self.updated_at = datetime.utcnow()

    def remove(self) -> None:
        """End an accepted friendship."""
        if not self.is_accepted:
            raise InvalidStateTransitionError("friend", self.status, "remove")
        self.status = FriendStatus.REMOVED
        self.updated_at = datetime.utcnow()

    def mirror(self, other: "Friend") -> None:
        """Copy the terminal status of the reciprocal row onto this one."""
        self.status = other.status
        self.accepted_at = other.accepted_at
        self.request_id = other.request_id or self.request_id
        self.updated_at = datetime.utcnow()
