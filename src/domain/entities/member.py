"""Project member domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import uuid4

from core.exceptions import InvalidStateTransitionError


class MemberStatus(StrEnum):
    """Membership status within a project."""

    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"


@dataclass
class Member:
    """Domain entity for one user's membership in one project."""

    project_id: str
    user_id: str
    role_ids: list[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid4()))
    status: MemberStatus = MemberStatus.ACTIVE
    joined_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE

    @property
    def is_blocked(self) -> bool:
        return self.status == MemberStatus.BLOCKED

    def block(self) -> None:
        """Block the member, keeping the row for history."""
        if self.is_blocked:
            raise InvalidStateTransitionError("member", self.status, "block")
        self.status = MemberStatus.BLOCKED
        self.updated_at = datetime.utcnow()

    def unblock(self) -> None:
        """Restore a blocked member."""
        if not self.is_blocked:
            raise InvalidStateTransitionError("member", self.status, "unblock")
        self.status = MemberStatus.ACTIVE
        self.updated_at = datetime.utcnow()


def can_manage_members(actor: Member | None) -> bool:
    """Check if ``actor`` may remove or block other members.

    Any active member qualifies. Role-based checks belong here once roles
    carry permissions.
    """
    return actor is not None and actor.is_active
