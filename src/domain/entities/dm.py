"""Direct message channel domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from core.exceptions import ConflictError


class DMChannelStatus(StrEnum):
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"


def dm_channel_id(user_a: str, user_b: str) -> str:
    """Channel ID for an unordered user pair."""
    first, second = sorted((user_a, user_b))
    return f"{first}__{second}"


@dataclass
class DMChannel:
    """One DM channel per unordered pair of users."""

    id: str
    participants: list[str]
    blocked_by: list[str] = field(default_factory=list)
    status: DMChannelStatus = DMChannelStatus.ACTIVE
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def for_pair(cls, user_a: str, user_b: str) -> "DMChannel":
        return cls(id=dm_channel_id(user_a, user_b), participants=sorted((user_a, user_b)))

    def is_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def other_participant(self, user_id: str) -> str | None:
        for participant in self.participants:
            if participant != user_id:
                return participant
        return None

    def is_blocked_by(self, user_id: str) -> bool:
        return user_id in self.blocked_by

    @property
    def is_fully_unblocked(self) -> bool:
        return not self.blocked_by

    def block(self, user_id: str) -> None:
        if self.is_blocked_by(user_id):
            return
        self.blocked_by.append(user_id)
        self.status = DMChannelStatus.BLOCKED
        self.updated_at = datetime.utcnow()

    def unblock(self, user_id: str) -> None:
        if not self.is_blocked_by(user_id):
            raise ConflictError(
                "dm channel",
                "blocked_by",
                user_id,
                message="Channel is not blocked by this user",
            )
        self.blocked_by = [u for u in self.blocked_by if u != user_id]
        if not self.blocked_by:
            self.status = DMChannelStatus.ACTIVE
        self.updated_at = datetime.utcnow()


@dataclass
class DMWrapper:
    """Per-user index row for a DM channel, keyed by ``(user_id, other_user_id)``."""

    user_id: str
    other_user_id: str
    channel_id: str
    other_user_name: str = ""
    other_user_image_url: str | None = None
    last_message_preview: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
