"""User domain entity (referenced by the friend and membership flows)."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class UserStatus(StrEnum):
    """Online presence."""

    ONLINE = "online"
    OFFLINE = "offline"
    AWAY = "away"
    DO_NOT_DISTURB = "do_not_disturb"


class AccountStatus(StrEnum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    DELETED = "deleted"
    WITHDRAWN = "withdrawn"


@dataclass
class User:
    """Domain entity for a User."""

    id: str
    email: str
    name: str
    profile_image_url: str | None = None
    status: UserStatus = UserStatus.OFFLINE
    account_status: AccountStatus = AccountStatus.ACTIVE
    accepts_friend_requests: bool = True
    friend_count: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def can_receive_friend_requests(self) -> bool:
        return self.accepts_friend_requests and self.account_status == AccountStatus.ACTIVE

    def update_friend_count(self, count: int) -> None:
        self.friend_count = max(count, 0)
        self.updated_at = datetime.utcnow()
