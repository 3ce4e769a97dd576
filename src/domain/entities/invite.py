"""Invite domain entity."""

import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from core.exceptions import InvalidStateTransitionError

INVITE_CODE_ALPHABET = string.ascii_letters + string.digits
INVITE_CODE_LENGTH = 8

EXPIRED_MESSAGE = "This invite has expired"
REVOKED_MESSAGE = "This invite has been revoked"
MAX_USES_MESSAGE = "This invite has reached its maximum usage limit"


class InviteStatus(StrEnum):
    """Status of a project invite."""

    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


@dataclass
class Invite:
    """Domain entity for a project invite.

    The invite code doubles as the primary key, so ``id`` is the code that
    ends up in the shareable link.
    """

    id: str
    project_id: str
    created_by: str
    expires_at: datetime
    max_uses: int | None = None
    current_uses: int = 0
    status: InviteStatus = InviteStatus.ACTIVE
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Reject impossible usage counters."""
        if self.max_uses is not None and self.max_uses < 1:
            raise ValueError("max_uses must be at least 1")
        if self.current_uses < 0:
            raise ValueError("current_uses cannot be negative")
        if self.max_uses is not None and self.current_uses > self.max_uses:
            raise ValueError("current_uses cannot exceed max_uses")

    @property
    def code(self) -> str:
        return self.id

    @staticmethod
    def generate_code(length: int = INVITE_CODE_LENGTH) -> str:
        """Generate a random invite code."""
        return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))

    @property
    def is_expired(self) -> bool:
        """Check if the invite has expired (by status or by clock)."""
        return self.status == InviteStatus.EXPIRED or datetime.utcnow() >= self.expires_at

    @property
    def is_revoked(self) -> bool:
        return self.status == InviteStatus.REVOKED

    @property
    def is_maxed_out(self) -> bool:
        return self.max_uses is not None and self.current_uses >= self.max_uses

    def can_be_used(self) -> bool:
        """Active, not expired, and under the usage limit if one is set."""
        return self.status == InviteStatus.ACTIVE and not self.is_expired and not self.is_maxed_out

    def unusable_reason(self) -> str | None:
        """Human-readable reason the invite cannot be used, or None.

        Taking the last use also flips the status to EXPIRED, so the usage
        limit is checked before a leftover EXPIRED status.
        """
        if self.can_be_used():
            return None
        if datetime.utcnow() >= self.expires_at:
            return EXPIRED_MESSAGE
        if self.is_revoked:
            return REVOKED_MESSAGE
        if self.is_maxed_out:
            return MAX_USES_MESSAGE
        return EXPIRED_MESSAGE

    def increment_uses(self) -> None:
        """Record one use; reaching the limit expires the invite."""
        if not self.can_be_used():
            raise InvalidStateTransitionError("invite", self.status, "use")
        self.current_uses += 1
        if self.max_uses is not None and self.current_uses >= self.max_uses:
            self.status = InviteStatus.EXPIRED
        self.updated_at = datetime.utcnow()

    def revoke(self) -> None:
        """Revoke the invite. Revoking twice is a no-op."""
        if self.is_revoked:
            return
        self.status = InviteStatus.REVOKED
        self.updated_at = datetime.utcnow()
