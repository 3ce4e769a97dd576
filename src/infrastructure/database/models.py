"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserModel(Base):
    """User profile model (synced from the auth provider)."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    profile_image_url: Mapped[str | None] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="offline")
    account_status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    accepts_friend_requests: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    friend_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


class FriendModel(Base):
    """One side of a friend relationship (composite PK on owner_id + friend_id)."""

    __tablename__ = "friends"

    owner_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    friend_id: Mapped[str] = mapped_column(String(128), primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    profile_image_url: Mapped[str | None] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "status IN ('PENDING', 'REQUESTED', 'ACCEPTED', 'REJECTED', 'REMOVED')",
            name="ck_friends_status",
        ),
        nullable=False,
        index=True,
    )
    request_id: Mapped[str | None] = mapped_column(String(300))
    requested_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class ProjectModel(Base):
    """Project model."""

    __tablename__ = "projects"
    __table_args__ = (CheckConstraint("member_count >= 0", name="ck_projects_member_count"),)

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "status IN ('active', 'archived', 'deleted')",
            name="ck_projects_status",
        ),
        nullable=False,
        default="active",
    )
    member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class MemberModel(Base):
    """Project membership model. One row per (project_id, user_id)."""

    __tablename__ = "members"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_members_project_user"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    project_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    role_ids: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("status IN ('ACTIVE', 'BLOCKED')", name="ck_members_status"),
        nullable=False,
        default="ACTIVE",
    )
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class ProjectWrapperModel(Base):
    """Per-user project index (composite PK on user_id + project_id).

    No foreign key to projects: wrappers may outlive their project until
    they are archived.
    """

    __tablename__ = "project_wrappers"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    project_id: Mapped[str] = mapped_column(String(128), primary_key=True, index=True)
    project_name: Mapped[str] = mapped_column(String(100), nullable=False)
    project_image_url: Mapped[str | None] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "status IN ('ACTIVE', 'ARCHIVED', 'LEFT', 'REMOVED')",
            name="ck_project_wrappers_status",
        ),
        nullable=False,
        default="ACTIVE",
    )
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class InviteModel(Base):
    """Project invite, keyed by its invite code."""

    __tablename__ = "invites"
    __table_args__ = (
        CheckConstraint("max_uses IS NULL OR max_uses >= 1", name="ck_invites_max_uses"),
        CheckConstraint(
            "max_uses IS NULL OR current_uses <= max_uses",
            name="ck_invites_current_uses",
        ),
    )

    code: Mapped[str] = mapped_column(String(32), primary_key=True)
    project_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(String(128), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    max_uses: Mapped[int | None] = mapped_column(Integer)
    current_uses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "status IN ('active', 'expired', 'revoked')",
            name="ck_invites_status",
        ),
        nullable=False,
        default="active",
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class DMChannelModel(Base):
    """DM channel between two users."""

    __tablename__ = "dm_channels"

    id: Mapped[str] = mapped_column(String(300), primary_key=True)
    participants: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    blocked_by: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class DMWrapperModel(Base):
    """Per-user DM index (composite PK on user_id + other_user_id)."""

    __tablename__ = "dm_wrappers"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    other_user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    channel_id: Mapped[str] = mapped_column(String(300), nullable=False, index=True)
    other_user_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    other_user_image_url: Mapped[str | None] = mapped_column(String(500))
    last_message_preview: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
