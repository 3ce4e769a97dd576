"""create_users_friends_projects

Revision ID: 4c1d9e2a7b10
Revises:
Create Date: 2026-09-14 10:12:41.220913

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d9e2a7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, friends, projects, members and project_wrappers tables."""
    op.create_table('users',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('profile_image_url', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='offline'),
        sa.Column('account_status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('accepts_friend_requests', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('friend_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_users_name', 'users', ['name'], unique=False)

    op.create_table('friends',
        sa.Column('owner_id', sa.String(length=128), nullable=False),
        sa.Column('friend_id', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('profile_image_url', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('request_id', sa.String(length=300), nullable=True),
        sa.Column('requested_at', sa.DateTime(), nullable=False),
        sa.Column('accepted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "status IN ('PENDING', 'REQUESTED', 'ACCEPTED', 'REJECTED', 'REMOVED')",
            name='ck_friends_status',
        ),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('owner_id', 'friend_id'),
    )
    op.create_index('ix_friends_friend_id', 'friends', ['friend_id'], unique=False)
    # Listing a user's friends / requests filters on owner + status
    op.create_index('ix_friends_owner_status', 'friends', ['owner_id', 'status'], unique=False)

    op.create_table('projects',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('owner_id', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('member_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("status IN ('active', 'archived', 'deleted')", name='ck_projects_status'),
        sa.CheckConstraint('member_count >= 0', name='ck_projects_member_count'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_projects_owner_id', 'projects', ['owner_id'], unique=False)

    op.create_table('members',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('project_id', sa.String(length=128), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('role_ids', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("status IN ('ACTIVE', 'BLOCKED')", name='ck_members_status'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        # Concurrent joins with the same user collide here
        sa.UniqueConstraint('project_id', 'user_id', name='uq_members_project_user'),
    )
    op.create_index('ix_members_project_id', 'members', ['project_id'], unique=False)
    op.create_index('ix_members_user_id', 'members', ['user_id'], unique=False)

    op.create_table('project_wrappers',
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('project_id', sa.String(length=128), nullable=False),
        sa.Column('project_name', sa.String(length=100), nullable=False),
        sa.Column('project_image_url', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "status IN ('ACTIVE', 'ARCHIVED', 'LEFT', 'REMOVED')",
            name='ck_project_wrappers_status',
        ),
        sa.PrimaryKeyConstraint('user_id', 'project_id'),
    )
    op.create_index('ix_project_wrappers_project_id', 'project_wrappers', ['project_id'], unique=False)


def downgrade() -> None:
    """Drop users, friends, projects, members and project_wrappers tables."""
    op.drop_index('ix_project_wrappers_project_id', table_name='project_wrappers')
    op.drop_table('project_wrappers')
    op.drop_index('ix_members_user_id', table_name='members')
    op.drop_index('ix_members_project_id', table_name='members')
    op.drop_table('members')
    op.drop_index('ix_projects_owner_id', table_name='projects')
    op.drop_table('projects')
    op.drop_index('ix_friends_owner_status', table_name='friends')
    op.drop_index('ix_friends_friend_id', table_name='friends')
    op.drop_table('friends')
    op.drop_index('ix_users_name', table_name='users')
    op.drop_table('users')
