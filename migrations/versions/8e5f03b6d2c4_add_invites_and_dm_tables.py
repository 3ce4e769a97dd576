"""add_invites_and_dm_tables

Revision ID: 8e5f03b6d2c4
Revises: 4c1d9e2a7b10
Create Date: 2026-09-21 16:40:05.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8e5f03b6d2c4'
down_revision: Union[str, Sequence[str], None] = '4c1d9e2a7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create invites, dm_channels and dm_wrappers tables."""
    op.create_table('invites',
        sa.Column('code', sa.String(length=32), nullable=False),
        sa.Column('project_id', sa.String(length=128), nullable=False),
        sa.Column('created_by', sa.String(length=128), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('max_uses', sa.Integer(), nullable=True),
        sa.Column('current_uses', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("status IN ('active', 'expired', 'revoked')", name='ck_invites_status'),
        sa.CheckConstraint('max_uses IS NULL OR max_uses >= 1', name='ck_invites_max_uses'),
        sa.CheckConstraint(
            'max_uses IS NULL OR current_uses <= max_uses',
            name='ck_invites_current_uses',
        ),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('code'),
    )
    op.create_index('ix_invites_project_id', 'invites', ['project_id'], unique=False)

    op.create_table('dm_channels',
        sa.Column('id', sa.String(length=300), nullable=False),
        sa.Column('participants', sa.JSON(), nullable=False),
        sa.Column('blocked_by', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('dm_wrappers',
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('other_user_id', sa.String(length=128), nullable=False),
        sa.Column('channel_id', sa.String(length=300), nullable=False),
        sa.Column('other_user_name', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('other_user_image_url', sa.String(length=500), nullable=True),
        sa.Column('last_message_preview', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('user_id', 'other_user_id'),
    )
    op.create_index('ix_dm_wrappers_channel_id', 'dm_wrappers', ['channel_id'], unique=False)


def downgrade() -> None:
    """Drop invites, dm_channels and dm_wrappers tables."""
    op.drop_index('ix_dm_wrappers_channel_id', table_name='dm_wrappers')
    op.drop_table('dm_wrappers')
    op.drop_table('dm_channels')
    op.drop_index('ix_invites_project_id', table_name='invites')
    op.drop_table('invites')
