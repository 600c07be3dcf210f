"""Initial schema: core instances, strategic commands, system config.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'core_instances',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('version', sa.String(32), nullable=False),
        sa.Column('capabilities', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_active', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        'strategic_commands',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('command', sa.Text(), nullable=False),
        sa.Column('issued_by', sa.String(100), nullable=False),
        sa.Column('issued_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('target_capabilities', sa.JSON(), nullable=False),
        sa.Column('progress', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('logs', sa.JSON(), nullable=False),
    )
    op.create_table(
        'system_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('guest_word_limit', sa.Integer(), nullable=False),
        sa.Column('allowed_languages', sa.JSON(), nullable=False),
        sa.Column('maintenance_mode', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('custom_settings', sa.JSON(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('system_config')
    op.drop_table('strategic_commands')
    op.drop_table('core_instances')
