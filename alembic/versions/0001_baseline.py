"""Baseline migration - enterprises, users and complaints

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Tenant tables with ON DELETE CASCADE from enterprises to users and
complaints.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create tenant, user and complaint tables."""

    op.create_table(
        'enterprises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_enterprises')),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('enterprise_id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=50), server_default=sa.text("'admin'"), nullable=False),
        sa.CheckConstraint("role IN ('admin', 'superadmin')", name=op.f('ck_users_role_valid')),
        sa.ForeignKeyConstraint(
            ['enterprise_id'], ['enterprises.id'],
            name=op.f('fk_users_enterprise_id_enterprises'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
        sa.UniqueConstraint('username', name=op.f('uq_users_username')),
    )
    op.create_index('ix_users_enterprise_id', 'users', ['enterprise_id'])

    op.create_table(
        'complaints',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('enterprise_id', sa.Integer(), nullable=False),
        sa.Column('complaint', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('status', sa.String(length=50), server_default=sa.text("'open'"), nullable=False),
        sa.Column('timestamp', sa.String(length=255), nullable=False),
        sa.Column('filepath', sa.String(length=1024), nullable=True),
        sa.Column('storage_key', sa.String(length=1024), nullable=True),
        sa.CheckConstraint("status IN ('open', 'resolved')", name=op.f('ck_complaints_status_valid')),
        sa.CheckConstraint(
            "(type = 'text' AND complaint IS NOT NULL AND filepath IS NULL AND storage_key IS NULL)"
            " OR (type = 'voice' AND complaint IS NULL AND filepath IS NOT NULL AND storage_key IS NOT NULL)",
            name=op.f('ck_complaints_payload_matches_type'),
        ),
        sa.ForeignKeyConstraint(
            ['enterprise_id'], ['enterprises.id'],
            name=op.f('fk_complaints_enterprise_id_enterprises'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_complaints')),
    )
    op.create_index('ix_complaints_enterprise_id', 'complaints', ['enterprise_id'])


def downgrade() -> None:
    op.drop_index('ix_complaints_enterprise_id', table_name='complaints')
    op.drop_table('complaints')
    op.drop_index('ix_users_enterprise_id', table_name='users')
    op.drop_table('users')
    op.drop_table('enterprises')
