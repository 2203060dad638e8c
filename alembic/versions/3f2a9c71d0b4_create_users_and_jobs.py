"""create_users_and_jobs

Creates the users and jobs tables.

Revision ID: 3f2a9c71d0b4
Revises:
Create Date: 2026-10-17 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c71d0b4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users and jobs tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False, server_default='lastName'),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False, server_default='my city'),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('role', sa.Enum('USER', 'ADMIN', name='userrole'), nullable=False, server_default='USER'),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('avatar_asset_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('company', sa.String(), nullable=False),
        sa.Column('position', sa.String(), nullable=False),
        sa.Column('job_status', sa.Enum('PENDING', 'INTERVIEW', 'DECLINED', name='jobstatus'), nullable=False, server_default='PENDING'),
        sa.Column('job_type', sa.Enum('FULL_TIME', 'PART_TIME', 'INTERNSHIP', name='jobtype'), nullable=False, server_default='FULL_TIME'),
        sa.Column('job_location', sa.String(), nullable=False, server_default='my city'),
        sa.Column('created_by', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_jobs_id', 'jobs', ['id'])
    op.create_index('ix_jobs_position', 'jobs', ['position'])
    op.create_index('ix_jobs_job_status', 'jobs', ['job_status'])
    op.create_index('ix_jobs_created_by', 'jobs', ['created_by'])


def downgrade() -> None:
    """Drop jobs and users tables."""
    op.drop_table('jobs')
    op.drop_table('users')
    sa.Enum(name='jobtype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='jobstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
