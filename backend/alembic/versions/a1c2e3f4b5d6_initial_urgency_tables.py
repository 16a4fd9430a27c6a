"""initial_urgency_tables

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = 'a1c2e3f4b5d6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum('ADMIN', 'COACH', 'USER', name='userrole')
assignment_status = sa.Enum('ACTIVE', 'PENDING', 'ENDED', name='assignmentstatus')


def upgrade() -> None:
    op.create_table('user',
        sa.Column('id', sqlmodel.sql.sqltypes.GUID(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table('coachtrainee',
        sa.Column('id', sqlmodel.sql.sqltypes.GUID(), nullable=False),
        sa.Column('coach_email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('trainee_email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('status', assignment_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('coach_email', 'trainee_email', name='uq_coach_trainee'),
    )
    op.create_index(op.f('ix_coachtrainee_coach_email'), 'coachtrainee', ['coach_email'])
    op.create_index(op.f('ix_coachtrainee_trainee_email'), 'coachtrainee', ['trainee_email'])

    op.create_table('wellnesslog',
        sa.Column('id', sqlmodel.sql.sqltypes.GUID(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('sleep_hours', sa.Float(), nullable=True),
        sa.Column('vitality_level', sa.Integer(), nullable=True),
        sa.Column('pain_level', sa.Integer(), nullable=True),
        sa.Column('pain_area', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', 'date', name='uq_wellness_log_email_date'),
    )
    op.create_index(op.f('ix_wellnesslog_email'), 'wellnesslog', ['email'])
    op.create_index(op.f('ix_wellnesslog_date'), 'wellnesslog', ['date'])

    op.create_table('calendarevent',
        sa.Column('id', sqlmodel.sql.sqltypes.GUID(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_calendarevent_email'), 'calendarevent', ['email'])
    op.create_index(op.f('ix_calendarevent_start_time'), 'calendarevent', ['start_time'])
    op.create_index(op.f('ix_calendarevent_completed'), 'calendarevent', ['completed'])


def downgrade() -> None:
    op.drop_table('calendarevent')
    op.drop_table('wellnesslog')
    op.drop_table('coachtrainee')
    op.drop_table('user')
    user_role.drop(op.get_bind(), checkfirst=True)
    assignment_status.drop(op.get_bind(), checkfirst=True)
