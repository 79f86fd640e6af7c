"""Add workout history, fatigue history and model cache tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create workout_sessions, set_logs, fatigue_history and model_cache tables."""
    op.create_table('workout_sessions', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('athlete_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('session_key', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('total_load', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('athlete_id', 'session_key', name='uq_workout_athlete_session_key'))
    op.create_index(op.f('ix_workout_sessions_athlete_id'), 'workout_sessions', ['athlete_id'], unique=False)
    op.create_index(op.f('ix_workout_sessions_started_at'), 'workout_sessions', ['started_at'], unique=False)
    op.create_index(op.f('ix_workout_sessions_ended_at'), 'workout_sessions', ['ended_at'], unique=False)

    op.create_table('set_logs', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('exercise_id', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('set_index', sa.Integer(), nullable=False),
        sa.Column('prescribed_reps', sa.Integer(), nullable=True),
        sa.Column('prescribed_rpe', sa.Float(), nullable=True),
        sa.Column('actual_weight', sa.Float(), nullable=True),
        sa.Column('actual_reps', sa.Integer(), nullable=True),
        sa.Column('actual_rpe', sa.Float(), nullable=True),
        sa.Column('actual_rir', sa.Float(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('reached_failure', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('form_breakdown', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('timestamp', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['session_id'], ['workout_sessions.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_set_logs_session_id'), 'set_logs', ['session_id'], unique=False)
    op.create_index(op.f('ix_set_logs_exercise_id'), 'set_logs', ['exercise_id'], unique=False)

    op.create_table('fatigue_history', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('athlete_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('session_key', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('muscle_group', sqlmodel.sql.sqltypes.AutoString(length=32), nullable=False),
        sa.Column('fatigue_score', sa.Float(), nullable=False),
        sa.Column('rpe_overshoot_avg', sa.Float(), nullable=True),
        sa.Column('form_breakdown_count', sa.Integer(), nullable=False),
        sa.Column('failure_count', sa.Integer(), nullable=False),
        sa.Column('volume_load', sa.Float(), nullable=False),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_fatigue_history_athlete_id'), 'fatigue_history', ['athlete_id'], unique=False)
    op.create_index(op.f('ix_fatigue_history_muscle_group'), 'fatigue_history', ['muscle_group'], unique=False)
    op.create_index(op.f('ix_fatigue_history_recorded_at'), 'fatigue_history', ['recorded_at'], unique=False)

    op.create_table('model_cache', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('athlete_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('model_kind', sqlmodel.sql.sqltypes.AutoString(length=32), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('athlete_id', 'model_kind', name='uq_model_cache_athlete_kind'))
    op.create_index(op.f('ix_model_cache_athlete_id'), 'model_cache', ['athlete_id'], unique=False)
    op.create_index(op.f('ix_model_cache_expires_at'), 'model_cache', ['expires_at'], unique=False)


def downgrade() -> None:
    """Drop the readiness tables."""
    op.drop_index(op.f('ix_model_cache_expires_at'), table_name='model_cache')
    op.drop_index(op.f('ix_model_cache_athlete_id'), table_name='model_cache')
    op.drop_table('model_cache')
    op.drop_index(op.f('ix_fatigue_history_recorded_at'), table_name='fatigue_history')
    op.drop_index(op.f('ix_fatigue_history_muscle_group'), table_name='fatigue_history')
    op.drop_index(op.f('ix_fatigue_history_athlete_id'), table_name='fatigue_history')
    op.drop_table('fatigue_history')
    op.drop_index(op.f('ix_set_logs_exercise_id'), table_name='set_logs')
    op.drop_index(op.f('ix_set_logs_session_id'), table_name='set_logs')
    op.drop_table('set_logs')
    op.drop_index(op.f('ix_workout_sessions_ended_at'), table_name='workout_sessions')
    op.drop_index(op.f('ix_workout_sessions_started_at'), table_name='workout_sessions')
    op.drop_index(op.f('ix_workout_sessions_athlete_id'), table_name='workout_sessions')
    op.drop_table('workout_sessions')
