"""initial schema

Revision ID: 4b1d9c27e0a3
Revises:
Create Date: 2026-10-16 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '4b1d9c27e0a3'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('username', sa.String(length=50), nullable=True),
        sa.Column('profile_photo_public_id', sa.String(length=255), nullable=True),
        sa.Column('profile_photo_url', sa.String(length=512), nullable=True),
        sa.Column('date_birth', sa.Date(), nullable=True),
        sa.Column('theme', sa.String(length=20), nullable=True),
        sa.Column('experience', sa.String(length=50), nullable=True),
        sa.Column('weight_unit', sa.String(length=10), nullable=True),
        sa.Column('goal', sa.String(length=255), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )

    op.create_table(
        'credentials',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_credentials_user_id_users'), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('reset_password_token', sa.Text(), nullable=True),
        sa.Column('reset_password_token_expires_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', name='uq_credentials_user_id'),
    )

    op.create_table(
        'invalid_tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_invalid_tokens_user_id_users'), nullable=False),
        sa.Column('token', sa.String(length=1024), nullable=False),
        sa.Column('recorded_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_invalid_tokens_user_id', 'invalid_tokens', ['user_id'])
    op.create_index('ix_invalid_tokens_token', 'invalid_tokens', ['token'])
    op.create_index('ix_invalid_tokens_recorded_at', 'invalid_tokens', ['recorded_at'])

    op.create_table(
        'feedback',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_feedback_user_id_users'), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_feedback_user_id', 'feedback', ['user_id'])

    op.create_table(
        'days',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=20), nullable=False),
        sa.UniqueConstraint('name', name='uq_days_name'),
    )
    op.create_table(
        'muscle_groups',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.UniqueConstraint('name', name='uq_muscle_groups_name'),
    )

    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_exercises_user_id_users'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('time_after_exercise', sa.String(length=50), nullable=False),
        sa.Column('intensity', sa.SmallInteger(), nullable=False),
        sa.Column('is_favorite', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('intensity BETWEEN 1 AND 3', name='ck_exercises_intensity_range'),
    )
    op.create_index('ix_exercises_user_id', 'exercises', ['user_id'])

    op.create_table(
        'sets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_sets_user_id_users'), nullable=False),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', name='fk_sets_exercise_id_exercises'), nullable=False),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('rest_after_set', sa.String(length=50), nullable=True),
        sa.Column('set_order', sa.Integer(), nullable=False),
    )
    op.create_index('ix_sets_user_id', 'sets', ['user_id'])
    op.create_index('ix_sets_exercise_id', 'sets', ['exercise_id'])

    op.create_table(
        'time_sets',
        sa.Column('set_id', sa.Integer(), sa.ForeignKey('sets.id', name='fk_time_sets_set_id_sets'), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_time_sets_user_id_users'), nullable=False),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', name='fk_time_sets_exercise_id_exercises'), nullable=False),
        sa.Column('duration', sa.String(length=50), nullable=False),
    )
    op.create_index('ix_time_sets_user_id', 'time_sets', ['user_id'])
    op.create_index('ix_time_sets_exercise_id', 'time_sets', ['exercise_id'])

    op.create_table(
        'repetition_sets',
        sa.Column('set_id', sa.Integer(), sa.ForeignKey('sets.id', name='fk_repetition_sets_set_id_sets'), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_repetition_sets_user_id_users'), nullable=False),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', name='fk_repetition_sets_exercise_id_exercises'), nullable=False),
        sa.Column('repetitions', sa.Integer(), nullable=False),
        sa.CheckConstraint('repetitions > 0', name='ck_repetition_sets_repetitions_positive'),
    )
    op.create_index('ix_repetition_sets_user_id', 'repetition_sets', ['user_id'])
    op.create_index('ix_repetition_sets_exercise_id', 'repetition_sets', ['exercise_id'])

    op.create_table(
        'works_on',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_works_on_user_id_users'), nullable=False),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', name='fk_works_on_exercise_id_exercises'), primary_key=True),
        sa.Column('muscle_group_id', sa.Integer(), sa.ForeignKey('muscle_groups.id', name='fk_works_on_muscle_group_id_muscle_groups'), primary_key=True),
    )
    op.create_index('ix_works_on_user_id', 'works_on', ['user_id'])

    op.create_table(
        'photos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_photos_user_id_users'), nullable=False),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', name='fk_photos_exercise_id_exercises'), nullable=False),
        sa.Column('public_id', sa.String(length=255), nullable=False),
        sa.Column('url', sa.String(length=512), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('public_id', name='uq_photos_public_id'),
    )
    op.create_index('ix_photos_user_id', 'photos', ['user_id'])
    op.create_index('ix_photos_exercise_id', 'photos', ['exercise_id'])

    op.create_table(
        'routines',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_routines_user_id_users'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('time_before_start', sa.String(length=50), nullable=True),
        sa.Column('usage_count', sa.Integer(), nullable=False),
        sa.Column('is_favorite', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_routines_user_id', 'routines', ['user_id'])

    op.create_table(
        'composed_by',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_composed_by_user_id_users'), nullable=False),
        sa.Column('routine_id', sa.Integer(), sa.ForeignKey('routines.id', name='fk_composed_by_routine_id_routines'), primary_key=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', name='fk_composed_by_exercise_id_exercises'), primary_key=True),
        sa.Column('exercise_order', sa.Integer(), nullable=True),
    )
    op.create_index('ix_composed_by_user_id', 'composed_by', ['user_id'])

    op.create_table(
        'scheduled_days',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_scheduled_days_user_id_users'), nullable=False),
        sa.Column('routine_id', sa.Integer(), sa.ForeignKey('routines.id', name='fk_scheduled_days_routine_id_routines'), primary_key=True),
        sa.Column('day_id', sa.Integer(), sa.ForeignKey('days.id', name='fk_scheduled_days_day_id_days'), primary_key=True),
    )
    op.create_index('ix_scheduled_days_user_id', 'scheduled_days', ['user_id'])


def downgrade():
    for table in (
        'scheduled_days',
        'composed_by',
        'routines',
        'photos',
        'works_on',
        'repetition_sets',
        'time_sets',
        'sets',
        'exercises',
        'muscle_groups',
        'days',
        'feedback',
        'invalid_tokens',
        'credentials',
        'users',
    ):
        op.drop_table(table)
