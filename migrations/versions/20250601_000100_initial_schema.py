"""initial fitcoach schema

Revision ID: initial_schema
Revises:
Create Date: 2025-06-01 00:01:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = 'initial_schema'
down_revision = None
branch_labels = None
depends_on = None

user_role = postgresql.ENUM('admin', 'trainer', 'student', name='user_role', create_type=False)
trainer_plan = postgresql.ENUM('free', 'pro', 'elite', name='trainer_plan', create_type=False)
student_status = postgresql.ENUM('active', 'paused', 'cancelled', name='student_status', create_type=False)
session_status = postgresql.ENUM('scheduled', 'completed', 'cancelled', name='session_status', create_type=False)
payment_method = postgresql.ENUM('credit_card', 'pix', 'bank_transfer', name='payment_method', create_type=False)
payment_status = postgresql.ENUM('pending', 'succeeded', 'failed', 'cancelled', name='payment_status', create_type=False)
subscription_status = postgresql.ENUM('active', 'canceled', 'past_due', 'trialing', name='subscription_status', create_type=False)

ENUMS = (
    user_role,
    trainer_plan,
    student_status,
    session_status,
    payment_method,
    payment_status,
    subscription_status,
)


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
    ]


def upgrade():
    bind = op.get_bind()
    for enum in ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String()),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('email_confirmed_at', sa.DateTime()),
        sa.Column('last_sign_in_at', sa.DateTime()),
        *timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', sa.String(length=64), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=30)),
        sa.Column('role', user_role, nullable=False),
        *timestamps(),
    )

    op.create_table(
        'trainer_profiles',
        sa.Column('id', sa.String(length=64), sa.ForeignKey('profiles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('plan', trainer_plan, nullable=False),
        sa.Column('max_students', sa.Integer(), nullable=False),
        sa.Column('ai_credits', sa.Integer(), nullable=False),
        sa.Column('active_until', sa.DateTime()),
        sa.Column('avatar_url', sa.String(length=255)),
        sa.Column('bio', sa.Text()),
        sa.Column('whatsapp_number', sa.String(length=30)),
        *timestamps(),
    )

    op.create_table(
        'student_profiles',
        sa.Column('id', sa.String(length=64), sa.ForeignKey('profiles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('trainer_id', sa.String(length=64), sa.ForeignKey('trainer_profiles.id', ondelete='SET NULL')),
        sa.Column('gender', sa.String(length=20)),
        sa.Column('menstrual_cycle_tracking', sa.Boolean(), nullable=False),
        sa.Column('start_date', sa.DateTime()),
        sa.Column('status', student_status, nullable=False),
        *timestamps(),
    )
    op.create_index('ix_student_profiles_trainer_id', 'student_profiles', ['trainer_id'])

    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('token', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(length=64), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('is_revoked', sa.Boolean()),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_index('ix_refresh_tokens_id', 'refresh_tokens', ['id'])
    op.create_index('ix_refresh_tokens_token', 'refresh_tokens', ['token'], unique=True)

    op.create_table(
        'sessions',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('trainer_id', sa.String(length=64), sa.ForeignKey('trainer_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.String(length=64), sa.ForeignKey('student_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('status', session_status, nullable=False),
        sa.Column('notes', sa.Text()),
        *timestamps(),
    )
    op.create_index('ix_sessions_trainer_id', 'sessions', ['trainer_id'])
    op.create_index('ix_sessions_student_id', 'sessions', ['student_id'])
    op.create_index('ix_sessions_scheduled_at', 'sessions', ['scheduled_at'])

    op.create_table(
        'diet_plans',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('trainer_id', sa.String(length=64), sa.ForeignKey('trainer_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.String(length=64), sa.ForeignKey('student_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('total_calories', sa.Integer()),
        sa.Column('is_paid', sa.Boolean(), nullable=False),
        sa.Column('content', sa.JSON()),
        *timestamps(),
    )
    op.create_index('ix_diet_plans_trainer_id', 'diet_plans', ['trainer_id'])
    op.create_index('ix_diet_plans_student_id', 'diet_plans', ['student_id'])

    op.create_table(
        'exercises',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('trainer_id', sa.String(length=64), sa.ForeignKey('trainer_profiles.id', ondelete='CASCADE')),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('muscle_groups', sa.JSON(), nullable=False),
        sa.Column('equipment', sa.String(length=100), nullable=False),
        sa.Column('difficulty_level', sa.Integer(), nullable=False),
        sa.Column('instructions', sa.Text(), nullable=False),
        sa.Column('video_url', sa.String(length=255)),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_index('ix_exercises_trainer_id', 'exercises', ['trainer_id'])

    op.create_table(
        'workout_plans',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('trainer_id', sa.String(length=64), sa.ForeignKey('trainer_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.String(length=64), sa.ForeignKey('student_profiles.id', ondelete='SET NULL')),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('difficulty_level', sa.Integer()),
        sa.Column('estimated_duration_minutes', sa.Integer(), nullable=False),
        sa.Column('muscle_groups', sa.JSON(), nullable=False),
        sa.Column('is_template', sa.Boolean(), nullable=False),
        *timestamps(),
    )
    op.create_index('ix_workout_plans_trainer_id', 'workout_plans', ['trainer_id'])
    op.create_index('ix_workout_plans_student_id', 'workout_plans', ['student_id'])

    op.create_table(
        'workout_plan_exercises',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('workout_plan_id', sa.String(length=64), sa.ForeignKey('workout_plans.id', ondelete='CASCADE'), nullable=False),
        sa.Column('exercise_id', sa.String(length=64), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False),
        sa.Column('order_in_workout', sa.Integer(), nullable=False),
        sa.Column('target_sets', sa.Integer(), nullable=False),
        sa.Column('target_reps', sa.String(length=20), nullable=False),
        sa.Column('target_weight_kg', sa.Float()),
        sa.Column('rest_seconds', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text()),
    )
    op.create_index('ix_workout_plan_exercises_workout_plan_id', 'workout_plan_exercises', ['workout_plan_id'])

    op.create_table(
        'workout_sessions',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('trainer_id', sa.String(length=64), sa.ForeignKey('trainer_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.String(length=64), sa.ForeignKey('student_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('workout_plan_id', sa.String(length=64), sa.ForeignKey('workout_plans.id', ondelete='CASCADE'), nullable=False),
        sa.Column('scheduled_date', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime()),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('duration_minutes', sa.Integer()),
        sa.Column('notes', sa.Text()),
        sa.Column('rating', sa.Integer()),
        *timestamps(),
    )
    op.create_index('ix_workout_sessions_trainer_id', 'workout_sessions', ['trainer_id'])
    op.create_index('ix_workout_sessions_student_id', 'workout_sessions', ['student_id'])

    op.create_table(
        'payment_intents',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('trainer_id', sa.String(length=64), sa.ForeignKey('trainer_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.String(length=64), sa.ForeignKey('student_profiles.id', ondelete='SET NULL')),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('method', payment_method, nullable=False),
        sa.Column('fee_percent', sa.Float(), nullable=False),
        sa.Column('status', payment_status, nullable=False),
        sa.Column('description', sa.String(length=255)),
        *timestamps(),
    )
    op.create_index('ix_payment_intents_trainer_id', 'payment_intents', ['trainer_id'])
    op.create_index('ix_payment_intents_created_at', 'payment_intents', ['created_at'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('trainer_id', sa.String(length=64), sa.ForeignKey('trainer_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('plan', trainer_plan, nullable=False),
        sa.Column('billing_cycle', sa.String(length=10), nullable=False),
        sa.Column('status', subscription_status, nullable=False),
        sa.Column('current_period_start', sa.DateTime(), nullable=False),
        sa.Column('current_period_end', sa.DateTime(), nullable=False),
        sa.Column('cancel_at_period_end', sa.Boolean(), nullable=False),
        *timestamps(),
    )
    op.create_index('ix_subscriptions_trainer_id', 'subscriptions', ['trainer_id'])

    op.create_table(
        'ai_credit_ledger',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('trainer_id', sa.String(length=64), sa.ForeignKey('trainer_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=30), nullable=False),
        sa.Column('used_at', sa.DateTime()),
    )
    op.create_index('ix_ai_credit_ledger_trainer_id', 'ai_credit_ledger', ['trainer_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('user_id', sa.String(length=64), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=30), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    op.create_table(
        'system_settings',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text()),
        *timestamps(),
    )
    op.create_index('ix_system_settings_key', 'system_settings', ['key'], unique=True)


def downgrade():
    for table in (
        'system_settings',
        'notifications',
        'ai_credit_ledger',
        'subscriptions',
        'payment_intents',
        'workout_sessions',
        'workout_plan_exercises',
        'workout_plans',
        'exercises',
        'diet_plans',
        'sessions',
        'refresh_tokens',
        'student_profiles',
        'trainer_profiles',
        'profiles',
        'users',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in reversed(ENUMS):
        enum.drop(bind, checkfirst=True)
