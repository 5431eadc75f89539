"""add users, daily_login_progress and daily_login_claims tables

Revision ID: add_daily_login_tables
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = 'add_daily_login_tables'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create the reward tables and the users table they reference."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), server_default='user', nullable=False),
        sa.Column('status', sa.String(20), server_default='active', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'daily_login_progress',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('current_day_in_cycle', sa.SmallInteger, server_default='1', nullable=False, comment='Next day to claim (1-7)'),
        sa.Column('weeks_completed', sa.Integer, server_default='0', nullable=False),
        sa.Column('total_days_claimed', sa.Integer, server_default='0', nullable=False),
        sa.Column('current_streak', sa.Integer, server_default='0', nullable=False),
        sa.Column('longest_streak', sa.Integer, server_default='0', nullable=False),
        sa.Column('last_claim_date', sa.Date, nullable=True, comment='Local date of the last claim'),
        *_timestamps(),
        sa.CheckConstraint('current_day_in_cycle BETWEEN 1 AND 7', name='ck_daily_login_progress_day_range'),
    )

    # One claim per user per day
    op.create_table(
        'daily_login_claims',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('claim_date', sa.Date, nullable=False, index=True, comment='Local date of the claim'),
        sa.Column('day_in_cycle', sa.SmallInteger, nullable=False),
        sa.Column('points_earned', sa.Integer, nullable=False),
        sa.Column('bonus_reward_given', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('bonus_costume_id', sa.String(100), nullable=True),
        sa.Column('claimed_at', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'claim_date', name='uq_daily_login_user_date'),
        sa.CheckConstraint('day_in_cycle BETWEEN 1 AND 7', name='ck_daily_login_claims_day_range'),
    )

    op.create_index('ix_daily_login_claims_claimed_at', 'daily_login_claims', ['claimed_at'])


def downgrade() -> None:
    """Drop the reward tables and users."""
    op.drop_index('ix_daily_login_claims_claimed_at', table_name='daily_login_claims')
    op.drop_table('daily_login_claims')
    op.drop_table('daily_login_progress')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
