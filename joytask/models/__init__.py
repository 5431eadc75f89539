"""Database models."""

from joytask.models.base import Base, TimestampMixin, UUIDMixin
from joytask.models.daily_login import (
    CYCLE_LENGTH,
    DAILY_LOGIN_REWARDS,
    JACKPOT_DAY,
    DailyLoginClaim,
    DailyLoginProgress,
)
from joytask.models.user import ADMIN_ROLES, User, UserRole, UserStatus

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # User
    "User",
    "UserRole",
    "UserStatus",
    "ADMIN_ROLES",
    # Daily login
    "DailyLoginProgress",
    "DailyLoginClaim",
    "DAILY_LOGIN_REWARDS",
    "CYCLE_LENGTH",
    "JACKPOT_DAY",
]
