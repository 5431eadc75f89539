"""Daily login reward models."""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from joytask.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from joytask.models.user import User


CYCLE_LENGTH = 7
JACKPOT_DAY = 7

# Points awarded per day in the weekly cycle
DAILY_LOGIN_REWARDS: dict[int, int] = {
    1: 10,
    2: 15,
    3: 20,
    4: 25,
    5: 30,
    6: 40,
    7: 100,
}


class DailyLoginProgress(Base, TimestampMixin):
    """Per-user position in the weekly reward cycle and streak counters.

    Created lazily on the first claim; mutated only by the claim transaction.
    """

    __tablename__ = "daily_login_progress"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    # Day the user will claim next (1-7)
    current_day_in_cycle: Mapped[int] = mapped_column(
        SmallInteger,
        default=1,
        nullable=False,
    )
    weeks_completed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_days_claimed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    current_streak: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    longest_streak: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Calendar date in the application timezone
    last_claim_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    user: Mapped["User"] = relationship(
        "User",
        back_populates="daily_login_progress",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(
            "current_day_in_cycle BETWEEN 1 AND 7",
            name="ck_daily_login_progress_day_range",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<DailyLoginProgress user={self.user_id} day={self.current_day_in_cycle} "
            f"streak={self.current_streak}>"
        )


class DailyLoginClaim(Base, TimestampMixin):
    """Immutable ledger entry for one successful claim."""

    __tablename__ = "daily_login_claims"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    claim_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Day of the cycle that was claimed (1-7)
    day_in_cycle: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    points_earned: Mapped[int] = mapped_column(Integer, nullable=False)
    bonus_reward_given: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    bonus_costume_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    claimed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="daily_login_claims",
        lazy="selectin",
    )

    __table_args__ = (
        # One claim per user per calendar day
        UniqueConstraint("user_id", "claim_date", name="uq_daily_login_user_date"),
        CheckConstraint(
            "day_in_cycle BETWEEN 1 AND 7",
            name="ck_daily_login_claims_day_range",
        ),
        Index("ix_daily_login_claims_claimed_at", "claimed_at"),
    )

    @property
    def is_jackpot_day(self) -> bool:
        return self.day_in_cycle == JACKPOT_DAY

    def __repr__(self) -> str:
        return f"<DailyLoginClaim user={self.user_id} date={self.claim_date} day={self.day_in_cycle}>"
