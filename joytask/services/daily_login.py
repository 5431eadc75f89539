"""Daily login reward service.

Claim rules:
- One claim per user per calendar day in the application timezone.
- Claiming on the day after the previous claim continues the streak and the
  weekly cycle; any longer gap resets both to day 1.
- Day 7 pays the jackpot and completes a week; the next claim is day 1.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from joytask.config import get_settings
from joytask.logging_config import get_logger
from joytask.models.daily_login import (
    CYCLE_LENGTH,
    DAILY_LOGIN_REWARDS,
    JACKPOT_DAY,
    DailyLoginClaim,
    DailyLoginProgress,
)
from joytask.models.user import User
from joytask.utils.clock import get_app_timezone, local_date, utc_now
from joytask.utils.errors import AlreadyClaimedError, UnknownUserError

logger = get_logger(__name__)

ALREADY_CLAIMED_REASON = "already claimed today"

# (user_id, day_in_cycle) -> costume id to record on the ledger entry
BonusCostumeProvider = Callable[[str, int], Awaitable[str | None]]


# ============================================================================
# Resolver
# ============================================================================


@dataclass(frozen=True)
class ClaimResolution:
    """Outcome of evaluating a claim for a given day.

    For a refused claim ``day_in_cycle`` and ``points`` describe the next
    claimable day.
    """

    allowed: bool
    day_in_cycle: int
    points: int
    is_bonus_day: bool
    streak_continued: bool
    reason: str | None = None


def points_for_day(day_in_cycle: int) -> int:
    """Points paid for a day of the cycle."""
    try:
        return DAILY_LOGIN_REWARDS[day_in_cycle]
    except KeyError:
        raise ValueError(f"day_in_cycle must be between 1 and {CYCLE_LENGTH}, got {day_in_cycle}")


def next_day_in_cycle(day_in_cycle: int) -> int:
    """Cycle day that follows a claimed day; wraps after the jackpot."""
    if not 1 <= day_in_cycle <= CYCLE_LENGTH:
        raise ValueError(f"day_in_cycle must be between 1 and {CYCLE_LENGTH}, got {day_in_cycle}")
    return 1 if day_in_cycle == JACKPOT_DAY else day_in_cycle + 1


def _resolution(day_in_cycle: int, *, allowed: bool, streak_continued: bool,
                reason: str | None = None) -> ClaimResolution:
    return ClaimResolution(
        allowed=allowed,
        day_in_cycle=day_in_cycle,
        points=points_for_day(day_in_cycle),
        is_bonus_day=day_in_cycle == JACKPOT_DAY,
        streak_continued=streak_continued,
        reason=reason,
    )


def resolve_claim(progress: DailyLoginProgress | None, today: date) -> ClaimResolution:
    """Decide whether a claim is allowed on ``today`` and what it pays.

    Dates are compared as calendar dates, never as elapsed time.
    """
    if progress is None:
        return _resolution(1, allowed=True, streak_continued=False)

    last = progress.last_claim_date
    if last is not None and last >= today:
        # A last claim after today only happens if the clock moved backwards
        return _resolution(
            progress.current_day_in_cycle,
            allowed=False,
            streak_continued=False,
            reason=ALREADY_CLAIMED_REASON,
        )

    if last is not None and last == today - timedelta(days=1):
        return _resolution(progress.current_day_in_cycle, allowed=True, streak_continued=True)

    # Gap of two or more days, or progress that never recorded a claim
    return _resolution(1, allowed=True, streak_continued=False)


def apply_claim(progress: DailyLoginProgress, resolution: ClaimResolution, today: date) -> None:
    """Advance progress counters for an allowed claim."""
    if not resolution.allowed:
        raise ValueError("cannot apply a refused claim")

    progress.last_claim_date = today
    progress.total_days_claimed += 1
    progress.current_streak = progress.current_streak + 1 if resolution.streak_continued else 1
    progress.longest_streak = max(progress.longest_streak, progress.current_streak)
    progress.current_day_in_cycle = next_day_in_cycle(resolution.day_in_cycle)
    if resolution.is_bonus_day:
        progress.weeks_completed += 1


async def default_bonus_costume_provider(user_id: str, day_in_cycle: int) -> str | None:
    """Costume configured for jackpot days, if any."""
    return get_settings().daily_login_jackpot_costume_id


# ============================================================================
# Claim transaction
# ============================================================================


class DailyLoginService:
    """Daily login claims, status and history for a single user."""

    def __init__(
        self,
        db: AsyncSession,
        bonus_costume_provider: BonusCostumeProvider | None = None,
        tz: ZoneInfo | None = None,
    ):
        self.db = db
        self.bonus_costume_provider = bonus_costume_provider or default_bonus_costume_provider
        self.tz = tz or get_app_timezone()

    async def get_progress(self, user_id: str) -> DailyLoginProgress | None:
        result = await self.db.execute(
            select(DailyLoginProgress).where(DailyLoginProgress.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def load_or_create_progress(self, user_id: str) -> DailyLoginProgress:
        """Lock the user's progress row, creating it with day 1 / streak 0."""
        stmt = (
            select(DailyLoginProgress)
            .where(DailyLoginProgress.user_id == user_id)
            .with_for_update()
        )
        result = await self.db.execute(stmt)
        progress = result.scalar_one_or_none()
        if progress is not None:
            return progress

        progress = DailyLoginProgress(
            user_id=user_id,
            current_day_in_cycle=1,
            weeks_completed=0,
            total_days_claimed=0,
            current_streak=0,
            longest_streak=0,
            last_claim_date=None,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(progress)
                await self.db.flush()
        except IntegrityError:
            # Another request created the row first
            logger.info("daily_login_progress_race", user_id=user_id)
            result = await self.db.execute(stmt)
            return result.scalar_one()

        logger.info("daily_login_progress_created", user_id=user_id)
        return progress

    async def _claim_exists(self, user_id: str, claim_date: date) -> bool:
        result = await self.db.execute(
            select(DailyLoginClaim.id)
            .where(DailyLoginClaim.user_id == user_id)
            .where(DailyLoginClaim.claim_date == claim_date)
        )
        return result.scalar_one_or_none() is not None

    async def claim(self, user_id: str, now: datetime | None = None) -> DailyLoginClaim:
        """Claim today's reward.

        The transaction is rolled back before AlreadyClaimedError is raised,
        releasing the progress row lock.

        Raises:
            UnknownUserError: user does not exist
            AlreadyClaimedError: a claim for today already exists
        """
        now = now or utc_now()
        today = local_date(now, self.tz)

        user = await self.db.get(User, user_id)
        if user is None:
            raise UnknownUserError(user_id)

        progress = await self.load_or_create_progress(user_id)
        resolution = resolve_claim(progress, today)

        if not resolution.allowed or await self._claim_exists(user_id, today):
            logger.info(
                "daily_login_claim_rejected",
                user_id=user_id,
                claim_date=today.isoformat(),
                reason=resolution.reason or ALREADY_CLAIMED_REASON,
            )
            await self.db.rollback()
            raise AlreadyClaimedError(user_id, today)

        bonus_costume_id = None
        if resolution.is_bonus_day:
            bonus_costume_id = await self.bonus_costume_provider(user_id, resolution.day_in_cycle)

        claim = DailyLoginClaim(
            user_id=user_id,
            claim_date=today,
            day_in_cycle=resolution.day_in_cycle,
            points_earned=resolution.points,
            bonus_reward_given=resolution.is_bonus_day,
            bonus_costume_id=bonus_costume_id,
            claimed_at=now,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(claim)
                await self.db.flush()
        except IntegrityError:
            # Concurrent request won the (user_id, claim_date) unique constraint
            logger.warning(
                "daily_login_claim_race",
                user_id=user_id,
                claim_date=today.isoformat(),
            )
            await self.db.rollback()
            raise AlreadyClaimedError(user_id, today)

        apply_claim(progress, resolution, today)
        await self.db.commit()

        logger.info(
            "daily_login_claimed",
            user_id=user_id,
            claim_date=today.isoformat(),
            day_in_cycle=claim.day_in_cycle,
            points=claim.points_earned,
            bonus=claim.bonus_reward_given,
            streak=progress.current_streak,
        )
        return claim

    async def get_status(self, user_id: str, now: datetime | None = None) -> dict[str, Any]:
        """Current progress plus a preview of the next claim."""
        today = local_date(now, self.tz)
        progress = await self.get_progress(user_id)
        resolution = resolve_claim(progress, today)

        streak_active = (
            progress is not None
            and progress.last_claim_date is not None
            and progress.last_claim_date >= today - timedelta(days=1)
        )

        return {
            "today": today,
            "can_claim": resolution.allowed,
            "has_claimed_today": not resolution.allowed,
            "streak_active": streak_active,
            "next_claim": {
                "day_in_cycle": resolution.day_in_cycle,
                "points": resolution.points,
                "is_bonus_day": resolution.is_bonus_day,
            },
            "progress": progress,
            "rewards": dict(DAILY_LOGIN_REWARDS),
        }

    async def get_history(self, user_id: str, limit: int = 30) -> list[DailyLoginClaim]:
        """Most recent ledger entries, newest first."""
        result = await self.db.execute(
            select(DailyLoginClaim)
            .where(DailyLoginClaim.user_id == user_id)
            .order_by(DailyLoginClaim.claim_date.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
