"""Admin daily login service - ledger moderation and statistics."""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy import Select, distinct, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from joytask.logging_config import get_logger
from joytask.models.daily_login import JACKPOT_DAY, DailyLoginClaim, DailyLoginProgress
from joytask.models.user import User
from joytask.utils.clock import get_app_timezone, local_date
from joytask.utils.errors import ClaimNotFoundError

logger = get_logger(__name__)

TOP_STREAK_HOLDERS_LIMIT = 5


@dataclass
class ClaimFilters:
    """Optional filters for the admin claim listing."""

    day_in_cycle: int | None = None
    user_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    bonus_reward_given: bool | None = None
    search: str | None = None


def _user_search(stmt: Select, search: str | None) -> Select:
    if not search or not search.strip():
        return stmt
    like = f"%{search.strip()}%"
    return stmt.where(or_(User.name.ilike(like), User.email.ilike(like)))


def _page(items: list, total: int, page: int, page_size: int) -> dict[str, Any]:
    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size) if total else 0,
    }


def _user_summary(user: User | None) -> dict[str, str] | None:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email}


def _round_avg(value: Any) -> float:
    return round(float(value), 1) if value is not None else 0.0


class AdminDailyLoginService:
    """Read and moderate every user's daily login data."""

    def __init__(self, db: AsyncSession, tz: ZoneInfo | None = None):
        self.db = db
        self.tz = tz or get_app_timezone()

    async def list_claims(
        self,
        filters: ClaimFilters | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> dict[str, Any]:
        """Paginated ledger entries, newest claim first."""
        filters = filters or ClaimFilters()

        stmt = select(DailyLoginClaim).join(User, User.id == DailyLoginClaim.user_id)
        if filters.day_in_cycle is not None:
            stmt = stmt.where(DailyLoginClaim.day_in_cycle == filters.day_in_cycle)
        if filters.user_id:
            stmt = stmt.where(DailyLoginClaim.user_id == filters.user_id)
        if filters.start_date and filters.end_date:
            stmt = stmt.where(
                DailyLoginClaim.claim_date.between(filters.start_date, filters.end_date)
            )
        if filters.bonus_reward_given is not None:
            stmt = stmt.where(DailyLoginClaim.bonus_reward_given.is_(filters.bonus_reward_given))
        stmt = _user_search(stmt, filters.search)

        total = await self.db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

        result = await self.db.execute(
            stmt.order_by(DailyLoginClaim.claimed_at.desc(), DailyLoginClaim.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return _page(list(result.scalars().all()), total, page, page_size)

    async def list_progress(
        self,
        user_id: str | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> dict[str, Any]:
        """Paginated progress records, most recently updated first."""
        stmt = select(DailyLoginProgress).join(User, User.id == DailyLoginProgress.user_id)
        if user_id:
            stmt = stmt.where(DailyLoginProgress.user_id == user_id)
        stmt = _user_search(stmt, search)

        total = await self.db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

        result = await self.db.execute(
            stmt.order_by(DailyLoginProgress.updated_at.desc(), DailyLoginProgress.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return _page(list(result.scalars().all()), total, page, page_size)

    async def delete_claim(self, claim_id: int, admin_id: str | None = None) -> None:
        """Delete a ledger entry. Progress counters are left as they are."""
        claim = await self.db.get(DailyLoginClaim, claim_id)
        if claim is None:
            raise ClaimNotFoundError(claim_id)

        user_id, claim_date = claim.user_id, claim.claim_date
        await self.db.delete(claim)
        await self.db.commit()

        logger.info(
            "daily_login_claim_deleted",
            claim_id=claim_id,
            user_id=user_id,
            claim_date=claim_date.isoformat(),
            admin_id=admin_id,
        )

    async def get_stats(self, days: int = 30, now: datetime | None = None) -> dict[str, Any]:
        """Daily login statistics for the admin dashboard."""
        today = local_date(now, self.tz)
        start_date = today - timedelta(days=days)
        recent = DailyLoginClaim.claim_date >= start_date

        claim_totals = (
            await self.db.execute(
                select(
                    func.count(DailyLoginClaim.id),
                    func.coalesce(func.sum(DailyLoginClaim.points_earned), 0),
                )
            )
        ).one()
        recent_totals = (
            await self.db.execute(
                select(
                    func.count(DailyLoginClaim.id),
                    func.coalesce(func.sum(DailyLoginClaim.points_earned), 0),
                    func.count(distinct(DailyLoginClaim.user_id)),
                ).where(recent)
            )
        ).one()
        progress_totals = (
            await self.db.execute(
                select(
                    func.count(DailyLoginProgress.id),
                    func.avg(DailyLoginProgress.current_streak),
                    func.max(DailyLoginProgress.longest_streak),
                    func.avg(DailyLoginProgress.longest_streak),
                )
            )
        ).one()

        claimed_today = await self.db.scalar(
            select(func.count(DailyLoginClaim.id)).where(DailyLoginClaim.claim_date == today)
        ) or 0
        jackpot_claims = await self.db.scalar(
            select(func.count(DailyLoginClaim.id)).where(
                DailyLoginClaim.day_in_cycle == JACKPOT_DAY
            )
        ) or 0

        day_rows = await self.db.execute(
            select(DailyLoginClaim.day_in_cycle, func.count(DailyLoginClaim.id))
            .group_by(DailyLoginClaim.day_in_cycle)
            .order_by(DailyLoginClaim.day_in_cycle)
        )
        daily_rows = await self.db.execute(
            select(DailyLoginClaim.claim_date, func.count(DailyLoginClaim.id))
            .where(recent)
            .group_by(DailyLoginClaim.claim_date)
            .order_by(DailyLoginClaim.claim_date)
        )
        weeks_rows = await self.db.execute(
            select(DailyLoginProgress.weeks_completed, func.count(DailyLoginProgress.id))
            .group_by(DailyLoginProgress.weeks_completed)
            .order_by(DailyLoginProgress.weeks_completed)
        )
        top_rows = await self.db.execute(
            select(DailyLoginProgress)
            .order_by(
                DailyLoginProgress.longest_streak.desc(),
                DailyLoginProgress.current_streak.desc(),
            )
            .limit(TOP_STREAK_HOLDERS_LIMIT)
        )

        return {
            "total_claims": claim_totals[0],
            "recent_claims": recent_totals[0],
            "total_points_distributed": int(claim_totals[1]),
            "recent_points_distributed": int(recent_totals[1]),
            "total_users_with_progress": progress_totals[0],
            "active_users_recent": recent_totals[2],
            "claimed_today": claimed_today,
            "avg_current_streak": _round_avg(progress_totals[1]),
            "max_streak": progress_totals[2] or 0,
            "avg_longest_streak": _round_avg(progress_totals[3]),
            "day_distribution": {day: count for day, count in day_rows.all()},
            "jackpot_claims": jackpot_claims,
            "daily_claim_counts": {
                claim_date.isoformat(): count for claim_date, count in daily_rows.all()
            },
            "top_streak_holders": [
                {
                    "user_id": p.user_id,
                    "current_streak": p.current_streak,
                    "longest_streak": p.longest_streak,
                    "total_days_claimed": p.total_days_claimed,
                    "user": _user_summary(p.user),
                }
                for p in top_rows.scalars().all()
            ],
            "weeks_distribution": {weeks: count for weeks, count in weeks_rows.all()},
            "period_days": days,
        }
