"""Service layer."""

from joytask.services.admin_daily_login import AdminDailyLoginService, ClaimFilters
from joytask.services.daily_login import (
    ClaimResolution,
    DailyLoginService,
    apply_claim,
    next_day_in_cycle,
    points_for_day,
    resolve_claim,
)

__all__ = [
    "AdminDailyLoginService",
    "ClaimFilters",
    "ClaimResolution",
    "DailyLoginService",
    "apply_claim",
    "next_day_in_cycle",
    "points_for_day",
    "resolve_claim",
]
