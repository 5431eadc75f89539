"""Daily login request/response schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from joytask.schemas.common import BaseSchema, PaginatedResponse


class UserSummary(BaseSchema):
    id: str
    name: str
    email: str


class DailyLoginClaimResponse(BaseSchema):
    """One ledger entry."""

    id: int
    user_id: str
    claim_date: date
    day_in_cycle: int
    points_earned: int
    bonus_reward_given: bool
    bonus_costume_id: str | None = None
    claimed_at: datetime
    is_jackpot_day: bool = False


class DailyLoginProgressResponse(BaseSchema):
    user_id: str
    current_day_in_cycle: int = 1
    weeks_completed: int = 0
    total_days_claimed: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_claim_date: date | None = None


class ClaimResultResponse(BaseModel):
    """Result of a successful claim."""

    claim: DailyLoginClaimResponse
    progress: DailyLoginProgressResponse


class NextClaim(BaseModel):
    day_in_cycle: int
    points: int
    is_bonus_day: bool


class DailyLoginStatusResponse(BaseModel):
    today: date
    can_claim: bool
    has_claimed_today: bool
    streak_active: bool
    next_claim: NextClaim
    progress: DailyLoginProgressResponse
    rewards: dict[int, int]


class DailyLoginHistoryResponse(BaseModel):
    items: list[DailyLoginClaimResponse]


# ============================================================================
# Admin
# ============================================================================


class AdminDailyLoginClaimResponse(DailyLoginClaimResponse):
    created_at: datetime
    updated_at: datetime
    user: UserSummary | None = None


class AdminDailyLoginProgressResponse(DailyLoginProgressResponse):
    id: int
    created_at: datetime
    updated_at: datetime
    user: UserSummary | None = None


AdminClaimListResponse = PaginatedResponse[AdminDailyLoginClaimResponse]
AdminProgressListResponse = PaginatedResponse[AdminDailyLoginProgressResponse]


class TopStreakHolder(BaseSchema):
    user_id: str
    current_streak: int
    longest_streak: int
    total_days_claimed: int
    user: UserSummary | None = None


class DailyLoginStatsResponse(BaseModel):
    total_claims: int
    recent_claims: int
    total_points_distributed: int
    recent_points_distributed: int
    total_users_with_progress: int
    active_users_recent: int
    claimed_today: int
    avg_current_streak: float
    max_streak: int
    avg_longest_streak: float
    day_distribution: dict[int, int]
    jackpot_claims: int
    daily_claim_counts: dict[str, int]
    top_streak_holders: list[TopStreakHolder]
    weeks_distribution: dict[int, int]
    period_days: int = Field(..., ge=1)
