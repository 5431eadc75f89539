"""Daily login reward API (player-facing)."""

from fastapi import APIRouter, Query

from joytask.api.deps import CurrentUser, DbSession
from joytask.schemas.common import ErrorResponse
from joytask.schemas.daily_login import (
    ClaimResultResponse,
    DailyLoginClaimResponse,
    DailyLoginHistoryResponse,
    DailyLoginProgressResponse,
    DailyLoginStatusResponse,
)
from joytask.services.daily_login import DailyLoginService

router = APIRouter(prefix="/daily-login", tags=["Daily Login"])


@router.post(
    "/claim",
    response_model=ClaimResultResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Account inactive"},
        409: {"model": ErrorResponse, "description": "Already claimed today"},
    },
)
async def claim_daily_reward(user: CurrentUser, db: DbSession):
    """Claim today's reward.

    - Once per calendar day (server timezone)
    - Rewards by cycle day: 10, 15, 20, 25, 30, 40, 100 (jackpot on day 7)
    - Missing a day resets the cycle and streak
    """
    service = DailyLoginService(db)
    claim = await service.claim(user.id)
    progress = await service.get_progress(user.id)
    return ClaimResultResponse(
        claim=DailyLoginClaimResponse.model_validate(claim),
        progress=DailyLoginProgressResponse.model_validate(progress),
    )


@router.get(
    "/status",
    response_model=DailyLoginStatusResponse,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def get_daily_login_status(user: CurrentUser, db: DbSession):
    """Whether today's reward is available, the next reward and streak counters."""
    service = DailyLoginService(db)
    status = await service.get_status(user.id)

    progress = status.pop("progress")
    if progress is None:
        progress_response = DailyLoginProgressResponse(user_id=user.id)
    else:
        progress_response = DailyLoginProgressResponse.model_validate(progress)

    return DailyLoginStatusResponse(progress=progress_response, **status)


@router.get(
    "/history",
    response_model=DailyLoginHistoryResponse,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def get_daily_login_history(
    user: CurrentUser,
    db: DbSession,
    limit: int = Query(30, ge=1, le=100),
):
    """Recent claims, newest first."""
    service = DailyLoginService(db)
    claims = await service.get_history(user.id, limit)
    return DailyLoginHistoryResponse(
        items=[DailyLoginClaimResponse.model_validate(c) for c in claims]
    )
