"""Admin daily login API - view and moderate every user's rewards."""

from datetime import date

from fastapi import APIRouter, Query

from joytask.api.deps import AdminUser, DbSession
from joytask.schemas.common import ErrorResponse, PaginationMeta, SuccessResponse
from joytask.schemas.daily_login import (
    AdminClaimListResponse,
    AdminDailyLoginClaimResponse,
    AdminDailyLoginProgressResponse,
    AdminProgressListResponse,
    DailyLoginStatsResponse,
)
from joytask.services.admin_daily_login import AdminDailyLoginService, ClaimFilters

router = APIRouter(prefix="/admin/daily-logins", tags=["Admin Daily Login"])

ADMIN_ERRORS = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Admin role required"},
}


def _pagination(page: dict) -> PaginationMeta:
    return PaginationMeta(
        page=page["page"],
        page_size=page["page_size"],
        total=page["total"],
        total_pages=page["total_pages"],
    )


@router.get("", response_model=AdminClaimListResponse, responses=ADMIN_ERRORS)
async def list_daily_login_claims(
    admin: AdminUser,
    db: DbSession,
    day_in_cycle: int | None = Query(None, ge=1, le=7),
    user_id: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    bonus_reward_given: bool | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    """All users' claims, newest first. Date range applies when both ends are given."""
    service = AdminDailyLoginService(db)
    result = await service.list_claims(
        ClaimFilters(
            day_in_cycle=day_in_cycle,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            bonus_reward_given=bonus_reward_given,
            search=search,
        ),
        page=page,
        page_size=page_size,
    )
    return AdminClaimListResponse(
        items=[AdminDailyLoginClaimResponse.model_validate(c) for c in result["items"]],
        pagination=_pagination(result),
    )


@router.get("/progress", response_model=AdminProgressListResponse, responses=ADMIN_ERRORS)
async def list_daily_login_progress(
    admin: AdminUser,
    db: DbSession,
    user_id: str | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    """All users' progress records, most recently updated first."""
    service = AdminDailyLoginService(db)
    result = await service.list_progress(
        user_id=user_id,
        search=search,
        page=page,
        page_size=page_size,
    )
    return AdminProgressListResponse(
        items=[AdminDailyLoginProgressResponse.model_validate(p) for p in result["items"]],
        pagination=_pagination(result),
    )


@router.get("/stats", response_model=DailyLoginStatsResponse, responses=ADMIN_ERRORS)
async def get_daily_login_stats(
    admin: AdminUser,
    db: DbSession,
    days: int = Query(30, ge=1, le=365),
):
    """Claim and streak statistics for the dashboard."""
    service = AdminDailyLoginService(db)
    return DailyLoginStatsResponse.model_validate(await service.get_stats(days=days))


@router.delete(
    "/{claim_id}",
    response_model=SuccessResponse,
    responses={
        **ADMIN_ERRORS,
        404: {"model": ErrorResponse, "description": "Claim not found"},
    },
)
async def delete_daily_login_claim(claim_id: int, admin: AdminUser, db: DbSession):
    """Delete a claim. The user's progress is not recalculated."""
    service = AdminDailyLoginService(db)
    await service.delete_claim(claim_id, admin_id=admin.id)
    return SuccessResponse(message="Daily login claim deleted successfully.")
