"""API routers."""

from joytask.api.admin_daily_login import router as admin_daily_login_router
from joytask.api.daily_login import router as daily_login_router

__all__ = [
    "admin_daily_login_router",
    "daily_login_router",
]
