"""FastAPI application entry point.

JoyTask API - daily login rewards for the mobile app and admin dashboard.
"""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from joytask import __version__
from joytask.api import admin_daily_login, daily_login
from joytask.config import get_settings
from joytask.logging_config import bind_context, clear_context, configure_logging, get_logger
from joytask.utils.db import close_db, init_db
from joytask.utils.errors import ErrorCode, JoyTaskError
from joytask.utils.json_utils import ORJSONResponse

settings = get_settings()

configure_logging(
    log_level=settings.log_level,
    json_logs=settings.app_env == "production",
    app_env=settings.app_env,
)
logger = get_logger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting application...")
    try:
        await init_db()
        logger.info("Database connection established")
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    yield

    logger.info("Shutting down application...")
    try:
        await close_db()
        logger.info("Database connection closed")
    except Exception as e:
        logger.error(f"Shutdown error: {e}")


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="JoyTask API",
    version=__version__,
    description="Daily login rewards for the JoyTask app and admin dashboard",
    docs_url="/docs" if settings.app_debug else None,
    redoc_url="/redoc" if settings.app_debug else None,
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
)


# =============================================================================
# Middleware
# =============================================================================


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware to add X-Request-ID header to all requests and responses."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = datetime.now(timezone.utc)

        clear_context()
        bind_context(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=round(duration, 3),
        )
        return response


app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)


# =============================================================================
# Error Handlers
# =============================================================================

ERROR_STATUS_CODES = {
    ErrorCode.ALREADY_CLAIMED.value: status.HTTP_409_CONFLICT,
    ErrorCode.USER_NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ErrorCode.CLAIM_NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
}


def get_request_id(request: Request) -> str:
    """Get request ID from request state or headers."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("X-Request-ID", str(uuid.uuid4()))


def create_error_response(
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    """Create standardized error response."""
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        },
        "traceId": trace_id,
    }


@app.exception_handler(JoyTaskError)
async def joytask_error_handler(request: Request, exc: JoyTaskError) -> ORJSONResponse:
    """Handle service errors."""
    trace_id = get_request_id(request)
    status_code = ERROR_STATUS_CODES.get(exc.code, status.HTTP_400_BAD_REQUEST)

    logger.warning("service_error", code=exc.code, message=exc.message, trace_id=trace_id)

    return ORJSONResponse(
        status_code=status_code,
        content=create_error_response(
            code=exc.code,
            message=exc.message,
            details=exc.details,
            trace_id=trace_id,
        ),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> ORJSONResponse:
    """Handle HTTP exceptions."""
    trace_id = get_request_id(request)

    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = {**exc.detail, "traceId": trace_id}
    else:
        content = create_error_response(
            code="HTTP_ERROR",
            message=str(exc.detail),
            trace_id=trace_id,
        )

    return ORJSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Handle unexpected exceptions."""
    trace_id = get_request_id(request)

    logger.error(
        "unexpected_error",
        error_type=type(exc).__name__,
        error_message=str(exc),
        trace_id=trace_id,
        exc_info=True,
    )

    message = "Internal server error"
    if settings.app_debug:
        message = f"{type(exc).__name__}: {exc}"

    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=create_error_response(
            code=ErrorCode.INTERNAL_ERROR.value,
            message=message,
            trace_id=trace_id,
        ),
    )


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "joytask-api",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# =============================================================================
# Routers
# =============================================================================

app.include_router(daily_login.router, prefix="/api/v1")
app.include_router(admin_daily_login.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "joytask.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
    )
