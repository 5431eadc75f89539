"""API dependencies for authentication and common utilities."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from joytask.logging_config import bind_context
from joytask.models.user import User, UserStatus
from joytask.utils.db import get_db
from joytask.utils.errors import ErrorCode
from joytask.utils.security import TokenError, verify_access_token

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)


def _auth_error(code: str, message: str, status_code: int = status.HTTP_401_UNAUTHORIZED):
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
                "details": {},
            }
        },
        headers=headers,
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get current user from the identity provider's bearer token.

    Raises:
        HTTPException: If not authenticated, token invalid or account inactive
    """
    if not credentials:
        raise _auth_error("AUTH_REQUIRED", "Authentication required")

    try:
        payload = verify_access_token(credentials.credentials)
    except TokenError as e:
        raise _auth_error(e.code, e.message)

    if not payload:
        raise _auth_error("AUTH_INVALID_TOKEN", "Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise _auth_error("AUTH_INVALID_TOKEN", "Invalid token payload")

    user = await db.get(User, user_id)
    if not user:
        raise _auth_error("AUTH_USER_NOT_FOUND", "User not found")

    if user.status != UserStatus.ACTIVE.value:
        raise _auth_error(
            "AUTH_ACCOUNT_INACTIVE",
            f"Account is {user.status}",
            status_code=status.HTTP_403_FORBIDDEN,
        )

    bind_context(user_id=user.id)
    return user


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Require an admin or super-admin role."""
    if not current_user.is_admin:
        raise _auth_error(
            ErrorCode.FORBIDDEN.value,
            "Admin role required",
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return current_user


# Type aliases for cleaner annotations
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
