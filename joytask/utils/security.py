"""JWT access token utilities.

Tokens are issued by the identity provider; this service verifies them and
reads the user id from the ``sub`` claim. ``create_access_token`` mirrors the
provider's format and is used by tooling and tests.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from joytask.config import get_settings

logger = logging.getLogger(__name__)


class TokenError(Exception):
    """Token validation error with specific code."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


def create_access_token(
    user_id: str,
    additional_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token.

    Args:
        user_id: User ID to encode in token
        additional_claims: Additional claims to include
        expires_delta: Custom expiration time

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + expires_delta,
    }

    if additional_claims:
        payload.update(additional_claims)

    return jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def verify_access_token(token: str) -> dict[str, Any] | None:
    """Verify an access token and return its payload.

    Returns:
        Token payload if valid, None otherwise

    Raises:
        TokenError: If the token has expired
    """
    if not token:
        logger.debug("Access token verification failed: empty token")
        return None

    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True, "require_sub": True, "require_iat": True},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Access token verification failed: token expired")
        raise TokenError("TOKEN_EXPIRED", "Token has expired")
    except jwt.JWTClaimsError as e:
        logger.debug(f"Access token verification failed: invalid claims - {e}")
        return None
    except JWTError as e:
        logger.warning(f"Access token verification failed: {type(e).__name__}")
        return None

    if payload.get("type") != "access":
        logger.debug("Access token verification failed: wrong token type")
        return None

    return payload
