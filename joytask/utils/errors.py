"""Custom exception classes for daily login errors.

Provides structured error handling with error codes and user-friendly messages.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standard error codes."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    FORBIDDEN = "FORBIDDEN"

    # User errors
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Daily login errors
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    CLAIM_NOT_FOUND = "CLAIM_NOT_FOUND"


class JoyTaskError(Exception):
    """Base exception for service errors.

    Attributes:
        code: Error code for programmatic handling
        message: User-friendly error message
        details: Additional error details
        recoverable: Whether the client may retry later
    """

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
    ):
        self.code = code if isinstance(code, str) else code.value
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


class AlreadyClaimedError(JoyTaskError):
    """Raised when the user already has a claim for the current day."""

    def __init__(self, user_id: str, claim_date: date):
        super().__init__(
            code=ErrorCode.ALREADY_CLAIMED,
            message="Daily reward already claimed today. Come back tomorrow!",
            details={"userId": user_id, "claimDate": claim_date.isoformat()},
            recoverable=True,
        )


class UnknownUserError(JoyTaskError):
    """Raised when a claim is attempted for a user that does not exist."""

    def __init__(self, user_id: str):
        super().__init__(
            code=ErrorCode.USER_NOT_FOUND,
            message=f"User not found: {user_id}",
            details={"userId": user_id},
            recoverable=False,
        )


class ClaimNotFoundError(JoyTaskError):
    """Raised when an admin targets a ledger entry that does not exist."""

    def __init__(self, claim_id: int):
        super().__init__(
            code=ErrorCode.CLAIM_NOT_FOUND,
            message=f"Daily login claim not found: {claim_id}",
            details={"claimId": claim_id},
            recoverable=False,
        )
