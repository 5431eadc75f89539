"""User model.

Accounts are owned by the identity provider; rows here let reward records
reference a user and let the API reject unknown or inactive accounts.
"""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from joytask.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from joytask.models.daily_login import DailyLoginClaim, DailyLoginProgress


class UserStatus(str, Enum):
    """User account status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    DELETED = "deleted"


class UserRole(str, Enum):
    """Dashboard role."""

    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


ADMIN_ROLES = frozenset({UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value})


class User(Base, UUIDMixin, TimestampMixin):
    """User account model."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        default=UserRole.USER.value,
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=UserStatus.ACTIVE.value,
        nullable=False,
    )

    daily_login_progress: Mapped["DailyLoginProgress | None"] = relationship(
        "DailyLoginProgress",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )
    daily_login_claims: Mapped[list["DailyLoginClaim"]] = relationship(
        "DailyLoginClaim",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="desc(DailyLoginClaim.claim_date)",
    )

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def __repr__(self) -> str:
        return f"<User {self.email}>"
