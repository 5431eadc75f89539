"""Server clock helpers.

The server clock in the configured application timezone is the only source
of "today" for reward claims. Client-supplied timestamps are never consulted.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from joytask.config import get_settings


def get_app_timezone() -> ZoneInfo:
    """Return the configured application timezone."""
    return ZoneInfo(get_settings().app_timezone)


def utc_now() -> datetime:
    """Current server time (timezone-aware, UTC)."""
    return datetime.now(timezone.utc)


def local_date(now: datetime | None = None, tz: ZoneInfo | None = None) -> date:
    """Calendar date of ``now`` in the application timezone.

    Naive datetimes are treated as UTC.
    """
    if now is None:
        now = utc_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz or get_app_timezone()).date()
