"""
UTC timestamp utilities (stdlib-only).

Batch responses, sidecars and archive slugs all need timestamps.  Keeping
them in one place means one clock to patch in tests and one format.

Features:
    - **utc_now():** Timezone-aware UTC datetime
    - **to_iso8601() / from_iso8601():** Safe serialization round-trip
    - **slug_stamp():** Sortable, filename-safe stamp with microseconds

Tags:
    timestamps, utc, datetime, slotrun, stdlib-only
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string (seconds precision)."""
    if dt is None:
        return None
    return dt.isoformat(timespec="seconds")


def from_iso8601(s: str | None) -> datetime | None:
    """Parse ISO 8601 string to datetime."""
    if s is None:
        return None
    return datetime.fromisoformat(s)


def slug_stamp(dt: datetime) -> str:
    """Render ``dt`` as ``YYYYmmdd_HHMMSS_ffffff`` for use inside a slug."""
    return dt.strftime("%Y%m%d_%H%M%S_%f")
