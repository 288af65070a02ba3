from datetime import datetime, timezone
from typing import Optional

def now_utc() -> datetime:
    return datetime.now(timezone.utc)

def iso_timestamp(ts: Optional[datetime] = None) -> str:
    """UTC timestamp in the browser's toISOString() shape: 2024-05-01T12:00:00.000Z"""
    ts = (ts or now_utc()).astimezone(timezone.utc)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")

def compact_date(ts: Optional[datetime] = None) -> str:
    """UTC date as YYYYMMDD (used in generated marker ids)."""
    return (ts or now_utc()).astimezone(timezone.utc).strftime("%Y%m%d")

def parse_iso_datetime(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 date or date-time. Returns None if it is not one."""
    if not isinstance(value, str) or not value.strip():
        return None
    s = value.strip()
    if s[-1] in ("Z", "z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None
