from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def now_local() -> datetime:
    """Wall-clock time of the machine serving the portal."""
    return datetime.now()


def today_iso() -> str:
    return date.today().isoformat()


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values and a trailing ``Z`` are UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def seconds_since(value: str, now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    return max(int((now - parse_timestamp(value)).total_seconds()), 0)


def format_clock(value: datetime) -> str:
    return value.strftime("%H:%M:%S")


def format_duration(seconds: int) -> str:
    hours, rest = divmod(max(int(seconds), 0), 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
