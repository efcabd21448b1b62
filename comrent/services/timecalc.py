from __future__ import annotations

from datetime import datetime, timedelta, timezone


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """Serialise an aware datetime as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def now_iso() -> str:
    return to_iso(now_utc())


def parse_iso(ts: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp string.
    Naive values are treated as UTC. Returns None if ts is falsy or garbage.
    """
    if not ts:
        return None
    try:
        dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def session_end_time(session_start: str | None, duration_minutes: int | None) -> datetime | None:
    start = parse_iso(session_start)
    if start is None or not duration_minutes:
        return None
    return start + timedelta(minutes=duration_minutes)


def remaining_seconds(end: datetime, now: datetime | None = None) -> int:
    """Whole seconds until ``end`` (never negative)."""
    now = now or now_utc()
    return max(int((end - now).total_seconds()), 0)


def format_hms(total_seconds: int) -> str:
    total_seconds = max(total_seconds, 0)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
