# backend/utils/time_utils.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Server-side 'now' as an aware UTC instant."""
    return datetime.now(timezone.utc)


def ensure_aware(value):
    """Treat naive datetimes (SQLite drops tzinfo) as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
