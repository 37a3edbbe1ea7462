"""시각 유틸리티 — UTC 기준 시각 처리.

Time helpers. Every instant is compared in UTC; some drivers (SQLite) hand
back naive datetimes, which are treated as UTC.
"""

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """현재 UTC 시각 — Current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """naive 시각은 UTC로 간주하고, aware 시각은 UTC로 변환합니다.

    Normalize a datetime to an aware UTC instant.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_date(value: datetime) -> date:
    """UTC 기준 날짜 — Calendar date of the instant in UTC."""
    return as_utc(value).date()
