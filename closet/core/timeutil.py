from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from closet.core.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    # sqlite hands back naive datetimes; everything we store is UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_today(now: datetime | None = None) -> date:
    now = now or utcnow()
    return as_utc(now).astimezone(ZoneInfo(settings.TIMEZONE)).date()


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Half-open UTC range [first day of month, first day of next month)."""
    if not 1 <= month <= 12:
        raise ValueError("invalid_month")
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1
