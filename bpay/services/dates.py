"""Calendar arithmetic for billing months and due dates."""
import calendar
from datetime import date, datetime, time

from bpay.config import settings


def now_local() -> datetime:
    """Current wall-clock time in the billing timezone, as a naive datetime."""
    return datetime.now(settings.tz).replace(tzinfo=None)


def to_local_naive(value: datetime) -> datetime:
    """Aware datetimes are converted to the billing timezone; naive ones are taken as local already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(settings.tz).replace(tzinfo=None)


def parse_target_month(target_month: str) -> tuple[int, int]:
    """'2025-02' -> (2025, 2). Callers validate the format beforehand."""
    year, month = target_month.split("-")
    return int(year), int(month)


def format_month(year: int, month: int) -> str:
    return f"{year}-{month:02d}"


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_window(year: int, month: int) -> tuple[datetime, datetime]:
    """First instant of day 1 through 23:59:59 of the last day."""
    start = datetime(year, month, 1)
    end = datetime.combine(date(year, month, last_day_of_month(year, month)), time(23, 59, 59))
    return start, end


def due_date_for(due_day: int, year: int, month: int) -> datetime:
    """Due date at local midnight, clamping due_day to the month's length (31 in April -> 30)."""
    if not 1 <= due_day <= 31:
        raise ValueError(f"due_day out of range: {due_day}")
    actual_day = min(due_day, last_day_of_month(year, month))
    return datetime(year, month, actual_day)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
