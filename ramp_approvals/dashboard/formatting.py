import math
from datetime import date, datetime, timedelta, UTC
from decimal import Decimal, ROUND_HALF_UP

from ..services.aggregator import UNDATED, parse_submitted

OVERDUE_AFTER_DAYS = 7
HIGH_AMOUNT = Decimal("100000")


def format_currency(amount: Decimal | float | int) -> str:
    """Whole US dollars with thousands separators, e.g. $25,000"""
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.0f}"


def _short_date(value: date) -> str:
    return f"{value:%b} {value.day}"


def format_date(value: str | None) -> str:
    """e.g. Jan 8, 2024; blank when the date is missing or unparseable"""
    if not value:
        return ""
    parsed = parse_submitted(value)
    if parsed == UNDATED:
        return ""
    return f"{_short_date(parsed)}, {parsed.year}"


def days_pending(submitted: str | None, now: datetime | None = None) -> int:
    """Whole days between submission and now, rounded up"""
    if not submitted:
        return 0
    parsed = parse_submitted(submitted)
    if parsed == UNDATED:
        return 0
    now = now or datetime.now(UTC)
    elapsed = abs((now - parsed).total_seconds())
    return math.ceil(elapsed / 86400)


def is_overdue(days: int) -> bool:
    return days > OVERDUE_AFTER_DAYS


def is_high_amount(amount: Decimal) -> bool:
    return amount > HIGH_AMOUNT


def week_range_label(today: date | None = None) -> str:
    """Monday-to-Sunday label for the week containing ``today``, e.g. Jan 8 - Jan 14, 2024"""
    today = today or date.today()
    monday = today - timedelta(days=today.weekday())
    sunday = monday + timedelta(days=6)
    return f"{_short_date(monday)} - {_short_date(sunday)}, {today.year}"
