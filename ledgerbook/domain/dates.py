"""
Date-range resolution for report requests.

Named presets resolve against `today`; every range is closed, with the
end at the last millisecond of its day.
"""

import calendar
from datetime import date, datetime

from ledgerbook.core.exceptions import InvalidInputError

from .value_objects import DateRange

THIS_MONTH = "thisMonth"
LAST_MONTH = "lastMonth"
THIS_QUARTER = "thisQuarter"
THIS_YEAR = "thisYear"
FINANCIAL_YEAR = "financialYear"
CUSTOM = "custom"

PRESETS = (THIS_MONTH, LAST_MONTH, THIS_QUARTER, THIS_YEAR, FINANCIAL_YEAR, CUSTOM)


def parse_day(value: str | date | None, field_name: str) -> date | None:
    """Parse an ISO date or datetime string; None passes through."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(value.strip()).date()
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid {field_name}: {value!r}")


def month_range(year: int, month: int) -> DateRange:
    last = calendar.monthrange(year, month)[1]
    return DateRange.for_days(date(year, month, 1), date(year, month, last))


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def financial_year_range(today: date, fy_start_month: int = 4) -> DateRange:
    """The financial year containing `today`."""
    start_year = today.year if today.month >= fy_start_month else today.year - 1
    end_year, end_month = _shift_month(start_year, fy_start_month, 11)
    return DateRange.for_days(
        date(start_year, fy_start_month, 1),
        date(end_year, end_month, calendar.monthrange(end_year, end_month)[1]),
    )


def financial_years(today: date, years_back: int = 5, fy_start_month: int = 4) -> list[dict]:
    """Recent financial years, newest first, for report pickers."""
    current = financial_year_range(today, fy_start_month)
    years = []
    for offset in range(years_back):
        start_year = current.first_day.year - offset
        fy = financial_year_range(date(start_year, fy_start_month, 1), fy_start_month)
        years.append({
            "value": start_year,
            "label": f"FY {start_year}-{str(fy.last_day.year)[-2:]}",
            "startDate": fy.start_date,
            "endDate": fy.end_date,
        })
    return years


def resolve_date_range(
    preset: str | None = None,
    custom_start: str | date | None = None,
    custom_end: str | date | None = None,
    start_date: str | date | None = None,
    end_date: str | date | None = None,
    today: date | None = None,
    fy_start_month: int = 4,
) -> DateRange:
    """
    Resolve report query parameters to a closed DateRange.

    A preset wins over explicit start/end; with neither, the current
    month is used. Unknown presets also fall back to the current month.

    Raises:
        InvalidInputError: a date does not parse or start is after end
    """
    today = today or date.today()

    if not preset:
        first = parse_day(start_date, "startDate")
        last = parse_day(end_date, "endDate")
        if first is not None and last is not None:
            return _checked(first, last)
        preset = THIS_MONTH

    if preset == LAST_MONTH:
        year, month = _shift_month(today.year, today.month, -1)
        return month_range(year, month)

    if preset == THIS_QUARTER:
        quarter_month = (today.month - 1) // 3 * 3 + 1
        end_year, end_month = _shift_month(today.year, quarter_month, 2)
        return DateRange.for_days(
            date(today.year, quarter_month, 1),
            date(end_year, end_month, calendar.monthrange(end_year, end_month)[1]),
        )

    if preset == THIS_YEAR:
        return DateRange.for_days(date(today.year, 1, 1), date(today.year, 12, 31))

    if preset == FINANCIAL_YEAR:
        return financial_year_range(today, fy_start_month)

    if preset == CUSTOM:
        first = parse_day(custom_start, "customStart") or date(today.year, 1, 1)
        last = parse_day(custom_end, "customEnd") or today
        return _checked(first, last)

    return month_range(today.year, today.month)


def _checked(first: date, last: date) -> DateRange:
    if first > last:
        raise InvalidInputError(f"Start date {first} is after end date {last}")
    return DateRange.for_days(first, last)
