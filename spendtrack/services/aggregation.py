"""Spending aggregations over in-memory expense records.

Every function here is pure: it reads ``amount``, ``date`` and ``category`` from
the records it is given, never mutates them and never touches the database or
the clock. Callers pass ``now`` explicitly (a ``datetime.date``), which keeps the
results stable across timezones and easy to test.

Amounts are summed with their own type, so ``Decimal`` rows from the database
produce ``Decimal`` totals and plain numbers produce plain numbers. An empty
input always yields ``0``.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Iterator, List, NamedTuple, Optional

from ..models.category import Category

WARNING_PERCENT = 80
EXCEEDED_PERCENT = 100


class CategoryTotal(NamedTuple):
    category: Category
    amount: object
    share: float  # percent of the ranked total


class TrendDelta(NamedTuple):
    current_total: object
    previous_total: object
    percent_change: float


class DailyTotal(NamedTuple):
    date: date
    amount: object


class MonthlyTotal(NamedTuple):
    year: int
    month: int
    amount: object

    @property
    def label(self) -> str:
        return f"{calendar.month_abbr[self.month]} {self.year}"


class SpendingProjection(NamedTuple):
    month_total: object
    average_daily: float
    projected_month: float
    days_remaining: int


class BudgetStatus(Enum):
    NO_BUDGET_SET = "No Budget Set"
    WITHIN_BUDGET = "Within Budget"
    BUDGET_WARNING = "Budget Warning"
    BUDGET_EXCEEDED = "Budget Exceeded"


def month_bounds(now: date):
    """First and last calendar day of ``now``'s month."""
    last_day = calendar.monthrange(now.year, now.month)[1]
    return now.replace(day=1), now.replace(day=last_day)


def _total(records) -> object:
    return sum((r.amount for r in records), 0)


def period_total(records: Iterable, window_start: date, window_end: date):
    """Sum of amounts dated within ``[window_start, window_end]``, inclusive."""
    return _total(r for r in records if window_start <= r.date <= window_end)


def current_month_total(records: Iterable, now: date):
    start, end = month_bounds(now)
    return period_total(records, start, end)


def category_ranking(records: Iterable) -> List[CategoryTotal]:
    """Group by normalized category and order by summed amount, largest first.

    Ties keep the order in which categories were first seen. Returns an empty
    list for empty input.
    """
    totals = {}
    for r in records:
        key = Category.normalize(r.category)
        totals[key] = totals.get(key, 0) + r.amount

    # sorted() is stable, also with reverse=True
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    grand_total = sum(totals.values(), 0)
    return [
        CategoryTotal(category, amount, float(amount) / float(grand_total) * 100 if grand_total > 0 else 0.0)
        for category, amount in ranked
    ]


def top_category(records: Iterable) -> Optional[CategoryTotal]:
    ranking = category_ranking(records)
    return ranking[0] if ranking else None


def trend_delta(records: Iterable, now: date, window_days: int = 30) -> TrendDelta:
    """Compare the last ``window_days`` days (ending at ``now``) with the block before it."""
    records = list(records)
    current_start = now - timedelta(days=window_days - 1)
    previous_end = current_start - timedelta(days=1)
    previous_start = previous_end - timedelta(days=window_days - 1)

    current = period_total(records, current_start, now)
    previous = period_total(records, previous_start, previous_end)
    if previous > 0:
        change = float((current - previous) / previous * 100)
    else:
        change = 0.0
    return TrendDelta(current, previous, change)


class DailySeries:
    """Fixed-length per-day totals ending at ``now``, oldest first.

    Iterating is lazy and can be repeated; each pass yields the same ``days``
    entries, with 0 for days that have no records.
    """

    def __init__(self, records: Iterable, now: date, days: int = 7):
        self._records = tuple(records)
        self.now = now
        self.days = max(int(days), 0)

    def __len__(self):
        return self.days

    def __iter__(self) -> Iterator[DailyTotal]:
        start = self.now - timedelta(days=self.days - 1)
        by_day = {}
        for r in self._records:
            if start <= r.date <= self.now:
                by_day[r.date] = by_day.get(r.date, 0) + r.amount
        for offset in range(self.days):
            day = start + timedelta(days=offset)
            yield DailyTotal(day, by_day.get(day, 0))

    def __repr__(self):
        return f"<DailySeries {self.days} days to {self.now}>"


def daily_series(records: Iterable, now: date, days: int = 7) -> DailySeries:
    return DailySeries(records, now, days)


def monthly_series(records: Iterable, now: date, months: int = 6) -> List[MonthlyTotal]:
    records = list(records)
    periods = []
    year, month = now.year, now.month
    for _ in range(months):
        periods.append((year, month))
        year, month = (year, month - 1) if month > 1 else (year - 1, 12)

    series = []
    for year, month in reversed(periods):
        start, end = month_bounds(date(year, month, 1))
        series.append(MonthlyTotal(year, month, period_total(records, start, end)))
    return series


def spending_projection(records: Iterable, now: date) -> SpendingProjection:
    month_total = current_month_total(records, now)
    days_in_month = calendar.monthrange(now.year, now.month)[1]
    average_daily = float(month_total) / now.day
    return SpendingProjection(
        month_total=month_total,
        average_daily=average_daily,
        projected_month=average_daily * days_in_month,
        days_remaining=days_in_month - now.day,
    )


def recent_expenses(records: Iterable, limit: int = 5) -> list:
    ordered = sorted(
        records,
        key=lambda r: (r.date, getattr(r, "created_at", None) or datetime.min),
        reverse=True,
    )
    return ordered[:limit]


def budget_status(current_total, limit=None) -> BudgetStatus:
    """Classify spend against a monthly limit.

    Ratios are compared as ``total * 100`` against ``limit * percent`` so that
    exactly 80% is a warning and exactly 100% is exceeded for int, float and
    ``Decimal`` inputs alike.
    """
    if limit is None:
        return BudgetStatus.NO_BUDGET_SET
    scaled = current_total * 100
    if scaled >= limit * EXCEEDED_PERCENT:
        return BudgetStatus.BUDGET_EXCEEDED
    if scaled >= limit * WARNING_PERCENT:
        return BudgetStatus.BUDGET_WARNING
    return BudgetStatus.WITHIN_BUDGET


def budget_remaining(current_total, limit=None):
    if limit is None:
        return None
    return limit - current_total
