from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..config import CAPEX_YEAR, MONTHS_PER_YEAR, settings
from ..models.common import CapexMode
from ..models.costs import OneTimeCostItem
from ..models.results import CapexSchedule
from .cost_structure import one_time_total


def _month_index(item: OneTimeCostItem) -> int:
    month = item.month if 1 <= item.month <= MONTHS_PER_YEAR else 1
    return month - 1


def _depreciation_window(item: OneTimeCostItem, window_months: int) -> Tuple[int, int]:
    # 1-based absolute months, inclusive on both ends.
    start = (CAPEX_YEAR - 1) * MONTHS_PER_YEAR + _month_index(item) + 1
    return start, start + window_months - 1


def _overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> int:
    start = max(start_a, start_b)
    end = min(end_a, end_b)
    return end - start + 1 if start <= end else 0


def schedule_cash_flow(items: Iterable[OneTimeCostItem]) -> List[float]:
    schedule = [0.0] * MONTHS_PER_YEAR
    for item in items:
        schedule[_month_index(item)] += item.amount
    return schedule


def schedule_amortized(
    items: Iterable[OneTimeCostItem],
    window_months: Optional[int] = None,
    years: Optional[int] = None,
) -> List[float]:
    window_months = window_months or settings.amortization_window_months
    years = settings.horizon_years if years is None else years
    depreciation = [0.0] * years
    for item in items:
        dep_start, dep_end = _depreciation_window(item, window_months)
        monthly = item.amount / window_months
        for year_index in range(years):
            year_start = year_index * MONTHS_PER_YEAR + 1
            year_end = (year_index + 1) * MONTHS_PER_YEAR
            depreciation[year_index] += _overlap(year_start, year_end, dep_start, dep_end) * monthly
    return depreciation


def amortized_monthly(items: Iterable[OneTimeCostItem], window_months: Optional[int] = None) -> List[float]:
    """Year-1 depreciation per month, each cost starting in the month it is incurred."""
    window_months = window_months or settings.amortization_window_months
    schedule = [0.0] * MONTHS_PER_YEAR
    for item in items:
        dep_start, dep_end = _depreciation_window(item, window_months)
        monthly = item.amount / window_months
        for month in range(1, MONTHS_PER_YEAR + 1):
            if dep_start <= month <= dep_end:
                schedule[month - 1] += monthly
    return schedule


def unamortized_remainder(
    items: Iterable[OneTimeCostItem],
    window_months: Optional[int] = None,
    years: Optional[int] = None,
) -> float:
    items = list(items)
    return one_time_total(items) - sum(schedule_amortized(items, window_months, years))


def depreciation_by_year(
    items: Iterable[OneTimeCostItem],
    mode: CapexMode = CapexMode.AMORTIZED,
    window_months: Optional[int] = None,
    years: Optional[int] = None,
) -> List[float]:
    items = list(items)
    years = settings.horizon_years if years is None else years
    if CapexMode(mode) == CapexMode.CASH_FLOW:
        # Expensed in full in the year incurred.
        return [sum(schedule_cash_flow(items))] + [0.0] * (years - 1)
    return schedule_amortized(items, window_months, years)


def build_capex_schedule(
    items: Iterable[OneTimeCostItem],
    mode: CapexMode = CapexMode.AMORTIZED,
    window_months: Optional[int] = None,
    years: Optional[int] = None,
) -> CapexSchedule:
    items = list(items)
    window_months = window_months or settings.amortization_window_months
    by_year = depreciation_by_year(items, mode, window_months, years)
    total = one_time_total(items)
    return CapexSchedule(
        mode=mode,
        window_months=window_months,
        cash_flow_monthly=schedule_cash_flow(items),
        amortized_monthly=amortized_monthly(items, window_months),
        depreciation_by_year=by_year,
        total_capex=total,
        unamortized_remainder=max(0.0, total - sum(by_year)),
    )
