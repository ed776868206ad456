from __future__ import annotations

from typing import Any, List, Optional

from ..models.common import coerce_amount, round_half_up
from ..models.demand import HORIZON_YEARS, DemandSeries


def apply_growth(year1_demand: Any, growth_rate_pct: Any, years: int = HORIZON_YEARS) -> Optional[List[float]]:
    """Compound ``year1_demand`` forward; ``None`` when base or rate is zero."""
    base = coerce_amount(year1_demand)
    rate = coerce_amount(growth_rate_pct)
    if base == 0 or rate == 0:
        return None
    series = [base]
    for _ in range(1, years):
        series.append(round_half_up(series[-1] * (1 + rate / 100)))
    return series


def apply_growth_to(demand: DemandSeries, growth_rate_pct: Any) -> DemandSeries:
    series = apply_growth(demand.values[0], growth_rate_pct, len(demand.values))
    if series is None:
        return demand
    return DemandSeries(values=series)


def set_year_demand(demand: DemandSeries, year_index: int, value: Any) -> DemandSeries:
    if not 0 <= year_index < len(demand.values):
        return demand
    values = list(demand.values)
    values[year_index] = coerce_amount(value)
    return DemandSeries(values=values)
