from __future__ import annotations

from typing import Optional

from ..config import settings
from ..models.common import round_half_up
from ..models.costs import CostStructure
from ..models.demand import DemandSeries
from ..models.pricing import PricingRecommendation
from .cost_structure import one_time_total, total_for_series


def horizon_total_cost(structure: CostStructure, years: Optional[int] = None) -> float:
    """Recurring costs for every year of the horizon plus one-time costs counted once."""
    years = settings.horizon_years if years is None else years
    annual = total_for_series(structure.fixed_costs) + total_for_series(structure.variable_costs)
    return annual * years + one_time_total(structure.one_time_costs)


def horizon_total_demand(demand: DemandSeries, years: Optional[int] = None) -> float:
    return demand.total(years)


def recommend_prices(
    total_cost: float,
    total_demand: float,
    target_margin_ratio: float = 0.9,
    conservative_margin_ratio: float = 1.1,
) -> PricingRecommendation:
    """Derive break-even, target and conservative unit prices.

    The ratios are divisors of the break-even price, so the target price
    (``/ 0.9``, 110% cost recovery) sits above break-even and the conservative
    price (``/ 1.1``, 90% cost recovery) sits below it.
    """
    if not total_demand:
        return PricingRecommendation(breakeven=0.0, target=0.0, conservative=0.0, total_cost=total_cost, total_demand=total_demand)
    breakeven = total_cost / total_demand
    target = breakeven / target_margin_ratio if target_margin_ratio else 0.0
    conservative = breakeven / conservative_margin_ratio if conservative_margin_ratio else 0.0
    return PricingRecommendation(
        breakeven=round_half_up(breakeven, 2),
        target=round_half_up(target, 2),
        conservative=round_half_up(conservative, 2),
        total_cost=total_cost,
        total_demand=total_demand,
    )
