from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from ..config import MONTHS_PER_YEAR, settings
from ..models.common import round_half_up
from ..models.costs import CostIncreaseAssumption
from ..models.demand import DemandSeries
from ..models.pricing import PricingRecommendation
from ..models.results import ProfitAndLossStatement, ProfitAndLossTotals, ProfitAndLossYear, SummaryKpis


logger = logging.getLogger(__name__)


def _money(value: float) -> float:
    return round_half_up(value, 2)


def _per_year(value: float | Sequence[float], years: int) -> List[float]:
    if isinstance(value, (int, float)):
        return [float(value)] * years
    values = list(value)[:years]
    return values + [0.0] * (years - len(values))


def escalate_costs(
    annual_fixed: float,
    annual_variable: float,
    assumptions: Iterable[CostIncreaseAssumption],
    years: Optional[int] = None,
) -> Tuple[List[float], List[float]]:
    """Compound year-over-year cost increases onto the year-1 totals.

    An assumption for year ``y`` raises that year's cost over year ``y - 1``;
    years without an assumption carry the previous year's cost forward.
    """
    years = settings.horizon_years if years is None else years
    by_year = {assumption.year: assumption for assumption in assumptions}
    fixed = [annual_fixed]
    variable = [annual_variable]
    for year in range(2, years + 1):
        assumption = by_year.get(year)
        fixed_pct = assumption.fixed_increase_pct if assumption else 0.0
        variable_pct = assumption.variable_increase_pct if assumption else 0.0
        fixed.append(fixed[-1] * (1 + fixed_pct / 100))
        variable.append(variable[-1] * (1 + variable_pct / 100))
    return fixed[:years], variable[:years]


def extrapolate_with_inflation(year1_total: float, inflation_rate_pct: float, years: Optional[int] = None) -> List[float]:
    years = settings.horizon_years if years is None else years
    multiplier = 1 + inflation_rate_pct / 100
    return [year1_total * multiplier ** index for index in range(years)]


def project_profit_and_loss(
    unit_price: float,
    demand: DemandSeries,
    fixed_costs: float | Sequence[float],
    variable_costs: float | Sequence[float],
    depreciation: Sequence[float],
    start_date: Optional[date] = None,
    years: Optional[int] = None,
) -> ProfitAndLossStatement:
    """Year-by-year P&L over ``years`` (defaults to the length of ``demand``)."""
    years = len(demand.values) if years is None else years
    demand_by_year = demand.over(years)
    start_date = start_date or date.today()
    fixed_by_year = _per_year(fixed_costs, years)
    variable_by_year = _per_year(variable_costs, years)
    depreciation_by_year = _per_year(depreciation, years)

    rows: List[ProfitAndLossYear] = []
    for index in range(years):
        revenue = demand_by_year[index] * unit_price
        gross_profit = revenue - fixed_by_year[index] - variable_by_year[index] - depreciation_by_year[index]
        margin = (gross_profit / revenue) * 100 if revenue else 0.0
        rows.append(
            ProfitAndLossYear(
                year=index + 1,
                period_start=start_date + relativedelta(years=index),
                demand=demand_by_year[index],
                revenue=_money(revenue),
                fixed_costs=_money(fixed_by_year[index]),
                variable_costs=_money(variable_by_year[index]),
                depreciation=_money(depreciation_by_year[index]),
                gross_profit=_money(gross_profit),
                profit_margin_pct=round_half_up(margin, 2),
            )
        )

    totals = ProfitAndLossTotals(
        demand=sum(row.demand for row in rows),
        revenue=_money(sum(row.revenue for row in rows)),
        fixed_costs=_money(sum(row.fixed_costs for row in rows)),
        variable_costs=_money(sum(row.variable_costs for row in rows)),
        depreciation=_money(sum(row.depreciation for row in rows)),
        gross_profit=_money(sum(row.gross_profit for row in rows)),
    )
    return ProfitAndLossStatement(unit_price=unit_price, years=rows, totals=totals)


def compute_kpis(
    pricing: PricingRecommendation,
    annual_fixed: float,
    marketing_cost_pct: Optional[float] = None,
    cac_multiplier: Optional[float] = None,
    retention_years: Optional[float] = None,
    payback_epsilon: Optional[float] = None,
) -> SummaryKpis:
    marketing_cost_pct = settings.default_marketing_cost_pct if marketing_cost_pct is None else marketing_cost_pct
    cac_multiplier = settings.cac_multiplier if cac_multiplier is None else cac_multiplier
    retention_years = settings.retention_years if retention_years is None else retention_years
    payback_epsilon = settings.payback_epsilon if payback_epsilon is None else payback_epsilon

    breakeven = pricing.breakeven
    cac = breakeven * (marketing_cost_pct / 100) * cac_multiplier
    ltv = pricing.target * MONTHS_PER_YEAR * retention_years

    margin = pricing.target - breakeven
    payback: Optional[float] = None
    if abs(margin) > payback_epsilon:
        payback = cac / margin
    else:
        logger.debug("Payback period undefined: target price equals break-even")

    break_even_users: Optional[float] = None
    if breakeven:
        break_even_users = annual_fixed / (breakeven * MONTHS_PER_YEAR)

    return SummaryKpis(cac=cac, ltv=ltv, payback_period_months=payback, break_even_users=break_even_users)
