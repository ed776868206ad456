from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from .common import CapexMode
from .costs import CostSummary
from .pricing import PricingRecommendation


class CapexSchedule(BaseModel):
    mode: CapexMode
    window_months: int
    cash_flow_monthly: List[float]
    amortized_monthly: List[float]
    depreciation_by_year: List[float]
    total_capex: float
    unamortized_remainder: float


class ProfitAndLossYear(BaseModel):
    year: int
    period_start: date
    demand: float
    revenue: float
    fixed_costs: float
    variable_costs: float
    depreciation: float
    gross_profit: float
    profit_margin_pct: float


class ProfitAndLossTotals(BaseModel):
    demand: float
    revenue: float
    fixed_costs: float
    variable_costs: float
    depreciation: float
    gross_profit: float


class ProfitAndLossStatement(BaseModel):
    unit_price: float
    years: List[ProfitAndLossYear]
    totals: ProfitAndLossTotals


class SummaryKpis(BaseModel):
    cac: float
    ltv: float
    payback_period_months: Optional[float] = None
    break_even_users: Optional[float] = None


class ProjectResult(BaseModel):
    project_id: Optional[str] = None
    costs: CostSummary
    overhead_monthly: List[float]
    capex: CapexSchedule
    pricing: PricingRecommendation
    profit_and_loss: ProfitAndLossStatement
    kpis: SummaryKpis
    yearly_cost_outlook: List[float]
