from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import CapexMode, coerce_amount


class PricingAssumptions(BaseModel):
    corporate_overhead_rate_pct: float = Field(4.0, description="Percentage of all non-overhead costs")
    inflation_rate_pct: float = Field(3.0, description="Used to extrapolate year-1 totals across later years")
    target_margin_ratio: float = Field(0.9, description="Divisor applied to break-even; 0.9 gives a 110% TCRR price")
    conservative_margin_ratio: float = Field(1.1, description="Divisor applied to break-even; 1.1 gives a 90% TCRR price")
    selected_unit_price: float = Field(0.0, description="Price used in the P&L; 0 falls back to the target price")
    marketing_cost_pct: Optional[float] = None
    amortization_window_months: Optional[int] = None
    capex_mode: CapexMode = CapexMode.AMORTIZED

    @field_validator(
        "corporate_overhead_rate_pct",
        "inflation_rate_pct",
        "selected_unit_price",
        mode="before",
    )
    @classmethod
    def _numeric(cls, value):
        return coerce_amount(value)


class PricingRecommendation(BaseModel):
    breakeven: float
    target: float
    conservative: float
    total_cost: float
    total_demand: float
