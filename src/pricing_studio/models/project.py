from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import ProductCategory, coerce_amount
from .costs import CostIncreaseAssumption, CostStructure, EmployeeInputs
from .demand import DemandSeries
from .pricing import PricingAssumptions


class ProjectSnapshot(BaseModel):
    id: Optional[str] = None
    name: str = ""
    category: Optional[ProductCategory] = None
    description: Optional[str] = None
    target_market: Optional[str] = None
    costs: CostStructure = Field(default_factory=CostStructure)
    employees: EmployeeInputs = Field(default_factory=EmployeeInputs)
    pricing: PricingAssumptions = Field(default_factory=PricingAssumptions)
    cost_increase_assumptions: List[CostIncreaseAssumption] = Field(default_factory=list)
    initial_users: int = 100
    growth_rate: float = 15.0
    churn_rate: float = 5.0
    market_size: int = 50000
    product_demand: List[float] = Field(default_factory=lambda: DemandSeries().values)
    start_date: date = Field(default_factory=date.today, description="First day of projection year 1")
    initialized: bool = Field(False, description="Set once catalog defaults have been merged in")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("product_demand", mode="before")
    @classmethod
    def _five_year_demand(cls, value):
        return DemandSeries(values=value).values

    @field_validator("growth_rate", "churn_rate", mode="before")
    @classmethod
    def _numeric(cls, value):
        return coerce_amount(value)

    def demand(self) -> DemandSeries:
        return DemandSeries(values=self.product_demand)
