from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .models.common import ProductCategory
from .models.costs import CostIncreaseAssumption, CostStructure, EmployeeInputs
from .models.pricing import PricingAssumptions
from .models.project import ProjectSnapshot
from .models.results import ProjectResult


class ProjectCreateRequest(BaseModel):
    name: str
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
    product_demand: List[float] = Field(default_factory=list)
    start_date: Optional[date] = None


class ProjectUpdateRequest(BaseModel):
    name: Optional[str] = None
    category: Optional[ProductCategory] = None
    description: Optional[str] = None
    target_market: Optional[str] = None
    costs: Optional[CostStructure] = None
    employees: Optional[EmployeeInputs] = None
    pricing: Optional[PricingAssumptions] = None
    cost_increase_assumptions: Optional[List[CostIncreaseAssumption]] = None
    initial_users: Optional[int] = None
    growth_rate: Optional[float] = None
    churn_rate: Optional[float] = None
    market_size: Optional[int] = None
    product_demand: Optional[List[float]] = None
    start_date: Optional[date] = None


class ProjectListResponse(BaseModel):
    projects: List[ProjectSnapshot]


class CostItemEditRequest(BaseModel):
    name: Optional[str] = None
    month_index: Optional[int] = None
    value: Optional[Any] = None
    amount: Optional[Any] = None
    month: Optional[Any] = None


class PasteRequest(BaseModel):
    text: Optional[str] = Field(default=None, description="Clipboard text; rows by newline, cells by tab or comma")
    grid: Optional[List[List[Any]]] = None
    start_column: int = 0
    start_row: int = 0


class GrowthRequest(BaseModel):
    year1_demand: Optional[Any] = None
    growth_rate: Optional[Any] = None


class ProjectRunRequest(BaseModel):
    project_id: Optional[str] = None
    project: Optional[ProjectSnapshot] = None
    apply_cost_increases: bool = False


class ProjectRunResponse(BaseModel):
    project: ProjectSnapshot
    result: ProjectResult
