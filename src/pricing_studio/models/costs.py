from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Discriminator, Field, Tag, field_validator

from ..config import MONTHS_PER_YEAR
from .common import coerce_amount, normalize_months


class SystemCostKind(str, Enum):
    TEAM_MEMBERS = "team-members"
    AUGMENTED_RESOURCES = "augmented-resources"
    CORPORATE_OVERHEADS = "corporate-overheads"


SYSTEM_COST_NAMES = {
    SystemCostKind.TEAM_MEMBERS: "Team Members",
    SystemCostKind.AUGMENTED_RESOURCES: "Augmented Resources",
    SystemCostKind.CORPORATE_OVERHEADS: "Corporate Overheads",
}


class RecurringCost(BaseModel):
    id: str
    name: str
    monthly_amounts: List[float] = Field(default_factory=lambda: [0.0] * MONTHS_PER_YEAR, description="Exactly 12 period amounts for year 1")
    is_common: bool = False
    unit: Optional[str] = Field(default=None, description="Display annotation only")
    icon: Optional[str] = None

    @field_validator("monthly_amounts", mode="before")
    @classmethod
    def _twelve_months(cls, value):
        return normalize_months(value)

    def total(self) -> float:
        return sum(self.monthly_amounts)


class UserCostItem(RecurringCost):
    source: Literal["user"] = "user"

    @property
    def is_system(self) -> bool:
        return False


class SystemCostItem(RecurringCost):
    source: Literal["system"] = "system"
    system_kind: SystemCostKind
    is_common: bool = True

    @property
    def is_system(self) -> bool:
        return True


def _cost_source(value) -> str:
    if isinstance(value, dict):
        return value.get("source", "user")
    return getattr(value, "source", "user")


CostItem = Annotated[
    Union[Annotated[UserCostItem, Tag("user")], Annotated[SystemCostItem, Tag("system")]],
    Discriminator(_cost_source),
]


class OneTimeCostItem(BaseModel):
    id: str
    name: str
    amount: float = 0.0
    month: int = Field(1, description="Period of year 1 in which the cost is incurred (1-12)")
    is_common: bool = False
    icon: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _numeric_amount(cls, value):
        return coerce_amount(value)

    @field_validator("month", mode="before")
    @classmethod
    def _clamp_month(cls, value):
        month = coerce_amount(value)
        if month != int(month) or not 1 <= month <= MONTHS_PER_YEAR:
            return 1
        return int(month)

    @property
    def is_system(self) -> bool:
        return False


class CostStructure(BaseModel):
    fixed_costs: List[CostItem] = Field(default_factory=list)
    variable_costs: List[CostItem] = Field(default_factory=list)
    one_time_costs: List[OneTimeCostItem] = Field(default_factory=list)


class EmployeeInputs(BaseModel):
    team_members: int = 5
    augmented_resources: int = 2

    @field_validator("team_members", "augmented_resources", mode="before")
    @classmethod
    def _headcount(cls, value):
        return max(0, int(coerce_amount(value)))


class CostIncreaseAssumption(BaseModel):
    year: int
    fixed_increase_pct: float = 0.0
    variable_increase_pct: float = 0.0


class CostSummary(BaseModel):
    annual_fixed: float
    annual_variable: float
    one_time: float
    annual_recurring: float
    horizon_total: float
    monthly_fixed: List[float]
    monthly_variable: List[float]
