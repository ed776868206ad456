from __future__ import annotations

from datetime import date

from .models.common import ProductCategory
from .models.costs import CostIncreaseAssumption, CostStructure, EmployeeInputs, OneTimeCostItem, UserCostItem
from .models.pricing import PricingAssumptions
from .models.project import ProjectSnapshot
from .services.demand import apply_growth


def build_sample_project() -> ProjectSnapshot:
    costs = CostStructure(
        fixed_costs=[
            UserCostItem(id="fixed-office", name="Office lease", monthly_amounts=[4.0] * 12, unit="monthly"),
        ],
        variable_costs=[
            UserCostItem(id="variable-support", name="Customer support", monthly_amounts=[2.5] * 12, unit="total monthly cost"),
        ],
        one_time_costs=[
            OneTimeCostItem(id="onetime-launch", name="Launch campaign", amount=18.0, month=3),
        ],
    )

    pricing = PricingAssumptions(
        corporate_overhead_rate_pct=4,
        inflation_rate_pct=3,
        marketing_cost_pct=15,
    )

    project = ProjectSnapshot(
        name="Edge API",
        category=ProductCategory.PLATFORM,
        description="Managed API gateway for regional partners",
        target_market="Mid-market SaaS",
        costs=costs,
        employees=EmployeeInputs(team_members=5, augmented_resources=2),
        pricing=pricing,
        cost_increase_assumptions=[
            CostIncreaseAssumption(year=2, fixed_increase_pct=3, variable_increase_pct=5),
            CostIncreaseAssumption(year=3, fixed_increase_pct=3, variable_increase_pct=5),
        ],
        growth_rate=10,
        product_demand=apply_growth(1000, 10),
        start_date=date(2025, 1, 1),
    )
    return project
