from __future__ import annotations

import logging
from typing import List, Optional

from ..config import MONTHS_PER_YEAR, EngineSettings, settings as default_settings
from ..models.common import ProductCategory
from ..models.costs import CostStructure, SystemCostKind
from ..models.project import ProjectSnapshot
from ..models.results import CapexSchedule, ProjectResult
from .capex import build_capex_schedule
from .cost_structure import build_system_lines, merge_catalog_defaults, summarize_costs, with_system_lines
from .overhead import apply_overhead
from .pricing import horizon_total_cost, horizon_total_demand, recommend_prices
from .projection import compute_kpis, escalate_costs, extrapolate_with_inflation, project_profit_and_loss


logger = logging.getLogger(__name__)


class ProjectCalculator:
    def __init__(self, settings: Optional[EngineSettings] = None) -> None:
        self.settings = settings or default_settings

    def initialize(self, snapshot: ProjectSnapshot) -> ProjectSnapshot:
        """Merge catalog defaults the first time a category is known, then recompute."""
        if not snapshot.initialized and snapshot.category is not None:
            costs = merge_catalog_defaults(snapshot.costs, snapshot.category, self.settings.catalog_unit_divisor)
            snapshot = snapshot.model_copy(update={"costs": costs, "initialized": True})
        return self.recompute(snapshot)

    def change_category(self, snapshot: ProjectSnapshot, category: ProductCategory) -> ProjectSnapshot:
        costs = merge_catalog_defaults(snapshot.costs, category, self.settings.catalog_unit_divisor)
        snapshot = snapshot.model_copy(update={"costs": costs, "category": ProductCategory(category), "initialized": True})
        return self.recompute(snapshot)

    def recompute(self, snapshot: ProjectSnapshot) -> ProjectSnapshot:
        """Re-derive every system-managed cost line from the current inputs."""
        rate = snapshot.pricing.corporate_overhead_rate_pct
        system_lines = build_system_lines(
            snapshot.employees,
            self._current_overhead(snapshot.costs),
            rate,
            self.settings.cost_per_head_annual,
        )
        costs = with_system_lines(snapshot.costs, system_lines)
        costs = apply_overhead(costs, rate)
        return snapshot.model_copy(update={"costs": costs})

    def run(self, snapshot: ProjectSnapshot, apply_cost_increases: bool = False) -> ProjectResult:
        snapshot = self.recompute(snapshot)
        years = self.settings.horizon_years
        costs = snapshot.costs
        assumptions = snapshot.pricing

        summary = summarize_costs(costs, years)
        capex = self._compute_capex(snapshot)
        demand = snapshot.demand()

        pricing = recommend_prices(
            horizon_total_cost(costs, years),
            horizon_total_demand(demand, years),
            assumptions.target_margin_ratio,
            assumptions.conservative_margin_ratio,
        )
        unit_price = assumptions.selected_unit_price if assumptions.selected_unit_price > 0 else pricing.target

        fixed_by_year: float | List[float] = summary.annual_fixed
        variable_by_year: float | List[float] = summary.annual_variable
        if apply_cost_increases and snapshot.cost_increase_assumptions:
            fixed_by_year, variable_by_year = escalate_costs(
                summary.annual_fixed,
                summary.annual_variable,
                snapshot.cost_increase_assumptions,
                years,
            )

        profit_and_loss = project_profit_and_loss(
            unit_price,
            demand,
            fixed_by_year,
            variable_by_year,
            capex.depreciation_by_year,
            snapshot.start_date,
            years,
        )
        kpis = compute_kpis(
            pricing,
            summary.annual_fixed,
            assumptions.marketing_cost_pct,
            self.settings.cac_multiplier,
            self.settings.retention_years,
            self.settings.payback_epsilon,
        )
        year1_total = summary.annual_recurring + sum(capex.amortized_monthly)
        outlook = extrapolate_with_inflation(year1_total, assumptions.inflation_rate_pct, years)

        logger.info(
            "Projected %s: breakeven=%.2f target=%.2f price=%.2f",
            snapshot.id or snapshot.name or "<unsaved>",
            pricing.breakeven,
            pricing.target,
            unit_price,
        )
        return ProjectResult(
            project_id=snapshot.id,
            costs=summary,
            overhead_monthly=self._current_overhead(costs),
            capex=capex,
            pricing=pricing,
            profit_and_loss=profit_and_loss,
            kpis=kpis,
            yearly_cost_outlook=outlook,
        )

    def _compute_capex(self, snapshot: ProjectSnapshot) -> CapexSchedule:
        window = snapshot.pricing.amortization_window_months or self.settings.amortization_window_months
        return build_capex_schedule(
            snapshot.costs.one_time_costs,
            snapshot.pricing.capex_mode,
            window,
            self.settings.horizon_years,
        )

    def _current_overhead(self, costs: CostStructure) -> List[float]:
        for item in costs.fixed_costs:
            if item.is_system and item.system_kind == SystemCostKind.CORPORATE_OVERHEADS:
                return list(item.monthly_amounts)
        return [0.0] * MONTHS_PER_YEAR
