from __future__ import annotations

import pytest

from pricing_studio.config import EngineSettings
from pricing_studio.models.costs import SystemCostKind
from pricing_studio.sample_data import build_sample_project
from pricing_studio.services.calculator import ProjectCalculator
from pricing_studio.services.cost_structure import remove_item


def test_sample_project_generates_results():
    calculator = ProjectCalculator()
    project = calculator.initialize(build_sample_project())
    result = calculator.run(project)

    assert len(result.profit_and_loss.years) == 5
    assert result.pricing.breakeven > 0
    assert result.pricing.target > result.pricing.breakeven > result.pricing.conservative
    assert result.profit_and_loss.unit_price == result.pricing.target
    assert result.profit_and_loss.years[0].revenue > 0
    assert result.kpis.payback_period_months is not None
    assert len(result.yearly_cost_outlook) == 5


def test_initialize_merges_catalog_once_and_puts_system_lines_first():
    calculator = ProjectCalculator()
    project = calculator.initialize(build_sample_project())
    again = calculator.initialize(project)

    ids = [item.id for item in project.costs.fixed_costs]
    assert project.initialized
    assert ids[:3] == ["team-members", "augmented-resources", "corporate-overheads"]
    assert "monthly-maintenance" in ids
    assert "fixed-office" in ids
    assert [item.id for item in again.costs.fixed_costs] == ids


def test_recompute_derives_manpower_lines_from_headcount():
    calculator = ProjectCalculator()
    project = calculator.recompute(build_sample_project())
    team = project.costs.fixed_costs[0]
    augmented = project.costs.fixed_costs[1]

    assert team.system_kind == SystemCostKind.TEAM_MEMBERS
    assert team.monthly_amounts == [100.0] * 12
    assert augmented.monthly_amounts == [40.0] * 12

    more_staff = project.model_copy(update={"employees": project.employees.model_copy(update={"team_members": 6})})
    assert calculator.recompute(more_staff).costs.fixed_costs[0].monthly_amounts == [120.0] * 12


def test_recompute_is_stable():
    calculator = ProjectCalculator()
    once = calculator.recompute(build_sample_project())
    twice = calculator.recompute(once)
    assert once.costs == twice.costs


def test_system_lines_survive_removal_attempts():
    calculator = ProjectCalculator()
    project = calculator.recompute(build_sample_project())
    costs = remove_item(project.costs, "fixed", SystemCostKind.CORPORATE_OVERHEADS.value)
    assert costs == project.costs


def test_selected_price_overrides_target_in_profit_and_loss():
    calculator = ProjectCalculator()
    project = build_sample_project()
    project = project.model_copy(update={"pricing": project.pricing.model_copy(update={"selected_unit_price": 99.0})})
    result = calculator.run(project)
    assert result.profit_and_loss.unit_price == 99.0
    assert result.profit_and_loss.years[0].revenue == pytest.approx(1000 * 99.0)


def test_cost_increases_only_apply_when_requested():
    calculator = ProjectCalculator()
    project = build_sample_project()
    flat = calculator.run(project)
    escalated = calculator.run(project, apply_cost_increases=True)

    flat_fixed = [row.fixed_costs for row in flat.profit_and_loss.years]
    escalated_fixed = [row.fixed_costs for row in escalated.profit_and_loss.years]
    assert len(set(flat_fixed)) == 1
    assert escalated_fixed[0] == flat_fixed[0]
    assert escalated_fixed[2] > escalated_fixed[1] > escalated_fixed[0]
    assert escalated.pricing == flat.pricing


def test_settings_drive_kpi_constants():
    project = build_sample_project()
    base = ProjectCalculator().run(project)
    tuned = ProjectCalculator(EngineSettings(cac_multiplier=10)).run(project)
    assert tuned.kpis.cac == pytest.approx(base.kpis.cac * 2)


def test_settings_from_environment():
    settings = EngineSettings.from_env({"PRICING_STUDIO_CAC_MULTIPLIER": "7", "PRICING_STUDIO_RETENTION_YEARS": " "})
    assert settings.cac_multiplier == 7.0
    assert settings.retention_years == 2.0


def test_shorter_horizon_applies_to_demand_and_profit_and_loss():
    project = build_sample_project()
    result = ProjectCalculator(EngineSettings(horizon_years=3)).run(project)

    assert result.pricing.total_demand == 1000 + 1100 + 1210
    assert result.pricing.total_cost == pytest.approx(result.costs.annual_recurring * 3 + result.costs.one_time)
    assert result.pricing.breakeven == pytest.approx(result.pricing.total_cost / result.pricing.total_demand, abs=0.005)
    assert len(result.profit_and_loss.years) == 3
    assert len(result.capex.depreciation_by_year) == 3
    assert len(result.yearly_cost_outlook) == 3
    assert result.profit_and_loss.totals.demand == 3310


def test_payback_tolerance_comes_from_settings():
    project = build_sample_project()
    assert ProjectCalculator().run(project).kpis.payback_period_months is not None
    assert ProjectCalculator(EngineSettings(payback_epsilon=1e6)).run(project).kpis.payback_period_months is None
