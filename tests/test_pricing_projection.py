from __future__ import annotations

from datetime import date

import pytest

from pricing_studio.models.costs import CostIncreaseAssumption, CostStructure, OneTimeCostItem, UserCostItem
from pricing_studio.models.demand import DemandSeries
from pricing_studio.services.demand import apply_growth, apply_growth_to, set_year_demand
from pricing_studio.services.pricing import horizon_total_cost, horizon_total_demand, recommend_prices
from pricing_studio.services.projection import (
    compute_kpis,
    escalate_costs,
    extrapolate_with_inflation,
    project_profit_and_loss,
)


def test_compound_growth_rounds_each_year():
    assert apply_growth(100, 10) == [100, 110, 121, 133, 146]


def test_growth_needs_base_and_rate():
    assert apply_growth(0, 10) is None
    assert apply_growth(100, 0) is None
    series = DemandSeries(values=[0, 5, 5, 5, 5])
    assert apply_growth_to(series, 10) == series


def test_manual_override_leaves_other_years():
    series = apply_growth_to(DemandSeries(values=[100]), 10)
    edited = set_year_demand(series, 2, 500)
    assert edited.values == [100, 110, 500, 133, 146]
    assert set_year_demand(series, 7, 1) == series
    assert set_year_demand(series, 0, "many").values[0] == 0.0


def test_demand_series_is_five_years():
    assert DemandSeries(values=[1, 2]).values == [1, 2, 0, 0, 0]
    assert DemandSeries(values=[1, 2, 3, 4, 5, 6]).total() == 15


def test_horizon_totals():
    structure = CostStructure(
        fixed_costs=[UserCostItem(id="rent", name="Rent", monthly_amounts=[10] * 12)],
        variable_costs=[UserCostItem(id="hosting", name="Hosting", monthly_amounts=[5] * 12)],
        one_time_costs=[OneTimeCostItem(id="setup", name="Setup", amount=100)],
    )
    assert horizon_total_cost(structure, years=5) == 1000
    assert horizon_total_demand(DemandSeries(values=[1, 2, 3, 4, 5])) == 15


def test_recommended_prices():
    prices = recommend_prices(500000, 10000)
    assert prices.breakeven == 50.00
    assert prices.target == 55.56
    assert prices.conservative == 45.45
    assert prices.conservative < prices.breakeven < prices.target


def test_recommended_prices_without_demand():
    prices = recommend_prices(500000, 0)
    assert (prices.breakeven, prices.target, prices.conservative) == (0.0, 0.0, 0.0)


def test_profit_and_loss_year():
    statement = project_profit_and_loss(
        55.56,
        DemandSeries(values=[2000, 0, 0, 0, 0]),
        50000,
        30000,
        [5000, 0, 0, 0, 0],
        start_date=date(2025, 1, 1),
    )
    first, second = statement.years[0], statement.years[1]
    assert first.revenue == pytest.approx(111120)
    assert first.gross_profit == pytest.approx(26120)
    assert first.profit_margin_pct == pytest.approx(23.51, abs=0.01)
    assert second.revenue == 0
    assert second.profit_margin_pct == 0
    assert second.gross_profit == pytest.approx(-80000)
    assert statement.years[2].period_start == date(2027, 1, 1)
    assert statement.totals.fixed_costs == pytest.approx(250000)
    assert statement.totals.gross_profit == pytest.approx(sum(row.gross_profit for row in statement.years))


def test_profit_and_loss_accepts_yearly_costs():
    statement = project_profit_and_loss(10, DemandSeries(values=[100] * 5), [100, 110, 120], 0, [0] * 5)
    assert [row.fixed_costs for row in statement.years] == [100, 110, 120, 0, 0]


def test_kpis():
    kpis = compute_kpis(recommend_prices(500000, 10000), 60000, marketing_cost_pct=15, cac_multiplier=5, retention_years=2)
    assert kpis.cac == pytest.approx(37.5)
    assert kpis.ltv == pytest.approx(55.56 * 12 * 2)
    assert kpis.payback_period_months == pytest.approx(37.5 / 5.56)
    assert kpis.break_even_users == pytest.approx(100)


def test_kpis_surface_undefined_values():
    no_margin = compute_kpis(recommend_prices(100, 10, target_margin_ratio=1.0), 1200)
    assert no_margin.payback_period_months is None
    assert no_margin.break_even_users == pytest.approx(10)

    no_demand = compute_kpis(recommend_prices(100, 0), 1200)
    assert no_demand.cac == 0
    assert no_demand.payback_period_months is None
    assert no_demand.break_even_users is None


def test_escalate_costs_compounds_and_carries_forward():
    fixed, variable = escalate_costs(
        100,
        50,
        [CostIncreaseAssumption(year=2, fixed_increase_pct=10, variable_increase_pct=20)],
        years=5,
    )
    assert fixed == pytest.approx([100, 110, 110, 110, 110])
    assert variable == pytest.approx([50, 60, 60, 60, 60])


def test_extrapolate_with_inflation():
    assert extrapolate_with_inflation(100, 10, years=5) == pytest.approx([100, 110, 121, 133.1, 146.41])


def test_payback_tolerance_is_configurable():
    prices = recommend_prices(500000, 10000)
    assert compute_kpis(prices, 60000, payback_epsilon=10).payback_period_months is None
    assert compute_kpis(prices, 60000, payback_epsilon=1).payback_period_months == pytest.approx(37.5 / 5.56)


def test_demand_over_a_custom_horizon():
    series = DemandSeries(values=[1, 2, 3, 4, 5])
    assert series.over(3) == [1, 2, 3]
    assert series.over(7) == [1, 2, 3, 4, 5, 0, 0]
    assert series.total(2) == 3
