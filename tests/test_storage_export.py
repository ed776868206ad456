from __future__ import annotations

import pytest
from pydantic import ValidationError

from pricing_studio.catalog import get_cost_suggestions
from pricing_studio.errors import ProjectNotFoundError
from pricing_studio.export import export_summary_csv, profit_and_loss_frame
from pricing_studio.models.project import ProjectSnapshot
from pricing_studio.sample_data import build_sample_project
from pricing_studio.services.calculator import ProjectCalculator
from pricing_studio.storage import ProjectStore, merge_changes


def test_catalog_unions_common_and_category_items():
    platform = get_cost_suggestions("platform")
    assert [item.id for item in platform.fixed_costs] == ["monthly-maintenance", "dev-portal-maintenance"]
    assert len(platform.variable_costs) == 6
    assert len(platform.one_time_costs) == 6
    assert platform.variable_costs[0].monthly_amounts == [1500.0] * 12


def test_catalog_unknown_category_returns_common_items():
    unknown = get_cost_suggestions("hardware")
    assert [item.id for item in unknown.fixed_costs] == ["monthly-maintenance"]
    assert [item.id for item in unknown.variable_costs] == ["cloud-hosting"]
    assert len(unknown.one_time_costs) == 4


def test_store_create_get_list_delete():
    store = ProjectStore()
    created = store.create(ProjectSnapshot(name="Alpha"))
    assert created.id
    assert created.created_at is not None
    assert store.get(created.id) == created
    assert store.list_all() == [created]
    assert store.delete(created.id) is True
    assert store.delete(created.id) is False
    assert store.get(created.id) is None


def test_store_update_is_partial_merge():
    store = ProjectStore()
    created = store.create(ProjectSnapshot(name="Alpha", target_market="SMB", growth_rate=12))
    updated = store.update(created.id, {"name": "Beta"})
    assert updated.name == "Beta"
    assert updated.target_market == "SMB"
    assert updated.growth_rate == 12
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at
    assert store.update("missing", {"name": "X"}) is None


def test_store_update_rejects_invalid_data():
    store = ProjectStore()
    created = store.create(ProjectSnapshot(name="Alpha"))
    with pytest.raises(ValidationError):
        store.update(created.id, {"initial_users": "lots"})
    assert store.get(created.id) == created


def test_store_edit_and_require():
    store = ProjectStore()
    created = store.create(ProjectSnapshot(name="Alpha"))
    edited = store.edit(created.id, lambda project: project.model_copy(update={"name": "Gamma"}))
    assert edited.name == "Gamma"
    assert store.require(created.id).name == "Gamma"
    with pytest.raises(ProjectNotFoundError):
        store.require("missing")
    with pytest.raises(ProjectNotFoundError):
        store.edit("missing", lambda project: project)


def test_export_summary_csv():
    project = build_sample_project()
    result = ProjectCalculator().run(project)
    lines = export_summary_csv(project, result).splitlines()
    assert lines[0] == "Metric,Value"
    assert "Product Name,Edge API" in lines
    assert "Category,platform" in lines
    assert f"Target Price,{result.pricing.target:.2f}" in lines


def test_export_without_result_has_project_fields_only():
    lines = export_summary_csv(ProjectSnapshot(name="Solo")).splitlines()
    assert len(lines) == 8
    assert "Category," in lines


def test_profit_and_loss_frame():
    frame = profit_and_loss_frame(ProjectCalculator().run(build_sample_project()))
    assert list(frame.index) == [1, 2, 3, 4, 5]
    assert "gross_profit" in frame.columns


def test_store_update_merges_nested_fields():
    store = ProjectStore()
    created = store.create(build_sample_project())
    updated = store.update(created.id, {"pricing": {"capex_mode": "cash_flow"}, "costs": {"variable_costs": []}})

    assert updated.pricing.capex_mode == "cash_flow"
    assert updated.pricing.inflation_rate_pct == created.pricing.inflation_rate_pct
    assert updated.pricing.corporate_overhead_rate_pct == created.pricing.corporate_overhead_rate_pct
    assert updated.costs.variable_costs == []
    assert updated.costs.fixed_costs == created.costs.fixed_costs
    assert updated.costs.one_time_costs == created.costs.one_time_costs


def test_merge_changes_replaces_lists_and_merges_mappings():
    base = {"pricing": {"a": 1, "b": 2}, "product_demand": [1, 2, 3], "name": "Old"}
    merged = merge_changes(base, {"pricing": {"b": 5}, "product_demand": [9], "name": "New"})
    assert merged == {"pricing": {"a": 1, "b": 5}, "product_demand": [9], "name": "New"}
    assert base["pricing"] == {"a": 1, "b": 2}
