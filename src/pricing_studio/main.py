from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from .catalog import CostSuggestions, get_cost_suggestions
from .config import settings
from .errors import ProjectNotFoundError
from .export import export_summary_csv, profit_and_loss_frame
from .models.common import CostKind, coerce_amount
from .models.demand import DemandSeries
from .models.project import ProjectSnapshot
from .schemas import (
    CostItemEditRequest,
    GrowthRequest,
    PasteRequest,
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectRunRequest,
    ProjectRunResponse,
    ProjectUpdateRequest,
)
from .services import cost_structure
from .services.calculator import ProjectCalculator
from .services.demand import apply_growth_to
from .storage import ProjectStore, merge_changes


logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Pricing Studio", version="0.1.0")

store = ProjectStore()
calculator = ProjectCalculator()


def _edit(project_id: str, change: Callable[[ProjectSnapshot], ProjectSnapshot]) -> ProjectSnapshot:
    try:
        return store.edit(project_id, change)
    except ProjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _require(project_id: str) -> ProjectSnapshot:
    try:
        return store.require(project_id)
    except ProjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


def _edit_costs(project_id: str, change: Callable) -> ProjectSnapshot:
    def apply(project: ProjectSnapshot) -> ProjectSnapshot:
        return calculator.recompute(project.model_copy(update={"costs": change(project.costs)}))

    return _edit(project_id, apply)


@app.get("/catalog/{category}", response_model=CostSuggestions)
def cost_catalog(category: str) -> CostSuggestions:
    return get_cost_suggestions(category)


@app.post("/projects", response_model=ProjectSnapshot, status_code=201)
def create_project(payload: ProjectCreateRequest) -> ProjectSnapshot:
    try:
        snapshot = ProjectSnapshot.model_validate(payload.model_dump(exclude_none=True))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    created = store.create(calculator.initialize(snapshot))
    logger.info("Created project %s (%s)", created.id, created.name)
    return created


@app.get("/projects", response_model=ProjectListResponse)
def list_projects() -> ProjectListResponse:
    return ProjectListResponse(projects=store.list_all())


@app.get("/projects/{project_id}", response_model=ProjectSnapshot)
def get_project(project_id: str) -> ProjectSnapshot:
    return _require(project_id)


@app.patch("/projects/{project_id}", response_model=ProjectSnapshot)
def update_project(project_id: str, payload: ProjectUpdateRequest) -> ProjectSnapshot:
    changes = payload.model_dump(exclude_unset=True)

    def apply(project: ProjectSnapshot) -> ProjectSnapshot:
        merged = ProjectSnapshot.model_validate(merge_changes(project.model_dump(), changes))
        if merged.category is not None and merged.category != project.category:
            return calculator.change_category(merged, merged.category)
        return calculator.initialize(merged)

    return _edit(project_id, apply)


@app.delete("/projects/{project_id}", status_code=204)
def delete_project(project_id: str) -> None:
    if not store.delete(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    logger.info("Deleted project %s", project_id)


@app.post("/projects/{project_id}/costs/{kind}", response_model=ProjectSnapshot, status_code=201)
def add_cost(project_id: str, kind: CostKind, item: Optional[Dict[str, Any]] = Body(default=None)) -> ProjectSnapshot:
    if item:
        item = {"id": cost_structure.new_item_id(kind), **item}
        item.setdefault("name", cost_structure.blank_item(kind).name)
    else:
        item = cost_structure.blank_item(kind)
    return _edit_costs(project_id, lambda costs: cost_structure.add_item(costs, kind, item))


@app.delete("/projects/{project_id}/costs/{kind}/{item_id}", response_model=ProjectSnapshot)
def remove_cost(project_id: str, kind: CostKind, item_id: str) -> ProjectSnapshot:
    return _edit_costs(project_id, lambda costs: cost_structure.remove_item(costs, kind, item_id))


@app.patch("/projects/{project_id}/costs/{kind}/{item_id}", response_model=ProjectSnapshot)
def edit_cost(project_id: str, kind: CostKind, item_id: str, payload: CostItemEditRequest) -> ProjectSnapshot:
    def change(costs):
        if payload.name is not None:
            costs = cost_structure.rename_item(costs, kind, item_id, payload.name)
        if payload.month_index is not None:
            costs = cost_structure.set_month_amount(costs, kind, item_id, payload.month_index, payload.value)
        if kind == CostKind.ONE_TIME and payload.amount is not None:
            costs = cost_structure.set_one_time_amount(costs, item_id, payload.amount)
        if kind == CostKind.ONE_TIME and payload.month is not None:
            costs = cost_structure.set_one_time_month(costs, item_id, payload.month)
        return costs

    return _edit_costs(project_id, change)


@app.post("/projects/{project_id}/costs/{kind}/paste", response_model=ProjectSnapshot)
def paste_costs(project_id: str, kind: CostKind, payload: PasteRequest) -> ProjectSnapshot:
    grid = payload.grid if payload.grid is not None else cost_structure.parse_paste_text(payload.text or "")
    return _edit_costs(
        project_id,
        lambda costs: cost_structure.paste_grid(costs, kind, grid, payload.start_column, payload.start_row),
    )


@app.post("/projects/{project_id}/costs/{kind}/copy-first-month", response_model=ProjectSnapshot)
def copy_first_month(project_id: str, kind: CostKind) -> ProjectSnapshot:
    return _edit_costs(project_id, lambda costs: cost_structure.copy_first_month_across_year(costs, kind))


@app.post("/projects/{project_id}/demand/growth", response_model=ProjectSnapshot)
def grow_demand(project_id: str, payload: GrowthRequest) -> ProjectSnapshot:
    def apply(project: ProjectSnapshot) -> ProjectSnapshot:
        demand = project.demand()
        if payload.year1_demand is not None:
            demand = DemandSeries.model_validate({"values": [payload.year1_demand] + demand.values[1:]})
        growth = project.growth_rate if payload.growth_rate is None else payload.growth_rate
        demand = apply_growth_to(demand, growth)
        return project.model_copy(update={"product_demand": demand.values, "growth_rate": coerce_amount(growth)})

    return _edit(project_id, apply)


@app.get("/projects/{project_id}/result", response_model=ProjectRunResponse)
def project_result(project_id: str, apply_cost_increases: bool = False) -> ProjectRunResponse:
    project = _require(project_id)
    return ProjectRunResponse(project=project, result=calculator.run(project, apply_cost_increases))


@app.post("/run", response_model=ProjectRunResponse)
def run_project(payload: ProjectRunRequest) -> ProjectRunResponse:
    project: ProjectSnapshot | None = None
    if payload.project is not None:
        project = calculator.initialize(payload.project)
    elif payload.project_id:
        project = store.get(payload.project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return ProjectRunResponse(project=project, result=calculator.run(project, payload.apply_cost_increases))


@app.get("/projects/{project_id}/export", response_class=PlainTextResponse)
def export_project(project_id: str) -> PlainTextResponse:
    project = _require(project_id)
    content = export_summary_csv(project, calculator.run(project))
    filename = f"{project.name or 'pricing-model'}.csv"
    return PlainTextResponse(content, media_type="text/csv", headers={"Content-Disposition": f'attachment; filename="{filename}"'})


@app.get("/projects/{project_id}/export/pnl", response_class=PlainTextResponse)
def export_profit_and_loss(project_id: str) -> PlainTextResponse:
    project = _require(project_id)
    frame = profit_and_loss_frame(calculator.run(project))
    return PlainTextResponse(frame.to_csv(), media_type="text/csv")


@app.get("/health")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
