from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List, Optional, Sequence
from uuid import uuid4

from ..catalog import get_cost_suggestions
from ..config import MONTHS_PER_YEAR, settings
from ..models.common import CostKind, coerce_amount, flat_series, round_half_up
from ..models.costs import (
    SYSTEM_COST_NAMES,
    CostStructure,
    CostSummary,
    EmployeeInputs,
    OneTimeCostItem,
    RecurringCost,
    SystemCostItem,
    SystemCostKind,
    UserCostItem,
)


logger = logging.getLogger(__name__)

RECURRING_KINDS = (CostKind.FIXED, CostKind.VARIABLE)
RESERVED_IDS = frozenset(kind.value for kind in SystemCostKind)
_FIELD_FOR_KIND = {
    CostKind.FIXED: "fixed_costs",
    CostKind.VARIABLE: "variable_costs",
    CostKind.ONE_TIME: "one_time_costs",
}
_PASTE_ROW = re.compile(r"\r?\n")
_PASTE_CELL = re.compile(r"[\t,]")


def total_for_series(items: Iterable[RecurringCost]) -> float:
    return sum(amount for item in items for amount in item.monthly_amounts)


def monthly_total(items: Iterable[RecurringCost], month_index: int) -> float:
    if not 0 <= month_index < MONTHS_PER_YEAR:
        return 0.0
    return sum(item.monthly_amounts[month_index] for item in items)


def one_time_total(items: Iterable[OneTimeCostItem]) -> float:
    return sum(item.amount for item in items)


def summarize_costs(structure: CostStructure, years: Optional[int] = None) -> CostSummary:
    years = settings.horizon_years if years is None else years
    annual_fixed = total_for_series(structure.fixed_costs)
    annual_variable = total_for_series(structure.variable_costs)
    one_time = one_time_total(structure.one_time_costs)
    return CostSummary(
        annual_fixed=annual_fixed,
        annual_variable=annual_variable,
        one_time=one_time,
        annual_recurring=annual_fixed + annual_variable,
        horizon_total=(annual_fixed + annual_variable) * years + one_time,
        monthly_fixed=[monthly_total(structure.fixed_costs, i) for i in range(MONTHS_PER_YEAR)],
        monthly_variable=[monthly_total(structure.variable_costs, i) for i in range(MONTHS_PER_YEAR)],
    )


def items_of(structure: CostStructure, kind: CostKind) -> list:
    return list(getattr(structure, _FIELD_FOR_KIND[CostKind(kind)]))


def _replace(structure: CostStructure, kind: CostKind, items: list) -> CostStructure:
    return structure.model_copy(update={_FIELD_FOR_KIND[CostKind(kind)]: items})


def find_item(structure: CostStructure, kind: CostKind, item_id: str):
    return next((item for item in items_of(structure, kind) if item.id == item_id), None)


def new_item_id(kind: CostKind) -> str:
    prefix = "onetime" if CostKind(kind) == CostKind.ONE_TIME else CostKind(kind).value
    return f"{prefix}-{uuid4().hex[:12]}"


def blank_item(kind: CostKind, name: Optional[str] = None):
    kind = CostKind(kind)
    if kind == CostKind.ONE_TIME:
        return OneTimeCostItem(id=new_item_id(kind), name=name or "New One-time Cost")
    label = "New Fixed Cost" if kind == CostKind.FIXED else "New Variable Cost"
    return UserCostItem(id=new_item_id(kind), name=name or label)


def add_item(structure: CostStructure, kind: CostKind, item: Any) -> CostStructure:
    kind = CostKind(kind)
    if kind == CostKind.ONE_TIME:
        item = item if isinstance(item, OneTimeCostItem) else OneTimeCostItem.model_validate(item)
    else:
        if isinstance(item, SystemCostItem):
            logger.debug("Ignoring attempt to add system-managed line %s", item.id)
            return structure
        item = item if isinstance(item, UserCostItem) else UserCostItem.model_validate(item)
    if item.id in RESERVED_IDS:
        logger.debug("Ignoring user line with reserved id %s", item.id)
        return structure
    if find_item(structure, kind, item.id) is not None:
        logger.debug("Ignoring duplicate %s cost id %s", kind.value, item.id)
        return structure
    return _replace(structure, kind, items_of(structure, kind) + [item])


def remove_item(structure: CostStructure, kind: CostKind, item_id: str) -> CostStructure:
    target = find_item(structure, kind, item_id)
    if target is None or target.is_system:
        if target is not None:
            logger.debug("Refusing to remove system-managed line %s", item_id)
        return structure
    return _replace(structure, kind, [item for item in items_of(structure, kind) if item.id != item_id])


def _update_item(structure: CostStructure, kind: CostKind, item_id: str, **changes) -> CostStructure:
    target = find_item(structure, kind, item_id)
    if target is None or target.is_system:
        if target is not None:
            logger.debug("Refusing to edit system-managed line %s", item_id)
        return structure
    updated = type(target).model_validate({**target.model_dump(), **changes})
    return _replace(structure, kind, [updated if item.id == item_id else item for item in items_of(structure, kind)])


def rename_item(structure: CostStructure, kind: CostKind, item_id: str, name: str) -> CostStructure:
    return _update_item(structure, kind, item_id, name=name)


def set_month_amount(structure: CostStructure, kind: CostKind, item_id: str, month_index: int, value: Any) -> CostStructure:
    if CostKind(kind) not in RECURRING_KINDS or not 0 <= month_index < MONTHS_PER_YEAR:
        return structure
    target = find_item(structure, kind, item_id)
    if target is None:
        return structure
    amounts = list(target.monthly_amounts)
    amounts[month_index] = coerce_amount(value)
    return _update_item(structure, kind, item_id, monthly_amounts=amounts)


def set_one_time_amount(structure: CostStructure, item_id: str, value: Any) -> CostStructure:
    return _update_item(structure, CostKind.ONE_TIME, item_id, amount=coerce_amount(value))


def set_one_time_month(structure: CostStructure, item_id: str, month: Any) -> CostStructure:
    return _update_item(structure, CostKind.ONE_TIME, item_id, month=month)


def copy_first_month_across_year(structure: CostStructure, kind: CostKind) -> CostStructure:
    """Overwrite months 2-12 of every editable line with its month-1 value."""
    if CostKind(kind) not in RECURRING_KINDS:
        return structure
    items = [
        item if item.is_system else item.model_copy(update={"monthly_amounts": flat_series(item.monthly_amounts[0])})
        for item in items_of(structure, kind)
    ]
    return _replace(structure, kind, items)


def parse_paste_text(text: str) -> List[List[float]]:
    """Split clipboard text into rows (newlines) and cells (tabs or commas)."""
    rows = _PASTE_ROW.split(text or "")
    while rows and not rows[-1].strip():
        rows.pop()
    return [[coerce_amount(cell) for cell in _PASTE_CELL.split(row)] for row in rows]


def paste_grid(
    structure: CostStructure,
    kind: CostKind,
    grid: Sequence[Sequence[Any]],
    start_column: int = 0,
    start_row: int = 0,
) -> CostStructure:
    if CostKind(kind) not in RECURRING_KINDS:
        return structure
    items = items_of(structure, kind)
    for row_offset, row in enumerate(grid):
        row_index = start_row + row_offset
        if not 0 <= row_index < len(items):
            continue
        item = items[row_index]
        if item.is_system:
            continue
        amounts = list(item.monthly_amounts)
        for column_offset, cell in enumerate(row):
            column = start_column + column_offset
            if 0 <= column < MONTHS_PER_YEAR:
                amounts[column] = coerce_amount(cell)
        items[row_index] = item.model_copy(update={"monthly_amounts": amounts})
    return _replace(structure, kind, items)


def manpower_series(headcount: int, cost_per_head_annual: Optional[float] = None) -> List[float]:
    cost = settings.cost_per_head_annual if cost_per_head_annual is None else cost_per_head_annual
    return flat_series(round_half_up(headcount * cost / MONTHS_PER_YEAR, 1))


def build_system_lines(
    employees: EmployeeInputs,
    overhead_series: Sequence[float],
    overhead_rate_pct: float,
    cost_per_head_annual: Optional[float] = None,
) -> List[SystemCostItem]:
    cost = settings.cost_per_head_annual if cost_per_head_annual is None else cost_per_head_annual
    team = employees.team_members
    augmented = employees.augmented_resources
    return [
        SystemCostItem(
            id=SystemCostKind.TEAM_MEMBERS.value,
            name=SYSTEM_COST_NAMES[SystemCostKind.TEAM_MEMBERS],
            system_kind=SystemCostKind.TEAM_MEMBERS,
            monthly_amounts=manpower_series(team, cost),
            icon="users",
            unit=f"{team} employees @ {cost:g}k/year = {team * cost:.0f}k annually",
        ),
        SystemCostItem(
            id=SystemCostKind.AUGMENTED_RESOURCES.value,
            name=SYSTEM_COST_NAMES[SystemCostKind.AUGMENTED_RESOURCES],
            system_kind=SystemCostKind.AUGMENTED_RESOURCES,
            monthly_amounts=manpower_series(augmented, cost),
            icon="user-plus",
            unit=f"{augmented} resources @ {cost:g}k/year = {augmented * cost:.0f}k annually",
        ),
        SystemCostItem(
            id=SystemCostKind.CORPORATE_OVERHEADS.value,
            name=SYSTEM_COST_NAMES[SystemCostKind.CORPORATE_OVERHEADS],
            system_kind=SystemCostKind.CORPORATE_OVERHEADS,
            monthly_amounts=list(overhead_series),
            icon="building",
            unit=f"{overhead_rate_pct:g}% of total costs (includes software licenses, office rental, legal compliance)",
        ),
    ]


def with_system_lines(structure: CostStructure, system_lines: List[SystemCostItem]) -> CostStructure:
    """Put the system-managed lines first, keeping every other fixed line in order."""
    others = [item for item in structure.fixed_costs if not item.is_system]
    return structure.model_copy(update={"fixed_costs": list(system_lines) + others})


def merge_catalog_defaults(structure: CostStructure, category, divisor: Optional[float] = None) -> CostStructure:
    divisor = settings.catalog_unit_divisor if divisor is None else divisor
    suggestions = get_cost_suggestions(category)

    def scaled(items):
        return [
            item.model_copy(update={"monthly_amounts": [amount / divisor for amount in item.monthly_amounts], "is_common": True})
            for item in items
        ]

    system = [item for item in structure.fixed_costs if item.is_system]
    fixed = system + scaled(suggestions.fixed_costs) + [item for item in structure.fixed_costs if not item.is_system and not item.is_common]
    variable = scaled(suggestions.variable_costs) + [item for item in structure.variable_costs if not item.is_common]
    one_time = [item.model_copy(update={"amount": item.amount / divisor, "is_common": True}) for item in suggestions.one_time_costs]
    one_time += [item for item in structure.one_time_costs if not item.is_common]
    logger.info("Merged %s catalog defaults", getattr(category, "value", category))
    return CostStructure(fixed_costs=fixed, variable_costs=variable, one_time_costs=one_time)
