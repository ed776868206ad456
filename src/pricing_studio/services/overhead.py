from __future__ import annotations

import logging
from typing import List

from ..config import MONTHS_PER_YEAR
from ..models.common import flat_series, round_half_up
from ..models.costs import CostStructure, SystemCostItem, SystemCostKind
from .cost_structure import one_time_total, total_for_series


logger = logging.getLogger(__name__)

OVERHEAD_ID = SystemCostKind.CORPORATE_OVERHEADS.value


def _is_overhead(item) -> bool:
    if isinstance(item, SystemCostItem):
        return item.system_kind == SystemCostKind.CORPORATE_OVERHEADS
    return item.id == OVERHEAD_ID


def overhead_base(costs: CostStructure) -> float:
    """Everything the overhead is charged on: all costs except the overhead line itself."""
    fixed = total_for_series(item for item in costs.fixed_costs if not _is_overhead(item))
    return fixed + total_for_series(costs.variable_costs) + one_time_total(costs.one_time_costs)


def compute_overhead(costs: CostStructure, rate_pct: float) -> List[float]:
    monthly = overhead_base(costs) * (rate_pct / 100) / MONTHS_PER_YEAR
    return flat_series(round_half_up(monthly, 1))


def apply_overhead(costs: CostStructure, rate_pct: float) -> CostStructure:
    series = compute_overhead(costs, rate_pct)
    fixed = list(costs.fixed_costs)
    for index, item in enumerate(fixed):
        if _is_overhead(item):
            fixed[index] = item.model_copy(update={"monthly_amounts": series})
            break
    else:
        fixed.append(
            SystemCostItem(
                id=OVERHEAD_ID,
                name="Corporate Overheads",
                system_kind=SystemCostKind.CORPORATE_OVERHEADS,
                monthly_amounts=series,
                icon="building",
            )
        )
    logger.debug("Corporate overhead at %.2f%% -> %.1f per month", rate_pct, series[0])
    return costs.model_copy(update={"fixed_costs": fixed})
