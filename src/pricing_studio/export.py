from __future__ import annotations

from typing import List, Optional, Tuple

import pandas as pd

from .models.project import ProjectSnapshot
from .models.results import ProjectResult


def _fmt(value: Optional[float], digits: int = 2) -> str:
    if value is None:
        return "n/a"
    return f"{value:.{digits}f}"


def summary_rows(snapshot: ProjectSnapshot, result: Optional[ProjectResult] = None) -> List[Tuple[str, str]]:
    category = snapshot.category.value if snapshot.category is not None else ""
    rows = [
        ("Product Name", snapshot.name),
        ("Category", category),
        ("Target Market", snapshot.target_market or ""),
        ("Initial Users", str(snapshot.initial_users)),
        ("Growth Rate", f"{snapshot.growth_rate:g}%"),
        ("Churn Rate", f"{snapshot.churn_rate:g}%"),
        ("Market Size", str(snapshot.market_size)),
    ]
    if result is not None:
        rows += [
            ("Break-even Price", _fmt(result.pricing.breakeven)),
            ("Target Price", _fmt(result.pricing.target)),
            ("Conservative Price", _fmt(result.pricing.conservative)),
            ("5-Year Revenue", _fmt(result.profit_and_loss.totals.revenue)),
            ("5-Year Gross Profit", _fmt(result.profit_and_loss.totals.gross_profit)),
            ("CAC", _fmt(result.kpis.cac)),
            ("LTV", _fmt(result.kpis.ltv)),
            ("Payback Period (months)", _fmt(result.kpis.payback_period_months)),
            ("Break-even Users", _fmt(result.kpis.break_even_users, 0)),
        ]
    return rows


def export_summary_csv(snapshot: ProjectSnapshot, result: Optional[ProjectResult] = None) -> str:
    frame = pd.DataFrame(summary_rows(snapshot, result), columns=["Metric", "Value"])
    return frame.to_csv(index=False)


def profit_and_loss_frame(result: ProjectResult) -> pd.DataFrame:
    frame = pd.DataFrame([row.model_dump() for row in result.profit_and_loss.years])
    return frame.set_index("year")
