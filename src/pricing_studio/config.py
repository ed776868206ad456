from __future__ import annotations

import os
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field


ENV_PREFIX = "PRICING_STUDIO_"

MONTHS_PER_YEAR = 12
CAPEX_YEAR = 1


class EngineSettings(BaseModel):
    horizon_years: int = Field(5, description="Length of the planning horizon in years")
    cost_per_head_annual: float = Field(240.0, description="Annual cost of one team member, in thousands")
    catalog_unit_divisor: float = Field(1000.0, description="Catalog amounts are divided by this when merged into a project")
    amortization_window_months: int = 36
    cac_multiplier: float = Field(5.0, description="Heuristic multiplier in the simplified CAC formula")
    retention_years: float = Field(2.0, description="Customer lifetime used for LTV")
    default_marketing_cost_pct: float = 15.0
    payback_epsilon: float = 1e-9
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        environ = os.environ if environ is None else environ
        values: Dict[str, str] = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        return cls.model_validate(values)


settings = EngineSettings.from_env()
