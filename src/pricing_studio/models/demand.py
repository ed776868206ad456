from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..config import settings
from .common import coerce_amount


HORIZON_YEARS = settings.horizon_years


class DemandSeries(BaseModel):
    values: List[float] = Field(default_factory=lambda: [0.0] * HORIZON_YEARS, description="Units per projection year")

    @field_validator("values", mode="before")
    @classmethod
    def _horizon_years(cls, value):
        years = [coerce_amount(v) for v in (value or [])][:HORIZON_YEARS]
        years.extend([0.0] * (HORIZON_YEARS - len(years)))
        return years

    def total(self, years: Optional[int] = None) -> float:
        return sum(self.values[:years])

    def over(self, years: int) -> List[float]:
        """Per-year demand for a horizon of ``years``, zero-padded past the stored years."""
        values = self.values[:years]
        return values + [0.0] * (years - len(values))

    def for_year(self, year: int) -> float:
        if 1 <= year <= len(self.values):
            return self.values[year - 1]
        return 0.0
