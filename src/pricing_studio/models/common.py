from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Iterable, List

from ..config import MONTHS_PER_YEAR


_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class ProductCategory(str, Enum):
    INFRASTRUCTURE = "infrastructure"
    PLATFORM = "platform"
    APPLICATIONS = "applications"


class CostKind(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"
    ONE_TIME = "one_time"


class CapexMode(str, Enum):
    AMORTIZED = "amortized"
    CASH_FLOW = "cash_flow"


def coerce_amount(value: Any) -> float:
    """Best-effort numeric conversion used for every user-entered amount.

    Text is read up to its first non-numeric character, so ``" 12.5 "`` and
    ``"12k"`` give 12.5 and 12. Blank or non-numeric text, ``None`` and
    non-finite numbers become ``0.0``.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if match is None:
            return 0.0
        number = float(match.group(1))
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def normalize_months(values: Iterable[Any] | None) -> List[float]:
    amounts = [coerce_amount(value) for value in (values or [])][:MONTHS_PER_YEAR]
    amounts.extend([0.0] * (MONTHS_PER_YEAR - len(amounts)))
    return amounts


def flat_series(value: float) -> List[float]:
    return [value] * MONTHS_PER_YEAR


def round_half_up(value: float, digits: int = 0) -> float:
    # Math.round semantics; Python's round() is banker's rounding.
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
