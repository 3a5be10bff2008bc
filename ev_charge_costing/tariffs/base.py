from __future__ import annotations

from typing import Dict, Protocol

from .types import ChargeRecord, CostBreakdown, Tariff


class CostCalculator(Protocol):
    """Prices a charge record against a tariff."""

    def calculate(self, record: ChargeRecord, tariff: Tariff) -> CostBreakdown: ...


class CostFormatter(Protocol):
    """Renders a breakdown as display strings keyed by receipt field."""

    def format(self, breakdown: CostBreakdown, symbol: str = ...) -> Dict[str, str]: ...
