"""Tariff-based EV charging cost calculation."""

from .pricing.engine import (
    TariffCostCalculator,
    calculate,
    calculate_from_cdr,
    format_breakdown,
    recalculate_cdr,
)
from .pricing.money import Money
from .tariffs import (
    Cdr,
    ChargeRecord,
    ChargingPeriod,
    ChargingPeriodDimension,
    CostBreakdown,
    PriceComponent,
    Tariff,
    TariffElement,
    TariffRestriction,
)

__all__ = [
    "Money",
    "TariffCostCalculator",
    "calculate",
    "calculate_from_cdr",
    "format_breakdown",
    "recalculate_cdr",
    "Cdr",
    "ChargeRecord",
    "ChargingPeriod",
    "ChargingPeriodDimension",
    "CostBreakdown",
    "PriceComponent",
    "Tariff",
    "TariffElement",
    "TariffRestriction",
]
