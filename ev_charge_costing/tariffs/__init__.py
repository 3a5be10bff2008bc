from .base import CostCalculator, CostFormatter
from .loader import load_cdr, load_charge_record, load_document, load_record, load_tariff
from .types import (
    ENERGY,
    FLAT,
    PARKING_TIME,
    TIME,
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
    "CostCalculator",
    "CostFormatter",
    "load_cdr",
    "load_charge_record",
    "load_document",
    "load_record",
    "load_tariff",
    "ENERGY",
    "TIME",
    "PARKING_TIME",
    "FLAT",
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
