from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from ..config import DEFAULT_CURRENCY, DEFAULT_VAT_RATE
from ..pricing.money import Money

# Billing dimensions (OCPI TariffDimensionType)
ENERGY = "ENERGY"  # kWh
TIME = "TIME"  # minutes
PARKING_TIME = "PARKING_TIME"  # minutes
FLAT = "FLAT"  # fixed fee, volume is always 1

DIMENSION_TYPES = (ENERGY, TIME, PARKING_TIME, FLAT)

DAYS_OF_WEEK = (
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
)


@dataclass(frozen=True)
class ChargingPeriodDimension:
    type: str
    volume: float


@dataclass(frozen=True)
class ChargingPeriod:
    """Volumes metered by the charger from ``start_date_time`` onwards."""

    start_date_time: Optional[datetime] = None
    dimensions: Tuple[ChargingPeriodDimension, ...] = ()


@dataclass(frozen=True)
class ChargeRecord:
    """An in-progress or simple charging session."""

    start_date_time: datetime
    end_date_time: datetime
    kwh: Optional[float] = None
    charging_periods: Tuple[ChargingPeriod, ...] = ()
    total_cost: Optional[float] = None
    total_energy: Optional[float] = None  # kWh
    total_time: Optional[float] = None  # minutes
    total_parking_time: Optional[float] = None  # minutes


@dataclass(frozen=True)
class PriceComponent:
    type: str
    price: float  # major units per kWh / per hour / per session
    step_size: float = 0  # 0 = continuous
    vat: Optional[float] = None  # percent

    def vat_or_default(self) -> float:
        return DEFAULT_VAT_RATE if self.vat is None else self.vat


@dataclass(frozen=True)
class TariffRestriction:
    start_time: Optional[str] = None  # "HH:MM", inclusive
    end_time: Optional[str] = None  # "HH:MM", exclusive
    start_date: Optional[str] = None  # "YYYY-MM-DD", inclusive
    end_date: Optional[str] = None  # "YYYY-MM-DD", inclusive
    min_kwh: Optional[float] = None
    max_kwh: Optional[float] = None
    min_duration: Optional[float] = None  # seconds
    max_duration: Optional[float] = None  # seconds
    day_of_week: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TariffElement:
    price_components: Tuple[PriceComponent, ...] = ()
    restrictions: Optional[TariffRestriction] = None


@dataclass(frozen=True)
class Tariff:
    currency: str = DEFAULT_CURRENCY
    elements: Tuple[TariffElement, ...] = ()
    id: str = ""


@dataclass(frozen=True)
class Cdr(ChargeRecord):
    """A finalized charge detail record with authoritative, pre-computed costs."""

    id: str = ""
    currency: str = DEFAULT_CURRENCY
    tariffs: Tuple[Tariff, ...] = ()
    total_fixed_cost: Optional[float] = None
    total_energy_cost: Optional[float] = None
    total_time_cost: Optional[float] = None
    total_parking_cost: Optional[float] = None
    total_reservation_cost: Optional[float] = None
    total_vat: Optional[float] = None
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class CostBreakdown:
    energy: Money = field(default_factory=Money.zero)
    time: Money = field(default_factory=Money.zero)
    parking: Money = field(default_factory=Money.zero)
    flat: Money = field(default_factory=Money.zero)
    subtotal: Money = field(default_factory=Money.zero)
    vat: Money = field(default_factory=Money.zero)
    total: Money = field(default_factory=Money.zero)

    @classmethod
    def zero(cls) -> "CostBreakdown":
        return cls()

    def combine(self, other: "CostBreakdown") -> "CostBreakdown":
        """Field-wise sum of two breakdowns."""
        return CostBreakdown(
            energy=self.energy.add(other.energy),
            time=self.time.add(other.time),
            parking=self.parking.add(other.parking),
            flat=self.flat.add(other.flat),
            subtotal=self.subtotal.add(other.subtotal),
            vat=self.vat.add(other.vat),
            total=self.total.add(other.total),
        )


__all__ = [
    "ENERGY",
    "TIME",
    "PARKING_TIME",
    "FLAT",
    "DIMENSION_TYPES",
    "DAYS_OF_WEEK",
    "ChargingPeriodDimension",
    "ChargingPeriod",
    "ChargeRecord",
    "PriceComponent",
    "TariffRestriction",
    "TariffElement",
    "Tariff",
    "Cdr",
    "CostBreakdown",
]
