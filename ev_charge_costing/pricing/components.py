from __future__ import annotations

import logging
from decimal import ROUND_CEILING, Decimal
from typing import Optional

from ..config import MINUTES_PER_HOUR, SECONDS_PER_MINUTE
from ..tariffs.types import PARKING_TIME, TIME, ChargeRecord, PriceComponent, TariffRestriction
from .money import Money
from .volume import get_volume

_LOGGER = logging.getLogger(__name__)

_TIMED_DIMENSIONS = (TIME, PARKING_TIME)


def _adjusted_volume(record: ChargeRecord, dimension_type: str, restrictions: Optional[TariffRestriction]) -> float:
    volume = get_volume(record, dimension_type)
    if dimension_type not in _TIMED_DIMENSIONS or restrictions is None:
        return volume

    minutes = volume
    if restrictions.min_duration is not None:
        # min_duration acts as a grace period that is never billed
        minutes = max(0.0, minutes - restrictions.min_duration / SECONDS_PER_MINUTE)
    if restrictions.max_duration is not None:
        minutes = min(minutes, restrictions.max_duration / SECONDS_PER_MINUTE)
    return minutes


def _metered(volume: float, step_size: float) -> Decimal:
    exact = Decimal(str(volume))
    if step_size <= 0:
        return exact
    step = Decimal(str(step_size))
    steps = (exact / step).to_integral_value(rounding=ROUND_CEILING)
    return steps * step


def billable_volume(
    record: ChargeRecord,
    component: PriceComponent,
    restrictions: Optional[TariffRestriction] = None,
) -> Decimal:
    """Volume charged for ``component`` after duration bounds and step rounding.

    Expressed in the dimension's recorded unit: kWh, minutes, or 1 for FLAT.
    """
    return _metered(_adjusted_volume(record, component.type, restrictions), component.step_size)


def calculate(
    record: ChargeRecord,
    component: PriceComponent,
    restrictions: Optional[TariffRestriction] = None,
) -> Money:
    volume = billable_volume(record, component, restrictions)
    # Time prices are per hour, volumes are in minutes
    quantity = volume / MINUTES_PER_HOUR if component.type in _TIMED_DIMENSIONS else volume
    cost = Money.from_major_units(component.price).multiply(quantity)
    _LOGGER.debug(
        "Priced %s: billable=%s quantity=%s price=%s cost=%s",
        component.type,
        volume,
        quantity,
        component.price,
        cost.pence,
    )
    return cost


__all__ = ["billable_volume", "calculate"]
