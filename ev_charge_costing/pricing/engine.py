"""Tariff cost engine.

Turns a charge record and a tariff into a ``CostBreakdown``:

- every tariff element whose restrictions match contributes, in tariff order;
- each price component is priced on its own and added to the bucket of its
  dimension (energy / time / parking / flat);
- VAT is computed per component at the component's rate (default 20%).

A finalized CDR can also be summarized from its own authoritative totals
(``calculate_from_cdr``) or re-priced against the tariffs it embeds
(``recalculate_cdr``).

Everything here is a pure function of its inputs.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from ..config import DEFAULT_SYMBOL
from ..tariffs.types import ENERGY, FLAT, PARKING_TIME, TIME, Cdr, ChargeRecord, CostBreakdown, Tariff
from . import components
from .money import Money
from .restrictions import is_applicable

_LOGGER = logging.getLogger(__name__)

# Dimension type -> CostBreakdown field
COST_BUCKETS: Dict[str, str] = {
    ENERGY: "energy",
    TIME: "time",
    PARKING_TIME: "parking",
    FLAT: "flat",
}


def calculate(record: ChargeRecord, tariff: Tariff) -> CostBreakdown:
    buckets: Dict[str, Money] = {name: Money.zero() for name in COST_BUCKETS.values()}
    vat = Money.zero()

    for index, element in enumerate(tariff.elements):
        if not is_applicable(record, element):
            _LOGGER.debug("Tariff %s element %d not applicable", tariff.id or "-", index)
            continue
        for component in element.price_components:
            bucket = COST_BUCKETS.get(component.type)
            if bucket is None:
                _LOGGER.warning("Ignoring price component with unknown type %r", component.type)
                continue
            cost = components.calculate(record, component, element.restrictions)
            buckets[bucket] = buckets[bucket].add(cost)
            vat = vat.add(cost.vat(component.vat_or_default()))

    subtotal = buckets["energy"].add(buckets["time"]).add(buckets["parking"]).add(buckets["flat"])
    return CostBreakdown(
        energy=buckets["energy"],
        time=buckets["time"],
        parking=buckets["parking"],
        flat=buckets["flat"],
        subtotal=subtotal,
        vat=vat,
        total=subtotal.add(vat),
    )


def _optional_money(value: Optional[float]) -> Optional[Money]:
    return None if value is None else Money.from_major_units(value)


def calculate_from_cdr(cdr: Cdr) -> CostBreakdown:
    """Breakdown built only from the CDR's own pre-computed totals.

    Reservation cost is folded into the flat bucket. When the CDR itemizes
    nothing, the whole ``total_cost`` is the subtotal and VAT is zero; otherwise
    VAT is ``total_vat`` if given, else whatever ``total_cost`` exceeds the
    itemized sum by.
    """
    energy = _optional_money(cdr.total_energy_cost)
    time = _optional_money(cdr.total_time_cost)
    parking = _optional_money(cdr.total_parking_cost)
    fixed = _optional_money(cdr.total_fixed_cost)
    reservation = _optional_money(cdr.total_reservation_cost)
    total = Money.from_major_units(cdr.total_cost or 0)

    itemized = [m for m in (energy, time, parking, fixed, reservation) if m is not None]
    flat = (fixed or Money.zero()).add(reservation or Money.zero())

    if not itemized:
        subtotal = total
        vat = Money.zero()
    else:
        subtotal = Money.zero()
        for m in itemized:
            subtotal = subtotal.add(m)
        vat = Money.from_major_units(cdr.total_vat) if cdr.total_vat is not None else total.subtract(subtotal)

    return CostBreakdown(
        energy=energy or Money.zero(),
        time=time or Money.zero(),
        parking=parking or Money.zero(),
        flat=flat,
        subtotal=subtotal,
        vat=vat,
        total=total,
    )


def recalculate_cdr(cdr: Cdr) -> CostBreakdown:
    """Re-price a CDR against each tariff it embeds and sum the results."""
    if not cdr.tariffs:
        return calculate_from_cdr(cdr)

    combined = CostBreakdown.zero()
    for tariff in cdr.tariffs:
        combined = combined.combine(calculate(cdr, tariff))
    return combined


def format_breakdown(breakdown: CostBreakdown, symbol: str = DEFAULT_SYMBOL) -> Dict[str, str]:
    return {
        "energy_cost": breakdown.energy.format(symbol),
        "time_cost": breakdown.time.format(symbol),
        "parking_cost": breakdown.parking.format(symbol),
        "flat_fee": breakdown.flat.format(symbol),
        "subtotal": breakdown.subtotal.format(symbol),
        "vat_amount": breakdown.vat.format(symbol),
        "total_amount": breakdown.total.format(symbol),
    }


class TariffCostCalculator:
    """Stateless ``CostCalculator`` / ``CostFormatter`` over the functions above."""

    def calculate(self, record: ChargeRecord, tariff: Tariff) -> CostBreakdown:
        return calculate(record, tariff)

    def format(self, breakdown: CostBreakdown, symbol: str = DEFAULT_SYMBOL) -> Dict[str, str]:
        return format_breakdown(breakdown, symbol)


__all__ = [
    "COST_BUCKETS",
    "calculate",
    "calculate_from_cdr",
    "recalculate_cdr",
    "format_breakdown",
    "TariffCostCalculator",
]
