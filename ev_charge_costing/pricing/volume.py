from __future__ import annotations

from typing import Iterable

from ..tariffs.types import ENERGY, FLAT, PARKING_TIME, TIME, ChargeRecord, ChargingPeriod


def duration_minutes(record: ChargeRecord) -> float:
    """Minutes between session start and end (negative if end precedes start)."""
    return (record.end_date_time - record.start_date_time).total_seconds() / 60.0


def _volume_from_periods(periods: Iterable[ChargingPeriod], dimension_type: str) -> float:
    total = 0.0
    for period in periods:
        for dimension in period.dimensions:
            if dimension.type == dimension_type:
                total += dimension.volume
    return total


def get_volume(record: ChargeRecord, dimension_type: str) -> float:
    """Billable quantity of ``dimension_type`` in ``record``.

    Itemized charging periods win over the aggregate totals whenever the record
    has any; FLAT is always a single unit.
    """
    if dimension_type == FLAT:
        return 1

    if record.charging_periods:
        return _volume_from_periods(record.charging_periods, dimension_type)

    if dimension_type == ENERGY:
        if record.total_energy is not None:
            return record.total_energy
        return record.kwh if record.kwh is not None else 0
    if dimension_type == TIME:
        if record.total_time is not None:
            return record.total_time
        return duration_minutes(record)
    if dimension_type == PARKING_TIME:
        return record.total_parking_time if record.total_parking_time is not None else 0
    return 0


__all__ = ["duration_minutes", "get_volume"]
