"""Applicability of tariff elements to a charge record.

Only the gating conditions live here (weekday, time-of-day window, date range,
energy bounds). Duration bounds adjust the billed time instead and are handled
by ``pricing.components``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..tariffs.types import DAYS_OF_WEEK, ENERGY, ChargeRecord, TariffElement
from .volume import get_volume


def _check_day_of_week(start: datetime, allowed_days: Sequence[str]) -> bool:
    if not allowed_days:
        return True
    day = DAYS_OF_WEEK[start.weekday()]
    return day in {d.strip().upper() for d in allowed_days}


def _check_time_of_day(start: datetime, start_time: Optional[str], end_time: Optional[str]) -> bool:
    if not start_time and not end_time:
        return True

    time = start.strftime("%H:%M")

    # Overnight window such as 22:00-06:00
    if start_time and end_time and start_time > end_time:
        return time >= start_time or time < end_time

    if start_time and time < start_time:
        return False
    if end_time and time >= end_time:
        return False
    return True


def _check_date_range(start: datetime, start_date: Optional[str], end_date: Optional[str]) -> bool:
    if not start_date and not end_date:
        return True

    date = start.date().isoformat()

    if start_date and date < start_date:
        return False
    if end_date and date > end_date:
        return False
    return True


def _check_energy_bounds(record: ChargeRecord, min_kwh: Optional[float], max_kwh: Optional[float]) -> bool:
    if min_kwh is None and max_kwh is None:
        return True

    energy = get_volume(record, ENERGY)

    if min_kwh is not None and energy < min_kwh:
        return False
    if max_kwh is not None and energy > max_kwh:
        return False
    return True


def is_applicable(record: ChargeRecord, element: TariffElement) -> bool:
    r = element.restrictions
    if r is None:
        return True

    start = record.start_date_time
    return (
        _check_day_of_week(start, r.day_of_week)
        and _check_time_of_day(start, r.start_time, r.end_time)
        and _check_date_range(start, r.start_date, r.end_date)
        and _check_energy_bounds(record, r.min_kwh, r.max_kwh)
    )


__all__ = ["is_applicable"]
