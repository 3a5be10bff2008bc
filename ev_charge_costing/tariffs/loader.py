"""Payload loader for charge records, CDRs and tariffs.

Turns OCPI-shaped mappings (as received over HTTP or read from YAML/JSON files)
into the immutable dataclasses the calculation engine consumes.

The loader is intentionally conservative:
- it checks the handful of keys the engine cannot do without
- it normalizes clock strings, day names and timestamps

If a payload is invalid, it raises ValueError with a readable message that
names the offending key path.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from ..config import DEFAULT_CURRENCY
from .types import (
    DIMENSION_TYPES,
    Cdr,
    ChargeRecord,
    ChargingPeriod,
    ChargingPeriodDimension,
    PriceComponent,
    Tariff,
    TariffElement,
    TariffRestriction,
)

# Itemized cost keys only a finalized CDR carries.
_CDR_COST_KEYS = (
    "total_energy_cost",
    "total_time_cost",
    "total_parking_cost",
    "total_fixed_cost",
    "total_reservation_cost",
)


def _as_list(x: Any) -> List[Any]:
    if x is None:
        return []
    if isinstance(x, list):
        return x
    return [x]


def _require(obj: Dict[str, Any], key: str, *, ctx: str) -> Any:
    if key not in obj or obj[key] is None:
        raise ValueError(f"Missing required key '{key}' in {ctx}")
    return obj[key]


def _optional_float(obj: Dict[str, Any], key: str, *, ctx: str) -> Optional[float]:
    value = obj.get(key)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be a number in {ctx}, got {value!r}") from None


def _required_float(obj: Dict[str, Any], key: str, *, ctx: str) -> float:
    _require(obj, key, ctx=ctx)
    value = _optional_float(obj, key, ctx=ctx)
    if value is None:
        raise ValueError(f"Missing required key '{key}' in {ctx}")
    return value


def _parse_timestamp(value: Any, *, ctx: str) -> datetime:
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Invalid ISO-8601 timestamp {value!r} in {ctx}") from None


def _parse_clock(value: Any, *, ctx: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        # YAML 1.1 reads an unquoted 22:00 as the sexagesimal integer 1320
        # and 22:00:00 as 79200
        if value >= 3600:
            hours, rest = divmod(value, 3600)
            minutes = rest // 60
        else:
            hours, minutes = divmod(value, 60)
    else:
        try:
            h, m = str(value).strip().split(":")[:2]
            hours, minutes = int(h), int(m)
        except ValueError:
            raise ValueError(f"Invalid HH:MM time {value!r} in {ctx}") from None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Invalid HH:MM time {value!r} in {ctx}: out of range")
    return f"{hours:02d}:{minutes:02d}"


def _parse_date(value: Any, *, ctx: str) -> Optional[str]:
    if value is None or value == "":
        return None
    text = str(value).strip()[:10]
    try:
        return datetime.strptime(text, "%Y-%m-%d").date().isoformat()
    except ValueError:
        raise ValueError(f"Invalid YYYY-MM-DD date {value!r} in {ctx}") from None


def _dimension_type(value: Any, *, ctx: str) -> str:
    dim = str(value or "").strip().upper()
    if dim not in DIMENSION_TYPES:
        raise ValueError(f"Unknown dimension type {value!r} in {ctx}")
    return dim


def extract_numeric_cost(value: Any) -> Optional[float]:
    """Numeric amount of an OCPI cost field.

    Accepts a plain number or an OCPI ``Price`` object; for the latter the
    VAT-inclusive amount wins over the exclusive one.
    """
    if value is None:
        return None
    if isinstance(value, dict):
        amount = value.get("incl_vat")
        if amount is None:
            amount = value.get("excl_vat")
        return None if amount is None else float(amount)
    return float(value)


def _price_vat(value: Any) -> Optional[float]:
    if isinstance(value, dict) and value.get("incl_vat") is not None and value.get("excl_vat") is not None:
        return float(value["incl_vat"]) - float(value["excl_vat"])
    return None


# ---------------------------------------------------------------------
# Tariffs
# ---------------------------------------------------------------------
def _parse_restrictions(obj: Any, *, ctx: str) -> Optional[TariffRestriction]:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise ValueError(f"restrictions must be an object in {ctx}")
    return TariffRestriction(
        start_time=_parse_clock(obj.get("start_time"), ctx=ctx),
        end_time=_parse_clock(obj.get("end_time"), ctx=ctx),
        start_date=_parse_date(obj.get("start_date"), ctx=ctx),
        end_date=_parse_date(obj.get("end_date"), ctx=ctx),
        min_kwh=_optional_float(obj, "min_kwh", ctx=ctx),
        max_kwh=_optional_float(obj, "max_kwh", ctx=ctx),
        min_duration=_optional_float(obj, "min_duration", ctx=ctx),
        max_duration=_optional_float(obj, "max_duration", ctx=ctx),
        day_of_week=tuple(str(d).strip().upper() for d in _as_list(obj.get("day_of_week"))),
    )


def _parse_components(items: Iterable[Any], *, ctx: str) -> List[PriceComponent]:
    out: List[PriceComponent] = []
    for i, it in enumerate(items):
        cctx = f"{ctx}.price_components[{i}]"
        if not isinstance(it, dict):
            raise ValueError(f"price component must be an object in {cctx}")
        out.append(
            PriceComponent(
                type=_dimension_type(_require(it, "type", ctx=cctx), ctx=cctx),
                price=_required_float(it, "price", ctx=cctx),
                step_size=_optional_float(it, "step_size", ctx=cctx) or 0,
                vat=_optional_float(it, "vat", ctx=cctx),
            )
        )
    return out


def load_tariff(data: Dict[str, Any], *, ctx: str = "tariff") -> Tariff:
    if not isinstance(data, dict):
        raise ValueError(f"{ctx} must be an object")
    elements: List[TariffElement] = []
    for i, el in enumerate(_as_list(data.get("elements"))):
        ectx = f"{ctx}.elements[{i}]"
        if not isinstance(el, dict):
            raise ValueError(f"element must be an object in {ectx}")
        elements.append(
            TariffElement(
                price_components=tuple(_parse_components(_as_list(el.get("price_components")), ctx=ectx)),
                restrictions=_parse_restrictions(el.get("restrictions"), ctx=f"{ectx}.restrictions"),
            )
        )
    return Tariff(
        currency=str(data.get("currency") or DEFAULT_CURRENCY).strip().upper(),
        elements=tuple(elements),
        id=str(data.get("id") or ""),
    )


# ---------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------
def _parse_periods(items: Iterable[Any], *, ctx: str) -> List[ChargingPeriod]:
    out: List[ChargingPeriod] = []
    for i, it in enumerate(items):
        pctx = f"{ctx}.charging_periods[{i}]"
        if not isinstance(it, dict):
            raise ValueError(f"charging period must be an object in {pctx}")
        dims: List[ChargingPeriodDimension] = []
        for j, d in enumerate(_as_list(it.get("dimensions"))):
            dctx = f"{pctx}.dimensions[{j}]"
            if not isinstance(d, dict):
                raise ValueError(f"dimension must be an object in {dctx}")
            dims.append(
                ChargingPeriodDimension(
                    type=str(_require(d, "type", ctx=dctx)).strip().upper(),
                    volume=float(_require(d, "volume", ctx=dctx)),
                )
            )
        start = it.get("start_date_time")
        out.append(
            ChargingPeriod(
                start_date_time=_parse_timestamp(start, ctx=pctx) if start else None,
                dimensions=tuple(dims),
            )
        )
    return out


def _record_fields(data: Dict[str, Any], *, ctx: str) -> Dict[str, Any]:
    start = _parse_timestamp(_require(data, "start_date_time", ctx=ctx), ctx=ctx)
    end = _parse_timestamp(_require(data, "end_date_time", ctx=ctx), ctx=ctx)
    if (start.utcoffset() is None) != (end.utcoffset() is None):
        raise ValueError(
            f"start_date_time and end_date_time must both carry a UTC offset or both omit it in {ctx}"
        )
    return {
        "start_date_time": start,
        "end_date_time": end,
        "kwh": _optional_float(data, "kwh", ctx=ctx),
        "charging_periods": tuple(_parse_periods(_as_list(data.get("charging_periods")), ctx=ctx)),
        "total_cost": extract_numeric_cost(data.get("total_cost")),
        "total_energy": _optional_float(data, "total_energy", ctx=ctx),
        "total_time": _optional_float(data, "total_time", ctx=ctx),
        "total_parking_time": _optional_float(data, "total_parking_time", ctx=ctx),
    }


def load_charge_record(data: Dict[str, Any], *, ctx: str = "record") -> ChargeRecord:
    if not isinstance(data, dict):
        raise ValueError(f"{ctx} must be an object")
    return ChargeRecord(**_record_fields(data, ctx=ctx))


def load_cdr(data: Dict[str, Any], *, ctx: str = "cdr") -> Cdr:
    if not isinstance(data, dict):
        raise ValueError(f"{ctx} must be an object")
    fields = _record_fields(data, ctx=ctx)
    tariffs = [load_tariff(t, ctx=f"{ctx}.tariffs[{i}]") for i, t in enumerate(_as_list(data.get("tariffs")))]
    last_updated = data.get("last_updated")
    return Cdr(
        **fields,
        id=str(data.get("id") or ""),
        currency=str(data.get("currency") or DEFAULT_CURRENCY).strip().upper(),
        tariffs=tuple(tariffs),
        total_fixed_cost=extract_numeric_cost(data.get("total_fixed_cost")),
        total_energy_cost=extract_numeric_cost(data.get("total_energy_cost")),
        total_time_cost=extract_numeric_cost(data.get("total_time_cost")),
        total_parking_cost=extract_numeric_cost(data.get("total_parking_cost")),
        total_reservation_cost=extract_numeric_cost(data.get("total_reservation_cost")),
        total_vat=_price_vat(data.get("total_cost")),
        last_updated=_parse_timestamp(last_updated, ctx=ctx) if last_updated else None,
    )


def is_cdr_payload(data: Dict[str, Any]) -> bool:
    """True for a finalized CDR: embedded tariffs, itemized costs, or a currency with a total_cost."""
    if not isinstance(data, dict):
        return False
    if _as_list(data.get("tariffs")):
        return True
    if any(data.get(k) is not None for k in _CDR_COST_KEYS):
        return True
    return bool(data.get("currency")) and data.get("total_cost") is not None


def load_record(data: Dict[str, Any]) -> Union[ChargeRecord, Cdr]:
    """Load a session or CDR payload, whichever it looks like."""
    return load_cdr(data) if is_cdr_payload(data) else load_charge_record(data)


def load_document(path: Union[Path, str]) -> Dict[str, Any]:
    path = Path(path)
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(raw) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Top-level YAML must be a mapping in {path}")
        return data
    if path.suffix.lower() == ".json":
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Top-level JSON must be an object in {path}")
        return data
    raise ValueError(f"Unsupported document type: {path}")


__all__ = [
    "extract_numeric_cost",
    "is_cdr_payload",
    "load_cdr",
    "load_charge_record",
    "load_document",
    "load_record",
    "load_tariff",
]
