from typing import Dict, List, Optional

from ..config import DEFAULT_SYMBOL
from ..pricing.engine import format_breakdown
from ..tariffs.types import CostBreakdown

_ROW_LABELS = [
    ("energy_cost", "Energy"),
    ("time_cost", "Charging time"),
    ("parking_cost", "Parking"),
    ("flat_fee", "Flat fee"),
    ("subtotal", "Subtotal"),
    ("vat_amount", "VAT"),
    ("total_amount", "Total"),
]


def render_breakdown_table(breakdown: CostBreakdown, symbol: str = DEFAULT_SYMBOL) -> str:
    formatted = format_breakdown(breakdown, symbol)
    rows: List[str] = [
        "| Item | Amount |",
        "|---|---|",
    ]
    for key, label in _ROW_LABELS:
        rows.append(f"| {label} | {formatted[key]} |")
    return "\n".join(rows)


def render_report(breakdown: CostBreakdown, symbol: str = DEFAULT_SYMBOL, title: Optional[str] = None) -> str:
    sections: List[str] = []
    if title:
        sections.append(f"## {title}")
    sections.append(render_breakdown_table(breakdown, symbol))
    return "\n".join(sections).strip()


def breakdown_to_dict(breakdown: CostBreakdown, symbol: str = DEFAULT_SYMBOL) -> Dict[str, Dict[str, object]]:
    """JSON-friendly view: pence, major units and display string per field."""
    formatted = format_breakdown(breakdown, symbol)
    out: Dict[str, Dict[str, object]] = {}
    for (key, _), money in zip(
        _ROW_LABELS,
        (
            breakdown.energy,
            breakdown.time,
            breakdown.parking,
            breakdown.flat,
            breakdown.subtotal,
            breakdown.vat,
            breakdown.total,
        ),
    ):
        out[key] = {
            "pence": money.to_minor_units(),
            "amount": money.to_major_units(),
            "formatted": formatted[key],
        }
    return out
