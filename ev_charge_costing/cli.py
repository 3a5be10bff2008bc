#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
EV charging cost calculator – CLI

Flow:
- Reads a charging session or CDR (YAML / JSON, OCPI field names).
- Optionally reads a tariff.
- Prices the record:
  - with --tariff: tariff evaluation (restrictions, step sizes, VAT);
  - CDR without --tariff: summary of the CDR's own totals,
    or re-pricing against its embedded tariffs with --recalculate.
- Prints the cost breakdown as a Markdown table or JSON.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional, Tuple, Union

from rich.console import Console
from rich.markup import escape

from .config import DEFAULT_LOG_LEVEL, symbol_for
from .pricing.engine import calculate, calculate_from_cdr, recalculate_cdr
from .reporting.format import breakdown_to_dict, render_report
from .tariffs.loader import is_cdr_payload, load_document, load_record, load_tariff
from .tariffs.types import Cdr, ChargeRecord, CostBreakdown

console = Console()


# --------------------------------------------------------------------
# Argument parsing
# --------------------------------------------------------------------
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ev-cost",
        description=(
            "EV charging cost calculator\n\n"
            "Prices a charging session or CDR against an OCPI tariff and prints\n"
            "the energy / time / parking / flat / VAT breakdown."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--record",
        required=True,
        help="Session or CDR document (.json, .yaml, .yml).",
    )

    parser.add_argument(
        "--tariff",
        default=None,
        help="Tariff document. Required for plain sessions; optional for CDRs.",
    )

    parser.add_argument(
        "--recalculate",
        action="store_true",
        help="Re-price a CDR against the tariffs it embeds instead of trusting its totals.",
    )

    parser.add_argument(
        "--symbol",
        default=None,
        help="Currency symbol for display (default: derived from the currency code).",
    )

    parser.add_argument(
        "--output-format",
        choices=["markdown", "json"],
        default="markdown",
        help="Output as a Markdown table or as JSON.",
    )

    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default=DEFAULT_LOG_LEVEL,
        help="Logging level for internal messages (DEBUG = per-component pricing).",
    )

    return parser.parse_args(argv)


# --------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------
def _price(
    record: Union[ChargeRecord, Cdr],
    tariff_path: Optional[str],
    recalculate: bool,
) -> Tuple[CostBreakdown, str, str]:
    """Return (breakdown, currency, mode)."""
    if tariff_path:
        tariff = load_tariff(load_document(tariff_path))
        return calculate(record, tariff), tariff.currency, "tariff"

    if not isinstance(record, Cdr):
        raise ValueError("A tariff is required to price a charging session (use --tariff)")

    if recalculate:
        return recalculate_cdr(record), record.currency, "recalculated"
    return calculate_from_cdr(record), record.currency, "cdr totals"


# --------------------------------------------------------------------
# Main
# --------------------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
    logger = logging.getLogger("ev_charge_costing")
    logger.debug("CLI arguments: %s", args)

    try:
        payload = load_document(args.record)
        record = load_record(payload)
        logger.info("Loaded %s from %s", "CDR" if is_cdr_payload(payload) else "session", args.record)
        breakdown, currency, mode = _price(record, args.tariff, args.recalculate)
    except (OSError, ValueError) as ex:
        console.print(f"[red]{escape(str(ex))}[/red]")
        raise SystemExit(2)

    symbol = args.symbol or symbol_for(currency)
    logger.info("Priced record using %s (%s)", mode, currency)
    _emit(breakdown, symbol, currency, mode, args.output_format)


def _emit(breakdown: CostBreakdown, symbol: str, currency: str, mode: str, output_format: str) -> None:
    if output_format == "json":
        doc = {"currency": currency, "mode": mode, "breakdown": breakdown_to_dict(breakdown, symbol)}
        # plain stdout so the output stays machine-readable
        sys.stdout.write(json.dumps(doc, indent=2, ensure_ascii=False) + "\n")
        return
    console.print(render_report(breakdown, symbol, title=f"Charging cost ({currency}, {mode})"), markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    main()
