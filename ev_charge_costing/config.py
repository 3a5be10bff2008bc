#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
config.py

Configuration constants and defaults for the EV charging cost engine.

Every value can be overridden with an environment variable so that the same
package can serve receipts for different markets (VAT regime, currency symbol)
without code changes. The calculation core only reads these constants; it never
writes them.
"""

import os  # Standard library: access environment variables (os.getenv).

# ---------------------------------------------------------------------
# VAT
# ---------------------------------------------------------------------
# DEFAULT_VAT_RATE:
# - Percentage applied to a price component whose tariff does not carry `vat`.
# - 20 = UK standard rate.
# - Override with EVCOST_DEFAULT_VAT_RATE (e.g. "5" for reduced-rate home charging).
DEFAULT_VAT_RATE = float(os.getenv("EVCOST_DEFAULT_VAT_RATE", "20"))

# ---------------------------------------------------------------------
# Currency
# ---------------------------------------------------------------------
# DEFAULT_CURRENCY:
# - ISO 4217 code assumed when a tariff or CDR payload omits `currency`.
DEFAULT_CURRENCY = os.getenv("EVCOST_DEFAULT_CURRENCY", "GBP")

# CURRENCY_SYMBOLS:
# - Display symbols used by the formatter / CLI when no explicit symbol is given.
# - Unknown codes fall back to DEFAULT_SYMBOL.
CURRENCY_SYMBOLS = {
    "GBP": "£",
    "EUR": "€",
    "USD": "$",
}

# DEFAULT_SYMBOL:
# - Symbol used by Money.format() and format_breakdown() when none is passed.
DEFAULT_SYMBOL = os.getenv("EVCOST_DEFAULT_SYMBOL", "£")

# ---------------------------------------------------------------------
# Metering
# ---------------------------------------------------------------------
# MINUTES_PER_HOUR / SECONDS_PER_MINUTE:
# - TIME and PARKING_TIME volumes are recorded in minutes, tariff prices are per
#   hour and restriction durations are in seconds.
MINUTES_PER_HOUR = 60
SECONDS_PER_MINUTE = 60

# ---------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------
# DEFAULT_LOG_LEVEL:
# - Level used by the ev-cost CLI when --log-level is not given.
DEFAULT_LOG_LEVEL = os.getenv("EVCOST_LOG_LEVEL", "WARNING")


def symbol_for(currency: str) -> str:
    """Return the display symbol for an ISO currency code."""
    return CURRENCY_SYMBOLS.get((currency or "").strip().upper(), DEFAULT_SYMBOL)
