"""Fixed-point money in integer minor units (pence).

All arithmetic goes through ``decimal.Decimal`` and is rounded half-up back to a
whole number of minor units, so a ``Money`` never carries a fractional penny.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from ..config import DEFAULT_SYMBOL, DEFAULT_VAT_RATE

Number = Union[int, float, Decimal]

_NON_AMOUNT_CHARS = re.compile(r"[^0-9.,-]")
_HUNDRED = Decimal(100)


def _dec(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() keeps 0.3 as 0.3 instead of its binary expansion
        return Decimal(str(value))
    return Decimal(value)


def _round(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass(frozen=True, order=True)
class Money:
    """An immutable amount of money stored as integer pence."""

    pence: int = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_minor_units(cls, amount: Number) -> "Money":
        return cls(_round(_dec(amount)))

    @classmethod
    def from_major_units(cls, amount: Number) -> "Money":
        return cls(_round(_dec(amount) * _HUNDRED))

    @classmethod
    def zero(cls) -> "Money":
        return cls(0)

    @classmethod
    def parse(cls, text: str) -> "Money":
        """Parse a display string such as ``"£25.50"``, ``"$1,200.00"`` or ``"-£10"``.

        Anything that is not a digit, ``.``, ``,`` or ``-`` is dropped. A ``-``
        anywhere in the input makes the amount negative and commas are read as
        thousands separators. Text that still does not parse yields zero.
        """
        raw = text or ""
        cleaned = _NON_AMOUNT_CHARS.sub("", raw)
        negative = "-" in raw
        digits = cleaned.replace("-", "").replace(",", "") or "0"
        try:
            value = Decimal(digits)
        except InvalidOperation:
            return cls.zero()
        if not value.is_finite():
            return cls.zero()
        money = cls.from_major_units(value)
        return cls(-money.pence) if negative else money

    @staticmethod
    def from_kwh(volume: Number, rate_per_unit: "Money") -> "Money":
        """Cost of ``volume`` units at ``rate_per_unit``."""
        return rate_per_unit.multiply(volume)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def to_minor_units(self) -> int:
        return self.pence

    def to_major_units(self) -> float:
        return float(Decimal(self.pence) / _HUNDRED)

    def to_kwh(self, rate_per_unit: "Money") -> float:
        """How many units this amount buys at ``rate_per_unit`` (3 dp).

        A zero rate returns 0 rather than raising.
        """
        if rate_per_unit.is_zero():
            return 0.0
        units = Decimal(self.pence) / Decimal(rate_per_unit.pence)
        return float(units.quantize(Decimal("0.001"), rounding=ROUND_HALF_UP))

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def add(self, other: "Money") -> "Money":
        return Money(self.pence + other.pence)

    def subtract(self, other: "Money") -> "Money":
        return Money(self.pence - other.pence)

    def multiply(self, factor: Number) -> "Money":
        return Money(_round(Decimal(self.pence) * _dec(factor)))

    def divide(self, factor: Number) -> "Money":
        return Money(_round(Decimal(self.pence) / _dec(factor)))

    def vat(self, rate: Number = DEFAULT_VAT_RATE) -> "Money":
        """VAT due on this (net) amount at ``rate`` percent."""
        return Money(_round(Decimal(self.pence) * _dec(rate) / _HUNDRED))

    def with_vat(self, rate: Number = DEFAULT_VAT_RATE) -> "Money":
        return self.add(self.vat(rate))

    def without_vat(self, rate: Number = DEFAULT_VAT_RATE) -> "Money":
        """Net amount contained in this gross amount."""
        return Money(_round(Decimal(self.pence) * _HUNDRED / (_HUNDRED + _dec(rate))))

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------
    def equals(self, other: "Money") -> bool:
        return self.pence == other.pence

    def is_less_than(self, other: "Money") -> bool:
        return self.pence < other.pence

    def is_greater_than(self, other: "Money") -> bool:
        return self.pence > other.pence

    def is_less_than_or_equal(self, other: "Money") -> bool:
        return self.pence <= other.pence

    def is_greater_than_or_equal(self, other: "Money") -> bool:
        return self.pence >= other.pence

    def is_zero(self) -> bool:
        return self.pence == 0

    def is_positive(self) -> bool:
        return self.pence > 0

    def is_negative(self) -> bool:
        return self.pence < 0

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    def format(self, symbol: str = DEFAULT_SYMBOL) -> str:
        major = Decimal(abs(self.pence)) / _HUNDRED
        body = f"{symbol}{major:.2f}"
        return f"-{body}" if self.pence < 0 else body

    def __str__(self) -> str:
        return self.format()


__all__ = ["Money"]
