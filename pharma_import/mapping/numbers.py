from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

"""Numeric normalization for imported cells.

Prices in the file are VAT-inclusive (Thai VAT, fixed 7%). The store keeps
the VAT-exclusive price as the canonical unit price and the inclusive price
next to it for display.
"""

__all__ = [
    "TAX_RATE",
    "round2",
    "parse_money",
    "parse_decimal",
    "price_excl_tax",
    "price_incl_tax",
]

TAX_RATE = Decimal("0.07")
CENT = Decimal("0.01")
ZERO = Decimal("0")

# anything that is not part of a plain decimal: currency symbols and words
# ("฿", "บาท", "THB"), thousands separators, whitespace
_MONEY_NOISE = re.compile(r"[^0-9.eE+\-]")

# largest accepted magnitude is 10**15; quantize() to cents stays exact below it
MAX_EXPONENT = 15


def round2(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up (money rounding)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_decimal(raw: str) -> Decimal | None:
    """Parse a plain decimal; None when empty, unparseable, not finite or out of range."""
    text = raw.strip()
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    if value and value.adjusted() > MAX_EXPONENT:
        return None
    return value


def parse_money(raw: str) -> Decimal | None:
    """Parse a money cell such as "฿1,250.50"; None when nothing usable remains."""
    return parse_decimal(_MONEY_NOISE.sub("", raw))


def price_excl_tax(incl: Decimal) -> Decimal:
    """Back-calculate the VAT-exclusive price; 0 for non-positive input."""
    if incl <= ZERO:
        return round2(ZERO)
    return round2(incl / (1 + TAX_RATE))


def price_incl_tax(excl: Decimal) -> Decimal:
    return round2(excl * (1 + TAX_RATE))
