from __future__ import annotations

from decimal import Decimal

from pharma_import.models.channel import CHANNELS, ChannelCandidate
from pharma_import.models.raw_row import RawRow

from .aliases import (
    CHANNEL_IDENTITY_ALIASES,
    channel_listing_aliases,
    channel_price_aliases,
    has_column,
    resolve,
)
from .numbers import parse_money
from .row_mapper import MISSING_IDENTIFIER

__all__ = [
    "TRUTHY",
    "parse_flag",
    "map_channel_row",
]

TRUTHY = frozenset({"y", "yes", "true", "1"})


def parse_flag(value: str) -> bool:
    return value.strip().lower() in TRUTHY


def map_channel_row(row: RawRow) -> ChannelCandidate:
    """Map one channel listing row.

    A listing column that exists in the header is always applied (an empty
    cell means "not listed"); a missing column leaves the listing untouched.
    Channel prices are only applied when the cell parses to a number.
    The existing product id is filled in later by the channel import service.
    """
    sku = resolve(CHANNEL_IDENTITY_ALIASES["sku"], row)
    barcode = resolve(CHANNEL_IDENTITY_ALIASES["barcode"], row)
    name = resolve(CHANNEL_IDENTITY_ALIASES["name_local"], row)

    errors: list[str] = []
    if not sku and not barcode:
        errors.append(MISSING_IDENTIFIER)

    listings: dict[str, bool] = {}
    prices: dict[str, Decimal] = {}
    for channel in CHANNELS:
        flag_aliases = channel_listing_aliases(channel)
        if has_column(flag_aliases, row):
            listings[channel] = parse_flag(resolve(flag_aliases, row))
        price = parse_money(resolve(channel_price_aliases(channel), row))
        if price is not None:
            prices[channel] = price

    return ChannelCandidate(
        row_number=row.row_number,
        sku=sku,
        barcode=barcode,
        name_local=name,
        listings=listings,
        prices=prices,
        errors=tuple(errors),
    )
