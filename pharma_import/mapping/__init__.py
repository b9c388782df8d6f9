"""Header alias resolution, validation and normalization of tokenized rows."""

from .aliases import PRODUCT_ALIASES, resolve
from .category_resolver import resolve_category
from .channel_mapper import map_channel_row
from .numbers import TAX_RATE, price_excl_tax, price_incl_tax, round2
from .row_mapper import map_row, map_rows

__all__ = [
    "PRODUCT_ALIASES",
    "TAX_RATE",
    "map_channel_row",
    "map_row",
    "map_rows",
    "price_excl_tax",
    "price_incl_tax",
    "resolve",
    "resolve_category",
    "round2",
]
