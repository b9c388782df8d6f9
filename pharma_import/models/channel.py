from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

"""ChannelCandidate model for the sales-channel listing import.

Channel rows never create products: they switch marketplace listings on/off
and set per-channel prices on products that already exist in the store.
"""

__all__ = [
    "CHANNELS",
    "ChannelCandidate",
]

# channel key -> display name used by the Thai header spellings
CHANNELS: dict[str, str] = {
    "grab": "GRAB",
    "lineman": "LineMan",
    "lazada": "LAZADA",
    "shopee": "Shopee",
    "line_shopping": "Line Shopping",
    "tiktok": "TikTok",
}


@dataclass(frozen=True)
class ChannelCandidate:
    """Parsed channel listing row.

    ``listings`` / ``prices`` only contain channels whose column carried a
    value; channels absent from the file are left untouched on commit.
    """
    row_number: int
    sku: str
    barcode: str
    name_local: str = ""
    listings: dict[str, bool] = field(default_factory=dict)
    prices: dict[str, Decimal] = field(default_factory=dict)
    existing_product_id: str | None = None
    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.existing_product_id is not None

    def update_fields(self) -> dict[str, object]:
        """Store columns to update: sell_on_<channel> and price_<channel>."""
        data: dict[str, object] = {}
        for key in CHANNELS:
            if key in self.listings:
                data[f"sell_on_{key}"] = self.listings[key]
        for key in CHANNELS:
            if key in self.prices:
                data[f"price_{key}"] = self.prices[key]
        return data
