from __future__ import annotations

from collections.abc import Sequence

from pharma_import.models.channel import CHANNELS
from pharma_import.models.raw_row import RawRow

"""Header alias lists and alias resolution.

Each canonical field accepts a fixed, ordered list of header spellings: the
Thai spelling first, then English names and abbreviations. Any subset of the
recognized headers may appear, in any order.
"""

__all__ = [
    "PRODUCT_ALIASES",
    "CHANNEL_IDENTITY_ALIASES",
    "channel_listing_aliases",
    "channel_price_aliases",
    "resolve",
    "has_column",
]

PRODUCT_ALIASES: dict[str, tuple[str, ...]] = {
    "sku": ("รหัสสินค้า", "sku", "code"),
    "barcode": ("บาร์โค้ด", "barcode", "bar_code"),
    "name_local": ("ชื่อสินค้า", "name_th", "name", "product_name"),
    "name_alt": ("ชื่อภาษาอังกฤษ", "name_en", "english_name"),
    "price": ("ราคาขาย", "base_price", "price", "selling_price"),  # VAT included
    "cost": ("ราคาทุน", "cost_price", "cost", "purchase_price"),
    "stock": ("จำนวนคงเหลือ", "stock_quantity", "stock", "quantity"),
    "unit": ("หน่วย", "unit", "uom"),
    "description": ("คำอธิบาย", "description_th", "description", "desc"),
    "category": ("หมวดหมู่", "category", "category_name"),
}

CHANNEL_IDENTITY_ALIASES: dict[str, tuple[str, ...]] = {
    "sku": PRODUCT_ALIASES["sku"],
    "barcode": PRODUCT_ALIASES["barcode"],
    "name_local": ("ชื่อสินค้า", "name", "product_name"),
}


def channel_listing_aliases(channel: str) -> tuple[str, ...]:
    display = CHANNELS[channel]
    return (
        f"ขาย {display}",
        channel,
        f"sell_{channel}",
        f"ขาย_{channel}",
        channel.replace("_", " "),
    )


def channel_price_aliases(channel: str) -> tuple[str, ...]:
    return (f"ราคา {CHANNELS[channel]}", f"price_{channel}")


def resolve(aliases: Sequence[str], row: RawRow) -> str:
    """Return the first non-empty value among the alias columns.

    Aliases are tried in order and compared with the row's headers
    case-insensitively. Columns missing from the file read as empty, so the
    result is "" when no alias column holds a value.
    """
    for alias in aliases:
        wanted = alias.casefold()
        for header, value in row.items():
            if header.casefold() == wanted and value:
                return value
    return ""


def has_column(aliases: Sequence[str], row: RawRow) -> bool:
    """True when any alias names a column present in the header row."""
    wanted = {a.casefold() for a in aliases}
    return any(h.casefold() in wanted for h in row.headers)
