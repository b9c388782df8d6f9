from __future__ import annotations

from collections.abc import Sequence

from pharma_import.models.candidate import ProductCandidate
from pharma_import.models.category import ExternalCategory
from pharma_import.models.raw_row import RawRow

from .aliases import PRODUCT_ALIASES, resolve
from .category_resolver import resolve_category
from .numbers import ZERO, parse_decimal, parse_money, price_excl_tax

"""Row mapper: RawRow -> ProductCandidate.

Pure function of the row, the header aliases and the category snapshot passed
in by the caller; no store access happens here.
"""

__all__ = [
    "DEFAULT_UNIT",
    "MISSING_IDENTIFIER",
    "MISSING_NAME",
    "map_row",
    "map_rows",
]

DEFAULT_UNIT = "ชิ้น"  # "piece"

MISSING_IDENTIFIER = "missing identifier: sku or barcode is required"
MISSING_NAME = "missing name: product name is required"


def map_row(
    row: RawRow,
    categories: Sequence[ExternalCategory] = (),
    *,
    default_unit: str = DEFAULT_UNIT,
) -> ProductCandidate:
    """Validate and normalize one data row.

    Every applicable validation message is collected; the candidate is valid
    only when none was produced.
    """
    sku = resolve(PRODUCT_ALIASES["sku"], row)
    barcode = resolve(PRODUCT_ALIASES["barcode"], row)
    name_local = resolve(PRODUCT_ALIASES["name_local"], row)
    name_alt = resolve(PRODUCT_ALIASES["name_alt"], row)
    price_raw = resolve(PRODUCT_ALIASES["price"], row)
    cost_raw = resolve(PRODUCT_ALIASES["cost"], row)
    stock_raw = resolve(PRODUCT_ALIASES["stock"], row)
    unit = resolve(PRODUCT_ALIASES["unit"], row) or default_unit
    description = resolve(PRODUCT_ALIASES["description"], row)
    category_label = resolve(PRODUCT_ALIASES["category"], row)

    errors: list[str] = []
    if not sku and not barcode:
        errors.append(MISSING_IDENTIFIER)
    if not name_local:
        errors.append(MISSING_NAME)

    incl_price = parse_money(price_raw) or ZERO
    cost = parse_money(cost_raw) or ZERO
    stock = parse_decimal(stock_raw) or ZERO

    category_id = resolve_category(category_label, categories) if category_label else None

    return ProductCandidate(
        row_number=row.row_number,
        # sku / barcode stand in for each other
        sku=sku or barcode,
        barcode=barcode or sku,
        name_local=name_local,
        name_alt=name_alt,
        price_excl_tax=price_excl_tax(incl_price),
        cost_price=max(cost, ZERO),
        stock_quantity=stock,
        unit=unit,
        description_local=description,
        category_label=category_label,
        category_id=category_id,
        errors=tuple(errors),
    )


def map_rows(
    rows: Sequence[RawRow],
    categories: Sequence[ExternalCategory] = (),
    *,
    default_unit: str = DEFAULT_UNIT,
) -> list[ProductCandidate]:
    return [map_row(r, categories, default_unit=default_unit) for r in rows]
