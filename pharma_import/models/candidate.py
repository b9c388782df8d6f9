from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

"""ProductCandidate model.

A ProductCandidate is the validated / normalized result of mapping one RawRow.
Candidates are held in memory for preview and only become store records when
the user commits the import.
"""

__all__ = [
    "ProductCandidate",
]


@dataclass(frozen=True)
class ProductCandidate:
    """Normalized product row awaiting commit.

    Attributes:
        row_number: 1-based source row (header is row 1)
        sku: Product code; carries the barcode when only the barcode was given
        barcode: Barcode; carries the sku when only the sku was given
        name_local: Primary (Thai) display name, required
        name_alt: Secondary (English) display name
        price_excl_tax: Price without VAT, derived from the VAT-inclusive input
        cost_price: Cost, >= 0
        stock_quantity: Stock on hand
        unit: Counting unit label
        description_local: Free text description
        category_label: Category text as supplied in the file
        category_id: Resolved category reference, None when nothing matched
        errors: Validation messages in the order they were detected
    """
    row_number: int
    sku: str
    barcode: str
    name_local: str
    name_alt: str
    price_excl_tax: Decimal
    cost_price: Decimal
    stock_quantity: Decimal
    unit: str
    description_local: str = ""
    category_label: str = ""
    category_id: str | None = None
    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors
