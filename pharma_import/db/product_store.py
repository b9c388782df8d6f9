from __future__ import annotations

import copy
import itertools
from collections.abc import Iterable
from typing import Any, Protocol

from pharma_import.models.category import ExternalCategory

"""Product store / category source contracts.

The importer only needs three product operations (find by sku, find by
barcode, upsert) plus a partial update for channel listings, and one category
read. Anything implementing these protocols can back an import; this module
also provides the dictionary-backed implementation used for dry runs and
tests.
"""

__all__ = [
    "StoreError",
    "ProductStore",
    "CategorySource",
    "InMemoryProductStore",
    "InMemoryCategorySource",
]


class StoreError(Exception):
    """A single store operation failed (lookup or write)."""


class ProductStore(Protocol):
    def find_by_sku(self, sku: str) -> dict[str, Any] | None: ...

    def find_by_barcode(self, barcode: str) -> dict[str, Any] | None: ...

    def upsert(self, record: dict[str, Any], existing_id: str | None = None) -> str: ...

    def update(self, product_id: str, fields: dict[str, Any]) -> None: ...


class CategorySource(Protocol):
    def fetch_all(self) -> list[ExternalCategory]: ...


class InMemoryProductStore:
    """Dictionary-backed ProductStore. Ids are sequential strings ("1", "2", ...)."""

    def __init__(self, records: Iterable[dict[str, Any]] = ()) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._ids = itertools.count(1)
        for rec in records:
            self.upsert(dict(rec))

    def __len__(self) -> int:
        return len(self._records)

    def all(self) -> list[dict[str, Any]]:
        return [copy.deepcopy(r) for r in self._records.values()]

    def get(self, product_id: str) -> dict[str, Any] | None:
        rec = self._records.get(product_id)
        return copy.deepcopy(rec) if rec is not None else None

    def _find(self, column: str, value: str) -> dict[str, Any] | None:
        for rec in self._records.values():
            if rec.get(column) == value:
                return copy.deepcopy(rec)
        return None

    def find_by_sku(self, sku: str) -> dict[str, Any] | None:
        return self._find("sku", sku)

    def find_by_barcode(self, barcode: str) -> dict[str, Any] | None:
        return self._find("barcode", barcode)

    def upsert(self, record: dict[str, Any], existing_id: str | None = None) -> str:
        if existing_id is not None:
            self.update(existing_id, record)
            return existing_id
        product_id = str(next(self._ids))
        self._records[product_id] = {**copy.deepcopy(record), "id": product_id}
        return product_id

    def update(self, product_id: str, fields: dict[str, Any]) -> None:
        if product_id not in self._records:
            raise StoreError(f"product not found: id={product_id}")
        self._records[product_id].update(copy.deepcopy(fields))
        self._records[product_id]["id"] = product_id


class InMemoryCategorySource:
    def __init__(self, categories: Iterable[ExternalCategory] = ()) -> None:
        self._categories = list(categories)

    def fetch_all(self) -> list[ExternalCategory]:
        return list(self._categories)
