from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from ..db.product_store import ProductStore, StoreError
from ..logging.error_log import ErrorLogBuffer
from ..mapping.channel_mapper import map_channel_row
from ..models.channel import ChannelCandidate
from ..models.raw_row import ParsedTable
from .orchestrator import BaseImportSession, CommitResult

"""Sales-channel listing import.

Updates marketplace listing flags (sell_on_<channel>) and channel prices
(price_<channel>) of products that already exist. Rows whose product cannot be
found are rejected during preview; no product is ever created here.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "PRODUCT_NOT_FOUND_MESSAGE",
    "find_channel_product",
    "commit_channel_row",
    "ChannelImportSession",
]

PRODUCT_NOT_FOUND_MESSAGE = "product not found"


def find_channel_product(candidate: ChannelCandidate, store: ProductStore) -> dict[str, Any] | None:
    """Barcode first, then sku (channel exports usually carry the barcode)."""
    found = store.find_by_barcode(candidate.barcode) if candidate.barcode else None
    if found is None and candidate.sku:
        found = store.find_by_sku(candidate.sku)
    return found


def commit_channel_row(candidate: ChannelCandidate, store: ProductStore) -> CommitResult:
    """Apply one row's listing/price fields. Never raises for store failures."""
    fields = candidate.update_fields()
    if candidate.existing_product_id is None:
        return CommitResult(candidate.row_number, ok=False, error=PRODUCT_NOT_FOUND_MESSAGE)
    if not fields:
        # nothing to change is still a success
        return CommitResult(candidate.row_number, ok=True, product_id=candidate.existing_product_id)
    try:
        store.update(candidate.existing_product_id, fields)
    except Exception as e:  # row boundary
        return CommitResult(candidate.row_number, ok=False, error=str(e) or e.__class__.__name__)
    return CommitResult(candidate.row_number, ok=True, product_id=candidate.existing_product_id)


class ChannelImportSession(BaseImportSession):
    """Channel listing import; product lookups happen while parsing."""

    progress_description = "Updating channels"

    def __init__(self, store: ProductStore, *, error_log: ErrorLogBuffer | None = None) -> None:
        super().__init__(error_log=error_log)
        self.store = store

    def _build_candidates(self, table: ParsedTable) -> list[ChannelCandidate]:
        candidates: list[ChannelCandidate] = []
        for row in table.rows:
            candidate = map_channel_row(row)
            if candidate.errors:
                candidates.append(candidate)
                continue
            try:
                found = find_channel_product(candidate, self.store)
            except StoreError as e:
                candidates.append(replace(candidate, errors=(f"product lookup failed: {e}",)))
                continue
            if found is None:
                candidates.append(replace(candidate, errors=(PRODUCT_NOT_FOUND_MESSAGE,)))
            else:
                candidates.append(replace(candidate, existing_product_id=str(found["id"])))
        return candidates

    def _commit_candidate(self, candidate: ChannelCandidate, store: ProductStore) -> CommitResult:
        return commit_channel_row(candidate, store)
