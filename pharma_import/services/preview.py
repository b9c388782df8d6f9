from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from ..models.candidate import ProductCandidate
from ..models.channel import ChannelCandidate

"""Preview tables for parsed candidates (pandas).

The preview shows the first rows of the parsed file with their validation
status, followed by the valid / invalid tally.
"""

__all__ = [
    "PREVIEW_LIMIT",
    "preview_frame",
    "channel_preview_frame",
    "render_preview",
]

PREVIEW_LIMIT = 10

PREVIEW_COLUMNS = [
    "row",
    "sku",
    "name",
    "price_excl_tax",
    "stock",
    "unit",
    "category_id",
    "status",
    "errors",
]


def _status(is_valid: bool) -> str:
    return "ok" if is_valid else "invalid"


def preview_frame(candidates: Sequence[ProductCandidate]) -> pd.DataFrame:
    records = [
        {
            "row": c.row_number,
            "sku": c.sku,
            "name": c.name_local if not c.name_alt else f"{c.name_local} / {c.name_alt}",
            "price_excl_tax": f"{c.price_excl_tax:.2f}",
            "stock": str(c.stock_quantity),
            "unit": c.unit,
            "category_id": c.category_id or "",
            "status": _status(c.is_valid),
            "errors": "; ".join(c.errors),
        }
        for c in candidates
    ]
    return pd.DataFrame.from_records(records, columns=PREVIEW_COLUMNS)


def channel_preview_frame(candidates: Sequence[ChannelCandidate]) -> pd.DataFrame:
    records = []
    for c in candidates:
        rec: dict[str, object] = {
            "row": c.row_number,
            "sku": c.sku or c.barcode,
            "name": c.name_local,
            "product_id": c.existing_product_id or "",
        }
        for channel, listed in c.listings.items():
            rec[f"sell_{channel}"] = "Y" if listed else "N"
        for channel, price in c.prices.items():
            rec[f"price_{channel}"] = f"{price:.2f}"
        rec["status"] = _status(c.is_valid)
        rec["errors"] = "; ".join(c.errors)
        records.append(rec)
    return pd.DataFrame.from_records(records)


def render_preview(
    candidates: Sequence[ProductCandidate] | Sequence[ChannelCandidate],
    limit: int = PREVIEW_LIMIT,
) -> str:
    """Render the first ``limit`` candidates as a text table plus the tally."""
    if not candidates:
        return "no data rows"
    if isinstance(candidates[0], ChannelCandidate):
        frame = channel_preview_frame(candidates)  # type: ignore[arg-type]
    else:
        frame = preview_frame(candidates)  # type: ignore[arg-type]
    frame = frame.fillna("")
    valid = int((frame["status"] == "ok").sum())
    invalid = len(frame) - valid
    lines = [frame.head(limit).to_string(index=False)]
    if len(frame) > limit:
        lines.append(f"... and {len(frame) - limit} more rows")
    lines.append(f"{len(frame)} rows: {valid} valid | {invalid} invalid")
    return "\n".join(lines)
