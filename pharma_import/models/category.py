from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "ExternalCategory",
]


@dataclass(frozen=True)
class ExternalCategory:
    """Category record owned by the store; read-only for the importer."""
    id: str
    name_local: str  # name_th column
    name_alt: str | None = None  # name_en column
