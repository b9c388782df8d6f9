from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

"""RawRow / ParsedTable models for the CSV importer.

RawRow represents one logical data row exactly as the tokenizer produced it:
header names are kept verbatim (only trimmed), nothing is normalized yet.
"""

__all__ = [
    "RawRow",
    "ParsedTable",
]


@dataclass(frozen=True)
class RawRow:
    """One tokenized data row paired with the header names of line 1.

    ``row_number`` is the 1-based logical row (header = 1, first data row = 2).
    ``line_number`` is the physical line where the row starts; it differs from
    ``row_number`` once a quoted cell spans several lines.
    """
    row_number: int
    headers: tuple[str, ...]
    values: tuple[str, ...]
    line_number: int = 0

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield (header, value) pairs in column order.

        Cells missing at the end of a short row read as "".
        Values beyond the header width are dropped.
        """
        for index, header in enumerate(self.headers):
            yield header, self.values[index] if index < len(self.values) else ""

    def get(self, header: str, default: str = "") -> str:
        for name, value in self.items():
            if name == header:
                return value
        return default


@dataclass(frozen=True)
class ParsedTable:
    """Tokenizer output: header names plus the data rows beneath them."""
    headers: list[str] = field(default_factory=list)
    rows: list[RawRow] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)
