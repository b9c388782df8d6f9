from __future__ import annotations

from collections.abc import Iterator

from pharma_import.models.raw_row import ParsedTable, RawRow

"""Line/field tokenizer for product CSV text.

Rules:
- The first logical row is the header row; its trimmed cells are the header names
- Fields are split on commas outside quotes only
- ``""`` inside a quoted field is a literal quote
- A newline inside quotes belongs to the cell (multiline cells), ``\\r\\n``
  included; outside quotes ``\\r\\n`` ends the row like ``\\n``
- Every field is stripped after unquoting
- Malformed quoting never raises: an unterminated quote at end of input simply
  flushes whatever was accumulated
- Whitespace-only lines are skipped and do not take a row number; a line of
  bare separators (``,,,``) is still a row

The stdlib ``csv`` module is not used because it raises on some malformed
input in strict mode and does not report where a logical row starts.
"""

__all__ = [
    "tokenize",
    "iter_records",
]

BOM = "\ufeff"


def tokenize(text: str) -> ParsedTable:
    """Tokenize a CSV text blob into a header list and data rows.

    Parameters
    ----------
    text: full CSV text, from an uploaded file or pasted text

    Returns
    -------
    ParsedTable whose rows are numbered from 2 (row 1 = header)
    """
    if text.startswith(BOM):
        text = text[len(BOM):]

    records = list(iter_records(text))
    if not records:
        return ParsedTable()

    _, header_fields = records[0]
    headers = tuple(header_fields)
    rows = [
        RawRow(row_number=index + 2, headers=headers, values=tuple(fields), line_number=line)
        for index, (line, fields) in enumerate(records[1:])
    ]
    return ParsedTable(headers=list(headers), rows=rows)


def iter_records(text: str) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(start_line, fields)`` for each logical row of ``text``.

    ``start_line`` is the 1-based physical line on which the row begins.
    Whitespace-only lines are not yielded.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    blank = True  # only whitespace seen since the last row boundary
    line = 1
    start_line = 1

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < n and text[i + 1] == '"':
                    current.append('"')
                    i += 2
                    continue
                in_quotes = False
            else:
                if ch == "\n":
                    line += 1
                current.append(ch)
        elif ch == '"':
            in_quotes = True
            blank = False
        elif ch == ",":
            fields.append("".join(current).strip())
            current = []
            blank = False
        elif ch == "\r" and i + 1 < n and text[i + 1] == "\n":
            pass  # row terminator; the "\n" ends the row
        elif ch == "\n":
            if not blank:
                fields.append("".join(current).strip())
                yield start_line, fields
            fields = []
            current = []
            blank = True
            line += 1
            start_line = line
        else:
            current.append(ch)
            if not ch.isspace():
                blank = False
        i += 1

    # flush on EOF (no trailing newline, or an unterminated quote)
    if not blank:
        fields.append("".join(current).strip())
        yield start_line, fields
