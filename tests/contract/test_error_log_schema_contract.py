from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from pharma_import.db.product_store import InMemoryCategorySource, InMemoryProductStore
from pharma_import.logging.error_log import ErrorLogBuffer
from pharma_import.services.orchestrator import AcquisitionError, ImportSession

"""Error log JSON Lines contract.

Every line has exactly the keys timestamp, source, row, error_type, message.
"""

REQUIRED_KEYS = {"timestamp", "source", "row", "error_type", "message"}
ALLOWED_TYPES = {"ROW_INVALID", "COMMIT_ERROR", "ACQUISITION_ERROR"}
TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


class _RejectingStore(InMemoryProductStore):
    def upsert(self, record, existing_id=None):
        raise RuntimeError("insert rejected")


def test_error_log_lines_follow_schema(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    session = ImportSession(InMemoryCategorySource(), error_log=buf)
    session.load_text("sku,name\nA1,\nA2,Paracetamol\n", source="products.csv")
    session.commit(_RejectingStore(), show_progress=False)

    path = buf.flush()
    assert path is not None
    records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert len(records) == 2
    for rec in records:
        assert set(rec) == REQUIRED_KEYS
        assert rec["error_type"] in ALLOWED_TYPES
        assert TIMESTAMP_PATTERN.match(rec["timestamp"])
        assert rec["source"] == "products.csv"
        assert isinstance(rec["row"], int)
    assert [(r["row"], r["error_type"]) for r in records] == [
        (2, "ROW_INVALID"),
        (3, "COMMIT_ERROR"),
    ]


def test_source_level_errors_use_row_minus_one(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    session = ImportSession(error_log=buf)
    with pytest.raises(AcquisitionError):
        session.load_text("")
    path = buf.flush()
    assert path is not None
    (rec,) = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert rec["row"] == -1
    assert rec["source"] == "<paste>"
    assert rec["error_type"] == "ACQUISITION_ERROR"
