from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest
import yaml

from pharma_import.config.loader import SCHEMA_PATH


@pytest.fixture()
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_bundled_sample_config_is_valid(schema):
    sample = Path(__file__).resolve().parents[2] / "config" / "import.yml"
    data = yaml.safe_load(sample.read_text(encoding="utf-8"))
    jsonschema.validate(data, schema)


def test_minimal_config_is_valid(schema):
    jsonschema.validate({"database": {}}, schema)


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"database": {"port": "5432"}},
        {"database": {}, "tables": {"products": "1bad"}},
        {"database": {}, "defaults": {"min_stock_level": -1}},
        {"database": {}, "error_log_dir": ""},
        {"database": {}, "extra": True},
    ],
)
def test_invalid_configs_rejected(schema, data):
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(data, schema)
