# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pytest

from pharma_import.logging.error_log import ErrorLogBuffer
from pharma_import.models.category import ExternalCategory


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: pharmacy
tables:
  products: products
  categories: categories
defaults:
  unit: ชิ้น
  min_stock_level: 10
error_log_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def error_log(tmp_path: Path) -> ErrorLogBuffer:
    return ErrorLogBuffer(tmp_path / "logs")


@pytest.fixture()
def categories() -> list[ExternalCategory]:
    return [
        ExternalCategory(id="c1", name_local="ยาสามัญ", name_alt="General Medicine"),
        ExternalCategory(id="c2", name_local="วิตามิน", name_alt="Vitamins"),
        ExternalCategory(id="c3", name_local="ยาแก้ปวด", name_alt="Pain Relief"),
    ]


@pytest.fixture()
def sample_csv() -> str:
    return (
        "รหัสสินค้า,บาร์โค้ด,ชื่อสินค้า,ราคาขาย,จำนวนคงเหลือ,หมวดหมู่\n"
        "SKU001,8850001,พาราเซตามอล 500mg,35,100,ยาสามัญ\n"
        "SKU002,8850002,วิตามินซี,107,20,Vitamins\n"
        "SKU003,,,50,5,\n"
    )


@pytest.fixture()
def write_csv(temp_workdir: Path, sample_csv: str) -> Path:
    f = temp_workdir / "data" / "products.csv"
    f.write_text(sample_csv, encoding="utf-8")
    return f
