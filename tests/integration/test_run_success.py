from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from pharma_import.cli import main as cli_main
from pharma_import.csvtext.template import render_template
from pharma_import.db.product_store import InMemoryCategorySource, InMemoryProductStore
from pharma_import.logging.error_log import ErrorLogBuffer
from pharma_import.logging.init import reset_logging
from pharma_import.models.category import ExternalCategory
from pharma_import.services.channel_import import ChannelImportSession
from pharma_import.services.orchestrator import ImportSession


def test_cli_template_then_import(write_config, temp_workdir: Path, monkeypatch, capsys):
    """The downloadable template imports cleanly end to end (mock store)."""
    reset_logging()
    monkeypatch.setenv('DISABLE_DB_CONNECT', '1')
    assert cli_main(['--template', str(temp_workdir / 'data')]) == 0

    code = cli_main(['--file', str(temp_workdir / 'data' / 'product_import_template.csv')])
    out = capsys.readouterr().out
    reset_logging()

    assert code == 0
    assert 'SUMMARY rows=1 valid=1 invalid=0 success=1 failed=0' in out
    # no error log is written for a clean run
    assert list((temp_workdir / 'logs').glob('errors-*.log')) == []


def test_product_then_channel_import_on_same_store(tmp_path: Path):
    store = InMemoryProductStore()
    categories = InMemoryCategorySource([ExternalCategory(id='c1', name_local='ยาสามัญ')])
    error_log = ErrorLogBuffer(tmp_path / 'logs')

    products = ImportSession(categories, error_log=error_log)
    products.load_text(
        render_template() + '\nSKU002,8850002,"วิตามินซี, 1000mg",,107,60,12,ขวด,"ทานวันละ\nหนึ่งเม็ด",วิตามิน\n'
    )
    outcome = products.commit(store, show_progress=False)
    assert outcome.success_count == 2

    vit = store.find_by_sku('SKU002')
    assert vit['name_th'] == 'วิตามินซี, 1000mg'
    assert vit['description_th'] == 'ทานวันละ\nหนึ่งเม็ด'
    assert vit['selling_price_excl_vat'] == Decimal('100.00')
    assert 'category_id' not in vit
    assert store.find_by_sku('SKU001')['category_id'] == 'c1'

    channels = ChannelImportSession(store, error_log=error_log)
    channels.load_text('บาร์โค้ด,ขาย Shopee,ราคา Shopee\n8850002,Y,115\n')
    channel_outcome = channels.commit(store, show_progress=False)

    assert channel_outcome.success_count == 1
    vit = store.find_by_sku('SKU002')
    assert vit['sell_on_shopee'] is True
    assert vit['price_shopee'] == Decimal('115')
    assert len(store) == 2
    assert error_log.flush() is None


def test_reimport_is_idempotent(write_config, temp_workdir: Path, write_csv: Path):
    store = InMemoryProductStore()
    error_log = ErrorLogBuffer(temp_workdir / 'logs')

    for _ in range(2):
        session = ImportSession(error_log=error_log)
        session.load_file(write_csv)
        outcome = session.commit(store, show_progress=False)
        assert outcome.success_count == 2

    assert len(store) == 2
    log_files = list((temp_workdir / 'logs').glob('errors-*.log'))
    assert len(log_files) == 1
    rows = [json.loads(line)['row'] for line in log_files[0].read_text(encoding='utf-8').splitlines()]
    # the invalid row is reported once per run
    assert rows == [4, 4]
