from __future__ import annotations

from unittest.mock import MagicMock

import psycopg2
import pytest

from pharma_import.db.connection import resolve_dsn
from pharma_import.db.postgres import PostgresCategorySource, PostgresProductStore
from pharma_import.db.product_store import (
    InMemoryCategorySource,
    InMemoryProductStore,
    StoreError,
)
from pharma_import.models.category import ExternalCategory
from pharma_import.models.config_models import DatabaseConfig


class TestInMemoryProductStore:
    def test_insert_assigns_sequential_ids(self):
        store = InMemoryProductStore()
        assert store.upsert({"sku": "A1"}) == "1"
        assert store.upsert({"sku": "A2"}) == "2"
        assert len(store) == 2

    def test_find_by_sku_and_barcode(self):
        store = InMemoryProductStore([{"sku": "A1", "barcode": "885"}])
        assert store.find_by_sku("A1")["id"] == "1"
        assert store.find_by_barcode("885")["id"] == "1"
        assert store.find_by_sku("nope") is None

    def test_upsert_with_existing_id_merges_fields(self):
        store = InMemoryProductStore([{"sku": "A1", "name_th": "old", "sell_on_grab": True}])
        assert store.upsert({"sku": "A1", "name_th": "new"}, "1") == "1"
        rec = store.get("1")
        assert rec["name_th"] == "new"
        assert rec["sell_on_grab"] is True
        assert len(store) == 1

    def test_returned_records_are_copies(self):
        store = InMemoryProductStore([{"sku": "A1"}])
        found = store.find_by_sku("A1")
        found["sku"] = "changed"
        assert store.get("1")["sku"] == "A1"

    def test_update_unknown_id_raises(self):
        with pytest.raises(StoreError):
            InMemoryProductStore().update("42", {"price_grab": 1})


def test_in_memory_category_source_returns_copy():
    cats = [ExternalCategory(id="c1", name_local="ยา")]
    source = InMemoryCategorySource(cats)
    fetched = source.fetch_all()
    fetched.clear()
    assert source.fetch_all() == cats


def _mock_conn() -> tuple[MagicMock, MagicMock]:
    conn = MagicMock()
    cur = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cur
    return conn, cur


class TestPostgresProductStore:
    def test_find_returns_dict_with_string_id(self):
        conn, cur = _mock_conn()
        cur.fetchone.return_value = {"id": 7, "sku": "A1"}
        store = PostgresProductStore(conn)

        found = store.find_by_sku("A1")

        assert found == {"id": "7", "sku": "A1"}
        assert cur.execute.call_args[0][1] == ("A1",)
        conn.commit.assert_called_once()

    def test_find_not_found(self):
        conn, cur = _mock_conn()
        cur.fetchone.return_value = None
        assert PostgresProductStore(conn).find_by_barcode("885") is None

    def test_insert_returns_new_id_and_commits(self):
        conn, cur = _mock_conn()
        cur.fetchone.return_value = (12,)
        store = PostgresProductStore(conn)

        product_id = store.upsert({"sku": "A1", "name_th": "X"})

        assert product_id == "12"
        assert cur.execute.call_args[0][1] == ["A1", "X"]
        conn.commit.assert_called_once()

    def test_update_passes_id_last(self):
        conn, cur = _mock_conn()
        cur.rowcount = 1
        store = PostgresProductStore(conn)

        assert store.upsert({"name_th": "Y"}, "5") == "5"
        assert cur.execute.call_args[0][1] == ["Y", "5"]

    def test_update_missing_row_raises(self):
        conn, cur = _mock_conn()
        cur.rowcount = 0
        with pytest.raises(StoreError, match="product not found"):
            PostgresProductStore(conn).update("5", {"price_grab": 1})

    def test_failed_statement_rolls_back(self):
        conn, cur = _mock_conn()
        cur.execute.side_effect = psycopg2.Error("duplicate key value")
        store = PostgresProductStore(conn)

        with pytest.raises(StoreError, match="duplicate key value"):
            store.upsert({"sku": "A1"})
        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()


def test_postgres_category_source_maps_rows():
    conn, cur = _mock_conn()
    cur.fetchall.return_value = [(1, "ยาสามัญ", "General"), (2, "วิตามิน", None)]

    cats = PostgresCategorySource(conn).fetch_all()

    assert cats == [
        ExternalCategory(id="1", name_local="ยาสามัญ", name_alt="General"),
        ExternalCategory(id="2", name_local="วิตามิน", name_alt=None),
    ]


class TestResolveDsn:
    @pytest.fixture(autouse=True)
    def _clear_env(self, monkeypatch):
        for var in ("DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE"):
            monkeypatch.delenv(var, raising=False)

    def test_database_url_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://env/db")
        assert resolve_dsn(DatabaseConfig(dsn="postgresql://cfg/db")) == "postgresql://env/db"

    def test_config_dsn(self):
        assert resolve_dsn(DatabaseConfig(dsn="postgresql://cfg/db")) == "postgresql://cfg/db"

    def test_env_overrides_config_fields(self, monkeypatch):
        monkeypatch.setenv("PGHOST", "db.internal")
        dsn = resolve_dsn(DatabaseConfig(host="localhost", port=5433, user="app", database="pharmacy"))
        assert dsn == "host=db.internal port=5433 user=app dbname=pharmacy"

    def test_password_included_when_set(self):
        dsn = resolve_dsn(DatabaseConfig(password="secret"))
        assert dsn == "host=localhost port=5432 user=postgres dbname=postgres password=secret"
