from __future__ import annotations

from typing import Any

import psycopg2
from psycopg2 import sql
from psycopg2.extras import RealDictCursor

from pharma_import.models.category import ExternalCategory

from .product_store import StoreError

"""PostgreSQL-backed product store and category source (psycopg2).

Every write is committed on its own: an import is a series of independent
row writes, never one batch transaction. A failed statement is rolled back so
the connection stays usable for the next row.
"""

__all__ = [
    "PostgresProductStore",
    "PostgresCategorySource",
]


class PostgresProductStore:
    def __init__(self, conn: Any, table: str = "products") -> None:
        self.conn = conn
        self.table = sql.Identifier(table)

    def _find(self, column: str, value: str) -> dict[str, Any] | None:
        query = sql.SQL("SELECT * FROM {} WHERE {} = %s ORDER BY id LIMIT 1").format(
            self.table, sql.Identifier(column)
        )
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(query, (value,))
                row = cur.fetchone()
            # close the read transaction
            self.conn.commit()
        except psycopg2.Error as e:
            self.conn.rollback()
            raise StoreError(str(e).strip()) from e
        if row is None:
            return None
        found = dict(row)
        found["id"] = str(found["id"])
        return found

    def find_by_sku(self, sku: str) -> dict[str, Any] | None:
        return self._find("sku", sku)

    def find_by_barcode(self, barcode: str) -> dict[str, Any] | None:
        return self._find("barcode", barcode)

    def upsert(self, record: dict[str, Any], existing_id: str | None = None) -> str:
        if existing_id is not None:
            self.update(existing_id, record)
            return existing_id

        columns = list(record)
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING id").format(
            self.table,
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        )
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, [record[c] for c in columns])
                product_id = cur.fetchone()[0]
            self.conn.commit()
        except psycopg2.Error as e:
            self.conn.rollback()
            raise StoreError(str(e).strip()) from e
        return str(product_id)

    def update(self, product_id: str, fields: dict[str, Any]) -> None:
        columns = list(fields)
        query = sql.SQL("UPDATE {} SET {} WHERE id = %s").format(
            self.table,
            sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(c)) for c in columns
            ),
        )
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, [*(fields[c] for c in columns), product_id])
                updated = cur.rowcount
            self.conn.commit()
        except psycopg2.Error as e:
            self.conn.rollback()
            raise StoreError(str(e).strip()) from e
        if updated == 0:
            raise StoreError(f"product not found: id={product_id}")


class PostgresCategorySource:
    def __init__(self, conn: Any, table: str = "categories") -> None:
        self.conn = conn
        self.table = sql.Identifier(table)

    def fetch_all(self) -> list[ExternalCategory]:
        """Fetch every category; list order is the match priority."""
        query = sql.SQL(
            "SELECT id, name_th, name_en FROM {} ORDER BY sort_order, name_th"
        ).format(self.table)
        try:
            with self.conn.cursor() as cur:
                cur.execute(query)
                rows = cur.fetchall()
            self.conn.commit()
        except psycopg2.Error as e:
            self.conn.rollback()
            raise StoreError(str(e).strip()) from e
        return [
            ExternalCategory(id=str(cid), name_local=name_th or "", name_alt=name_en or None)
            for cid, name_th, name_en in rows
        ]
