from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2

from pharma_import.models.config_models import DatabaseConfig

"""psycopg2 connection handling.

Resolution order for connection parameters:
    1. DATABASE_URL / PGDSN environment variables (full DSN)
    2. database.dsn from the config file
    3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each falling back
       to the matching database.* value from the config file
The CLI loads .env with override=True first, so .env values win over the
process environment.
"""

__all__ = [
    "resolve_dsn",
    "db_connection",
]


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def db_connection(db_cfg: DatabaseConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Yield a psycopg2 connection; the stores commit per row themselves."""
    conn = psycopg2.connect(resolve_dsn(db_cfg))
    conn.autocommit = False
    try:
        yield conn
    finally:
        conn.close()
