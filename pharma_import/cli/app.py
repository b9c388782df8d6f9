from __future__ import annotations

import argparse
import os
import signal
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from pharma_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from pharma_import.csvtext.template import write_template
from pharma_import.db.connection import db_connection
from pharma_import.db.postgres import PostgresCategorySource, PostgresProductStore
from pharma_import.db.product_store import (
    CategorySource,
    InMemoryCategorySource,
    InMemoryProductStore,
    ProductStore,
)
from pharma_import.logging.error_log import ErrorLogBuffer
from pharma_import.logging.init import get_logger, log_summary, setup_logging
from pharma_import.models.config_models import ImportConfig
from pharma_import.services.channel_import import ChannelImportSession
from pharma_import.services.orchestrator import (
    AcquisitionError,
    BaseImportSession,
    ImportSession,
    NoValidRowsError,
)
from pharma_import.services.preview import render_preview
from pharma_import.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env and config
- Acquire CSV text (--file or --paste from stdin)
- Parse and print the preview table
- Commit valid rows (skipped with --dry-run)
- Print per-row failures and the SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True lets .env values win over variables already in the process
    environment, so connection settings in .env take priority.
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Pharmacy product CSV importer")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="YAML config path")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--file", help="CSV file to import")
    src.add_argument("--paste", action="store_true", help="Read CSV text from stdin")
    p.add_argument(
        "--channels", action="store_true", help="Import sales-channel listings instead of products"
    )
    p.add_argument("--dry-run", action="store_true", help="Parse and preview only, write nothing")
    p.add_argument("--template", metavar="OUT", help="Write the CSV template to OUT and exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


class _CancelFlag:
    """Ctrl-C during commit finishes the current row, then stops."""

    def __init__(self) -> None:
        self.requested = False

    def __call__(self) -> bool:
        return self.requested

    def _handle(self, signum: int, frame: object) -> None:
        self.requested = True
        get_logger().warning("interrupt received: finishing the current row")

    @contextmanager
    def installed(self) -> Iterator[_CancelFlag]:
        try:
            previous = signal.signal(signal.SIGINT, self._handle)
        except ValueError:  # not on the main thread
            yield self
            return
        try:
            yield self
        finally:
            signal.signal(signal.SIGINT, previous)


def _build_session(
    args: argparse.Namespace,
    cfg: ImportConfig,
    store: ProductStore,
    categories: CategorySource,
) -> BaseImportSession:
    error_log = ErrorLogBuffer(Path(cfg.error_log_dir))
    if args.channels:
        return ChannelImportSession(store, error_log=error_log)
    return ImportSession(categories, defaults=cfg.defaults, error_log=error_log)


def _run(
    args: argparse.Namespace,
    cfg: ImportConfig,
    store: ProductStore,
    categories: CategorySource,
    mode: str,
) -> int:
    logger = get_logger()
    session = _build_session(args, cfg, store, categories)

    try:
        if args.file:
            session.load_file(Path(args.file))
        else:
            session.load_text(sys.stdin.read())
    except AcquisitionError as e:
        logger.error(f"acquisition: {e}")
        return EXIT_FATAL

    print(render_preview(session.candidates))
    for c in session.candidates:
        if not c.is_valid:
            logger.warning(f"row {c.row_number}: {'; '.join(c.errors)}")

    total = len(session.candidates)
    valid = session.valid_count

    if args.dry_run:
        logger.info(f"mode={mode} dry run: nothing written")
        # log_summary adds the "SUMMARY " prefix
        log_summary(render_summary_line(total, valid, None)[len("SUMMARY "):])
        return EXIT_SUCCESS_ALL if session.invalid_count == 0 else EXIT_PARTIAL_FAILURE

    cancel = _CancelFlag()
    try:
        with cancel.installed():
            outcome = session.commit(store, should_cancel=cancel)
    except NoValidRowsError as e:
        logger.error(f"import: {e}")
        return EXIT_FATAL

    for line in outcome.errors:
        logger.error(line)
    logger.info(f"mode={mode} success={outcome.success_count} failed={outcome.failure_count}")
    log_summary(render_summary_line(total, valid, outcome)[len("SUMMARY "):])

    if outcome.failure_count or session.invalid_count or outcome.cancelled:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None only: an empty list from tests must not pick up pytest's own argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    if args.template:
        path = write_template(Path(args.template), channels=args.channels)
        logger.info(f"template written: {path}")
        return EXIT_SUCCESS_ALL

    if not args.file and not args.paste:
        logger.error("no input: use --file PATH or --paste")
        return EXIT_FATAL

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(Path(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    # DISABLE_DB_CONNECT=1 runs against an empty in-memory store (tests, rehearsals)
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> in-memory store")
        return _run(args, cfg, InMemoryProductStore(), InMemoryCategorySource(), mode="mock")

    try:
        with db_connection(cfg.database) as conn:
            store = PostgresProductStore(conn, cfg.tables.products)
            categories = PostgresCategorySource(conn, cfg.tables.categories)
            return _run(args, cfg, store, categories, mode="live")
    except psycopg2.OperationalError as e:
        logger.error(f"database: {str(e).strip()}")
        return EXIT_FATAL
