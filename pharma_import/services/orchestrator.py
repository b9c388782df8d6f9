from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn

from ..csvtext.tokenizer import tokenize
from ..db.product_store import CategorySource, ProductStore
from ..logging.error_log import (
    ACQUISITION_ERROR,
    COMMIT_ERROR,
    ROW_INVALID,
    ErrorLogBuffer,
)
from ..mapping.numbers import price_incl_tax
from ..mapping.row_mapper import map_rows
from ..models.candidate import ProductCandidate
from ..models.category import ExternalCategory
from ..models.config_models import ProductDefaults
from ..models.import_state import ImportState
from ..models.outcome import ImportOutcome, OutcomeAccumulator
from ..models.raw_row import ParsedTable
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Import orchestration: acquire -> parse -> preview -> commit.

ImportSession drives one import flow through the states
IDLE -> PARSING -> PREVIEWING -> IMPORTING -> DONE (-> IDLE on reset).

Commit rules:
- Only valid candidates are written; invalid ones are reported, never attempted
- Rows are written strictly in input order, one at a time, so a later row
  updating the same sku/barcode as an earlier one is applied last
- Each row is looked up and written through commit_one(); a failure there is
  recorded against that row and the loop moves on
- There is no transaction spanning the batch
"""

__all__ = [
    "ImportPipelineError",
    "AcquisitionError",
    "NoValidRowsError",
    "InvalidStateError",
    "CommitResult",
    "PASTE_SOURCE",
    "read_source_file",
    "build_product_record",
    "find_existing",
    "commit_one",
    "BaseImportSession",
    "ImportSession",
]

PASTE_SOURCE = "<paste>"


class ImportPipelineError(Exception):
    """Base exception for pipeline-level aborts."""


class AcquisitionError(ImportPipelineError):
    """The source text could not be obtained or parsed; nothing was previewed."""


class NoValidRowsError(ImportPipelineError):
    """Commit requested but no candidate passed validation."""


class InvalidStateError(ImportPipelineError):
    """Operation not allowed in the session's current state."""


@dataclass(frozen=True)
class CommitResult:
    """Result of writing a single candidate."""
    row_number: int
    ok: bool
    product_id: str | None = None
    created: bool = False
    error: str | None = None


def read_source_file(path: Path) -> str:
    """Read an uploaded CSV file as text.

    Raises:
        AcquisitionError: Wrong suffix, unreadable file or undecodable content
    """
    if path.suffix.lower() != ".csv":
        raise AcquisitionError(f"not a .csv file: {path.name}")
    try:
        # utf-8-sig drops the BOM written by spreadsheet exports
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise AcquisitionError(f"cannot read {path.name}: {e}") from e


def build_product_record(candidate: ProductCandidate, defaults: ProductDefaults) -> dict[str, Any]:
    """Build the store representation of a candidate.

    The VAT-inclusive price is recomputed from the exclusive one and stored
    alongside it; ``category_id`` is only present when a category was resolved.
    """
    record: dict[str, Any] = {
        "sku": candidate.sku,
        "barcode": candidate.barcode,
        "name_th": candidate.name_local,
        "name_en": candidate.name_alt,
        "base_price": candidate.price_excl_tax,
        "selling_price_excl_vat": candidate.price_excl_tax,
        "selling_price_incl_vat": price_incl_tax(candidate.price_excl_tax),
        "cost_price": candidate.cost_price,
        "stock_quantity": candidate.stock_quantity,
        "min_stock_level": defaults.min_stock_level,
        "unit": candidate.unit,
        "description_th": candidate.description_local,
        "is_active": defaults.is_active,
        "product_type": defaults.product_type,
        "stock_tracking_type": defaults.stock_tracking_type,
    }
    if candidate.category_id is not None:
        record["category_id"] = candidate.category_id
    return record


def find_existing(candidate: ProductCandidate, store: ProductStore) -> dict[str, Any] | None:
    """Locate the record a candidate updates: by sku first, then by barcode."""
    existing = store.find_by_sku(candidate.sku) if candidate.sku else None
    if existing is None and candidate.barcode:
        existing = store.find_by_barcode(candidate.barcode)
    return existing


def commit_one(
    candidate: ProductCandidate,
    store: ProductStore,
    defaults: ProductDefaults | None = None,
) -> CommitResult:
    """Look up and write one candidate. Never raises for store failures."""
    defaults = defaults or ProductDefaults()
    try:
        existing = find_existing(candidate, store)
        record = build_product_record(candidate, defaults)
        existing_id = str(existing["id"]) if existing is not None else None
        product_id = store.upsert(record, existing_id)
    except Exception as e:  # row boundary: any failure belongs to this row only
        message = str(e) or e.__class__.__name__
        return CommitResult(row_number=candidate.row_number, ok=False, error=message)
    return CommitResult(
        row_number=candidate.row_number,
        ok=True,
        product_id=product_id,
        created=existing_id is None,
    )


class BaseImportSession:
    """State machine and commit loop shared by the product and channel imports.

    Subclasses provide ``_build_candidates`` (PARSING) and ``_commit_candidate``
    (IMPORTING).
    """

    progress_description = "Importing rows"

    def __init__(self, *, error_log: ErrorLogBuffer | None = None) -> None:
        self.error_log = error_log if error_log is not None else ErrorLogBuffer()
        self.state = ImportState.IDLE
        self.source: str | None = None
        self.candidates: list[Any] = []
        self.outcome: ImportOutcome | None = None

    # -- acquisition / parsing ---------------------------------------------

    def load_text(self, text: str, *, source: str = PASTE_SOURCE) -> list[Any]:
        """Parse CSV text into candidates and enter PREVIEWING.

        Raises:
            AcquisitionError: Empty text, or any failure while parsing. The
                session is back in IDLE with an empty preview.
        """
        self._require(ImportState.IDLE, ImportState.PREVIEWING, ImportState.DONE)
        self.outcome = None
        if not text or not text.strip():
            self._abort(source, "no CSV data supplied")

        self.state = ImportState.PARSING
        try:
            table = tokenize(text)
            candidates = self._build_candidates(table)
        except Exception as e:
            logger.debug("parse failed source=%s: %s", source, e, exc_info=True)
            self._abort(source, f"failed to read CSV data: {e}", cause=e)

        self.source = source
        self.candidates = candidates
        self.state = ImportState.PREVIEWING
        logger.info(
            "parsed source=%s rows=%d valid=%d invalid=%d",
            source,
            len(candidates),
            self.valid_count,
            self.invalid_count,
        )
        return candidates

    def load_file(self, path: Path) -> list[Any]:
        self._require(ImportState.IDLE, ImportState.PREVIEWING, ImportState.DONE)
        try:
            text = read_source_file(path)
        except AcquisitionError as e:
            self._abort(path.name, str(e), cause=e)
        return self.load_text(text, source=path.name)

    def _abort(self, source: str, message: str, cause: Exception | None = None) -> NoReturn:
        self.candidates = []
        self.source = None
        self.state = ImportState.IDLE
        self.error_log.record(source, -1, ACQUISITION_ERROR, message)
        self._flush_error_log()
        raise AcquisitionError(message) from cause

    def _build_candidates(self, table: ParsedTable) -> list[Any]:
        raise NotImplementedError

    # -- preview -----------------------------------------------------------

    @property
    def valid_candidates(self) -> list[Any]:
        return [c for c in self.candidates if c.is_valid]

    @property
    def valid_count(self) -> int:
        return len(self.valid_candidates)

    @property
    def invalid_count(self) -> int:
        return len(self.candidates) - self.valid_count

    # -- commit ------------------------------------------------------------

    def commit(
        self,
        store: ProductStore,
        *,
        show_progress: bool = True,
        should_cancel: Callable[[], bool] | None = None,
    ) -> ImportOutcome:
        """Write every valid candidate, in input order, one at a time.

        ``should_cancel`` is polled before each row. A row already being
        written always finishes; rows after the cancel point are counted as
        not attempted and the partial outcome is returned.

        Raises:
            NoValidRowsError: Nothing to commit; the session stays in PREVIEWING
        """
        self._require(ImportState.PREVIEWING)
        source = self.source or PASTE_SOURCE
        valid = self.valid_candidates
        if not valid:
            raise NoValidRowsError("no valid rows to import")

        for c in self.candidates:
            if not c.is_valid:
                self.error_log.record(source, c.row_number, ROW_INVALID, "; ".join(c.errors))

        self.state = ImportState.IMPORTING
        acc = OutcomeAccumulator()
        try:
            with ProgressTracker(
                len(valid), description=self.progress_description, enabled=show_progress
            ) as progress:
                for index, candidate in enumerate(valid):
                    if should_cancel is not None and should_cancel():
                        remaining = len(valid) - index
                        acc.mark_cancelled(remaining)
                        logger.warning("import cancelled: %d rows not attempted", remaining)
                        break
                    result = self._commit_candidate(candidate, store)
                    if result.ok:
                        acc.add_success()
                    else:
                        acc.add_failure(result.row_number, result.error or "unknown error")
                        self.error_log.record(
                            source, result.row_number, COMMIT_ERROR, result.error or ""
                        )
                        logger.debug("commit failed row=%d: %s", result.row_number, result.error)
                    progress.advance(result.ok)
        finally:
            self.outcome = acc.build()
            self.state = ImportState.DONE
            self._flush_error_log()
        return self.outcome

    def _commit_candidate(self, candidate: Any, store: ProductStore) -> CommitResult:
        raise NotImplementedError

    def reset(self) -> None:
        """Drop candidates and outcome; back to IDLE."""
        self.state = ImportState.IDLE
        self.source = None
        self.candidates = []
        self.outcome = None

    # -- helpers -----------------------------------------------------------

    def _require(self, *states: ImportState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise InvalidStateError(f"session is {self.state.value}; expected {allowed}")

    def _flush_error_log(self) -> None:
        try:
            path = self.error_log.flush()
        except OSError as e:
            logger.warning("could not write error log: %s", e)
            return
        if path is not None and path.exists():
            logger.debug("error log: %s", path)


class ImportSession(BaseImportSession):
    """Product CSV import (create or update products by sku / barcode)."""

    def __init__(
        self,
        category_source: CategorySource | None = None,
        *,
        defaults: ProductDefaults | None = None,
        error_log: ErrorLogBuffer | None = None,
    ) -> None:
        super().__init__(error_log=error_log)
        self.category_source = category_source
        self.defaults = defaults or ProductDefaults()
        self._categories: tuple[ExternalCategory, ...] | None = None

    @property
    def categories(self) -> tuple[ExternalCategory, ...]:
        """Category snapshot, fetched once per session."""
        if self._categories is None:
            fetched: Sequence[ExternalCategory] = (
                self.category_source.fetch_all() if self.category_source is not None else ()
            )
            self._categories = tuple(fetched)
            logger.debug("category snapshot: %d categories", len(self._categories))
        return self._categories

    def _build_candidates(self, table: ParsedTable) -> list[ProductCandidate]:
        return map_rows(table.rows, self.categories, default_unit=self.defaults.unit)

    def _commit_candidate(self, candidate: ProductCandidate, store: ProductStore) -> CommitResult:
        return commit_one(candidate, store, self.defaults)

    def reset(self) -> None:
        super().reset()
        self._categories = None
