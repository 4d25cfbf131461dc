# app/services/import_pipeline.py
"""
CSV import pipeline shared by transaction and investment imports.

    read_csv_rows -> validate_rows -> commit_batch -> ImportOutcome

The per-domain differences (required columns, row validator, ORM builder,
target table) live in an ImportDomain descriptor; the control flow is the
same for every domain.

Row problems are collected and the row is skipped. Batch problems (empty
file, nothing valid, too many rows) and transport problems (unreadable CSV,
rejected commit) end the import with nothing written.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple

import config
from app.logging_setup import get_logger
from app.services.csv_import import CsvParseError, read_csv_rows
from app.services.import_helpers import build_investment_from_dict, build_transaction_from_dict
from app.services.store import CommitError, RecordStore
from app.services.validators import (
    INVESTMENT_FIELDS,
    TRANSACTION_FIELDS,
    RowError,
    RowIssue,
    validate_investment_row,
    validate_transaction_row,
)
from models import Investment, Transaction

logger = get_logger("import")

MAX_IMPORT_BATCH = config.MAX_IMPORT_BATCH


@dataclass(frozen=True)
class ImportDomain:
    """Everything that differs between the import flavours."""

    name: str
    # plural noun used in user-facing messages, e.g. "transactions"
    label: str
    # singular noun, e.g. "transaction"
    noun: str
    required_fields: Tuple[str, ...]
    optional_fields: Tuple[str, ...]
    validate_row: Callable[[Dict[str, Any]], Dict[str, Any]]
    build_record: Callable[[Dict[str, Any]], Any]
    model: Any

    @property
    def header(self) -> str:
        return ", ".join(self.required_fields + self.optional_fields)


TRANSACTION_IMPORT = ImportDomain(
    name="transactions",
    label="transactions",
    noun="transaction",
    required_fields=TRANSACTION_FIELDS,
    optional_fields=("Category",),
    validate_row=validate_transaction_row,
    build_record=build_transaction_from_dict,
    model=Transaction,
)

INVESTMENT_IMPORT = ImportDomain(
    name="investments",
    label="investments",
    noun="investment",
    required_fields=INVESTMENT_FIELDS,
    optional_fields=("Notes",),
    validate_row=validate_investment_row,
    build_record=build_investment_from_dict,
    model=Investment,
)

IMPORT_DOMAINS: Dict[str, ImportDomain] = {
    TRANSACTION_IMPORT.name: TRANSACTION_IMPORT,
    INVESTMENT_IMPORT.name: INVESTMENT_IMPORT,
}


# -------------------------------------------------------------------
# Validation
# -------------------------------------------------------------------

@dataclass
class ValidationResult:
    records: List[Dict[str, Any]] = field(default_factory=list)
    issues: List[RowIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        return [issue.message for issue in self.issues]


def validate_rows(domain: ImportDomain, rows: Sequence[Dict[str, Any]]) -> ValidationResult:
    """
    Validate every row. Each row ends up either in `records` (normalized)
    or in `issues`, never both. Does not raise for bad rows.
    """
    result = ValidationResult()
    for index, row in enumerate(rows):
        display_row = index + 2  # row 1 = header
        try:
            result.records.append(domain.validate_row(row))
        except RowError as e:
            result.issues.append(RowIssue(row=display_row, kind=e.kind, reason=e.reason))
    return result


# -------------------------------------------------------------------
# Outcome
# -------------------------------------------------------------------

class OutcomeKind(str, enum.Enum):
    IMPORT_SUCCEEDED = "ImportSucceeded"
    IMPORT_SUCCEEDED_WITH_WARNINGS = "ImportSucceededWithWarnings"
    EMPTY_FILE = "EmptyFile"
    NO_VALID_ROWS = "NoValidRows"
    BATCH_TOO_LARGE = "BatchTooLarge"
    IMPORT_FAILED = "ImportFailed"
    PARSE_FAILED = "ParseFailed"


# Failures caused outside this pipeline; the same file may succeed on retry
TRANSPORT_FAILURES = frozenset({OutcomeKind.IMPORT_FAILED, OutcomeKind.PARSE_FAILED})


@dataclass
class ImportOutcome:
    kind: OutcomeKind
    domain: ImportDomain
    imported: int = 0
    # number of valid records the import tried to write
    attempted: int = 0
    errors: List[str] = field(default_factory=list)
    # underlying store / parser message for transport failures
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.kind in (
            OutcomeKind.IMPORT_SUCCEEDED,
            OutcomeKind.IMPORT_SUCCEEDED_WITH_WARNINGS,
        )

    @property
    def is_transport_failure(self) -> bool:
        return self.kind in TRANSPORT_FAILURES

    def to_dict(self) -> dict:
        return {
            "outcome": self.kind.value,
            "imported": self.imported,
            "attempted": self.attempted,
            "errors": list(self.errors),
            "detail": self.detail,
        }


# -------------------------------------------------------------------
# Batch limiter & commit
# -------------------------------------------------------------------

def commit_batch(
    domain: ImportDomain,
    store: RecordStore,
    rows: Sequence[Dict[str, Any]],
) -> ImportOutcome:
    """
    Validate `rows` and write the valid ones in a single atomic batch.
    """
    result = validate_rows(domain, rows)
    records, errors = result.records, result.errors

    if rows and not records and not errors:
        return ImportOutcome(OutcomeKind.NO_VALID_ROWS, domain)

    if not rows:
        return ImportOutcome(OutcomeKind.EMPTY_FILE, domain)

    if not records:
        logger.warning("CSV import row errors (%s): %s", domain.name, errors)
        return ImportOutcome(OutcomeKind.NO_VALID_ROWS, domain, errors=errors)

    if len(records) > MAX_IMPORT_BATCH:
        logger.warning(
            "Rejected %s import: %d valid rows exceed the limit of %d",
            domain.name, len(records), MAX_IMPORT_BATCH,
        )
        return ImportOutcome(
            OutcomeKind.BATCH_TOO_LARGE,
            domain,
            attempted=len(records),
            errors=errors,
        )

    try:
        imported = store.batch_write(domain.build_record(r) for r in records)
    except CommitError as e:
        return ImportOutcome(
            OutcomeKind.IMPORT_FAILED,
            domain,
            attempted=len(records),
            errors=errors,
            detail=str(e),
        )

    if errors:
        logger.warning("CSV import row errors (%s): %s", domain.name, errors)
        return ImportOutcome(
            OutcomeKind.IMPORT_SUCCEEDED_WITH_WARNINGS,
            domain,
            imported=imported,
            attempted=len(records),
            errors=errors,
        )

    logger.info("Imported %d %s from CSV", imported, domain.name)
    return ImportOutcome(
        OutcomeKind.IMPORT_SUCCEEDED,
        domain,
        imported=imported,
        attempted=len(records),
    )


def run_import(domain: ImportDomain, store: RecordStore, content: str | bytes) -> ImportOutcome:
    """Parse CSV `content` and commit its valid rows for `domain`."""
    try:
        rows = read_csv_rows(content)
    except CsvParseError as e:
        logger.error("Error parsing %s CSV: %s", domain.name, e)
        return ImportOutcome(OutcomeKind.PARSE_FAILED, domain, detail=str(e))

    return commit_batch(domain, store, rows)
