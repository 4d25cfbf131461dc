# app/services/feedback.py
"""
User-facing feedback for the import panels.

Feedback keeps the severity and the message apart, so a message that
contains a colon is shown in full.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from app.services.import_pipeline import MAX_IMPORT_BATCH, ImportOutcome, OutcomeKind


class Severity(str, enum.Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


# (css class, icon name) per severity, used by templates/import.html
_STYLES = {
    Severity.SUCCESS: ("feedback-success", "check-circle"),
    Severity.WARNING: ("feedback-warning", "alert-circle"),
    Severity.ERROR: ("feedback-error", "x-circle"),
    Severity.INFO: ("feedback-info", "alert-circle"),
}


@dataclass(frozen=True)
class Feedback:
    severity: Severity
    message: str

    @property
    def css_class(self) -> str:
        return _STYLES[self.severity][0]

    @property
    def icon(self) -> str:
        return _STYLES[self.severity][1]

    def to_dict(self) -> dict:
        return {"severity": self.severity.value, "message": self.message}

    @classmethod
    def success(cls, message: str) -> "Feedback":
        return cls(Severity.SUCCESS, message)

    @classmethod
    def warning(cls, message: str) -> "Feedback":
        return cls(Severity.WARNING, message)

    @classmethod
    def error(cls, message: str) -> "Feedback":
        return cls(Severity.ERROR, message)

    @classmethod
    def info(cls, message: str) -> "Feedback":
        return cls(Severity.INFO, message)


UNSUPPORTED_FILE = Feedback.error("Please upload a CSV file.")
NO_FILE_SELECTED = Feedback.error("Please select a CSV file first.")


def in_progress(label: str) -> Feedback:
    return Feedback.info(f"Importing {label}...")


def feedback_for(outcome: ImportOutcome) -> Feedback:
    """Map a terminal import outcome to the message shown to the user."""
    label = outcome.domain.label
    kind = outcome.kind

    if kind is OutcomeKind.IMPORT_SUCCEEDED:
        return Feedback.success(f"{outcome.imported} {outcome.domain.noun}(s) imported successfully!")

    if kind is OutcomeKind.IMPORT_SUCCEEDED_WITH_WARNINGS:
        return Feedback.warning(
            f"{outcome.imported} {label} imported. {len(outcome.errors)} rows had issues."
        )

    if kind is OutcomeKind.BATCH_TOO_LARGE:
        details = outcome.errors + [
            f"File has {outcome.attempted} {label}, exceeding {MAX_IMPORT_BATCH} limit per import."
        ]
        return Feedback.error(f"Import failed. {' '.join(details)}")

    if kind is OutcomeKind.IMPORT_FAILED:
        return Feedback.error(f"Error importing {label}: {outcome.detail}")

    if kind is OutcomeKind.PARSE_FAILED:
        return Feedback.error(f"Error parsing CSV file: {outcome.detail}")

    if kind is OutcomeKind.EMPTY_FILE:
        return Feedback.error("The CSV file appears to be empty.")

    # NO_VALID_ROWS
    if outcome.errors:
        return Feedback.error(f"No {label} were imported. {' '.join(outcome.errors)}")
    return Feedback.error(
        f"No valid {label} found in the file. Please check file content and format."
    )
