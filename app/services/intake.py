# app/services/intake.py
"""
File intake and per-domain import panel state.

An ImportPanel is the server-side state behind one "Import ... from CSV"
box: the selected file, the current feedback and the drag-over highlight.
Transaction and investment panels are separate objects and never share state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from app.logging_setup import get_logger
from app.services import feedback as fb
from app.services.import_pipeline import ImportDomain, ImportOutcome, run_import
from app.services.store import RecordStore

logger = get_logger("intake")

CSV_MIME_TYPE = "text/csv"


class UnsupportedFileType(ValueError):
    """The selected file is not a CSV file."""


def is_csv_upload(filename: str | None, content_type: str | None) -> bool:
    """
    Accept a file whose declared MIME type is text/csv or whose name ends
    with ".csv" (the suffix check is case-sensitive).
    """
    return content_type == CSV_MIME_TYPE or (filename or "").endswith(".csv")


@dataclass(frozen=True)
class SelectedFile:
    filename: str
    content_type: str | None
    content: bytes
    # "picker" or "drop"
    source: str = "picker"


class ImportPanel:
    def __init__(self, domain: ImportDomain):
        self.domain = domain
        self.selected: Optional[SelectedFile] = None
        self.feedback: Optional[fb.Feedback] = None
        self.drag_active = False
        self.last_outcome: Optional[ImportOutcome] = None
        self._reset_callbacks: List[Callable[[], None]] = []

    # ---- Intake ----

    def select_file(
        self,
        filename: str,
        content_type: str | None,
        content: bytes,
        source: str = "picker",
    ) -> SelectedFile:
        """
        Store a picked or dropped file for the next run().
        Raises UnsupportedFileType (and sets error feedback) for non-CSV files.
        """
        if not is_csv_upload(filename, content_type):
            self.feedback = fb.UNSUPPORTED_FILE
            raise UnsupportedFileType(f"{filename!r} ({content_type}) is not a CSV file")

        self.selected = SelectedFile(filename, content_type, content, source)
        self.feedback = None
        logger.debug("Selected %s for %s import via %s", filename, self.domain.name, source)
        return self.selected

    def handle_drag(self, event_type: str) -> bool:
        """Track the drop-zone highlight; returns the new drag_active flag."""
        if event_type in ("dragenter", "dragover"):
            self.drag_active = True
        elif event_type in ("dragleave", "drop"):
            self.drag_active = False
        return self.drag_active

    # ---- Reset ----

    def on_reset(self, callback: Callable[[], None]) -> None:
        """Register a callback run whenever the file selection is cleared."""
        self._reset_callbacks.append(callback)

    def reset(self) -> None:
        self.selected = None
        for callback in self._reset_callbacks:
            callback()

    # ---- Import ----

    @property
    def progress(self) -> fb.Feedback:
        """Shown by the page while the run request is in flight."""
        return fb.in_progress(self.domain.label)

    def run(self, store: RecordStore) -> Optional[ImportOutcome]:
        """
        Import the selected file. Returns the outcome, or None when no file
        is selected.

        The selection is cleared after every terminal outcome except
        transport failures (unreadable CSV, rejected commit), where the same
        file can be retried without picking it again.
        """
        if self.selected is None:
            self.feedback = fb.NO_FILE_SELECTED
            return None

        outcome = run_import(self.domain, store, self.selected.content)

        self.last_outcome = outcome
        self.feedback = fb.feedback_for(outcome)
        if not outcome.is_transport_failure:
            self.reset()
        return outcome
