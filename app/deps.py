# app/deps.py
# Role: Shared application-level dependencies and globals.
#       Provides the Jinja2 templates loader, the per-domain CSV import panels,
#       and the standard SQLAlchemy database session / record store dependencies.

"""
Shared dependencies and globals for the finance tracker app.
"""

from typing import Dict, Generator

from fastapi import Depends, HTTPException
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

import config
import db as database
from app.services.import_pipeline import IMPORT_DOMAINS
from app.services.intake import ImportPanel
from app.services.store import RecordStore

# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------

# Jinja2 templates loader (used by all HTML-rendering routes)
templates = Jinja2Templates(directory=str(config.TEMPLATES_DIR))

# -------------------------------------------------------------------
# In-memory import panels
# -------------------------------------------------------------------

# One panel per import domain ("transactions", "investments").
# Each keeps its own selected file and feedback between the
# select -> run steps, so the two imports never interfere.
IMPORT_PANELS: Dict[str, ImportPanel] = {
    name: ImportPanel(domain) for name, domain in IMPORT_DOMAINS.items()
}


def get_panel(domain: str) -> ImportPanel:
    """Path-parameter dependency: the import panel for `domain` or 404."""
    panel = IMPORT_PANELS.get(domain)
    if panel is None:
        raise HTTPException(status_code=404, detail=f"Unknown import type {domain!r}")
    return panel


# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)
