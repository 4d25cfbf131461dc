"""Pytest configuration and fixtures.

Every test gets its own in-memory SQLite database. The app's module-level
engine is pointed at an in-memory URL before anything imports `db`, so no
test ever touches database/budgetflow.db.
"""

from __future__ import annotations

import logging
import os

os.environ["BUDGETFLOW_DB_URL"] = "sqlite://"

from typing import Iterator  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from db import init_db  # noqa: E402
from app.services.store import RecordStore  # noqa: E402

TRANSACTION_HEADER = "Date,Description,Amount,Type,Category"
INVESTMENT_HEADER = "Name,Type,PurchaseDate,PurchasePrice,Quantity,CurrentValue,Notes"


def make_csv(header: str, *lines: str) -> bytes:
    """Build CSV upload bytes from a header and data lines."""
    return ("\n".join((header,) + lines) + "\n").encode("utf-8")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session: Session) -> RecordStore:
    return RecordStore(db_session)


@pytest.fixture
def client(session_factory):
    """FastAPI TestClient bound to the per-test database."""
    from fastapi.testclient import TestClient

    from app.deps import IMPORT_PANELS, get_db
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    for panel in IMPORT_PANELS.values():
        panel.reset()
        panel.feedback = None
        panel.drag_active = False
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _propagate_app_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    """Let caplog see records even after main.configure_logging() ran."""
    monkeypatch.setattr(logging.getLogger("budgetflow"), "propagate", True)
