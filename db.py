# db.py
# Role: Database bootstrap for the FastAPI finance tracker.
#       Defines the SQLAlchemy engine, session factory, and declarative Base.
#       Also ensures the on-disk database directory exists before the app starts.

"""
Database setup for the finance tracker.

- Uses the URL from config.DB_URL (SQLite at <project_root>/database/budgetflow.db by default)
- Ensures the 'database' folder exists for the default SQLite file.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

import config


def make_engine(db_url: str):
    """
    Create an engine for `db_url`.

    For SQLite, we need check_same_thread=False for FastAPI (threaded request handling).
    """
    if db_url.startswith("sqlite"):
        return create_engine(db_url, connect_args={"check_same_thread": False})
    return create_engine(db_url)


if config.DB_URL.startswith(f"sqlite:///{config.DB_DIR}"):
    config.DB_DIR.mkdir(parents=True, exist_ok=True)  # ensure folder exists

engine = make_engine(config.DB_URL)

# Standard session factory used via dependency injection (see app/deps.py:get_db)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Declarative base class for ORM models
Base = declarative_base()


def init_db(bind=None) -> None:
    """Create tables (only if they don't exist yet)."""
    # models must be imported so their tables are registered on Base.metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
