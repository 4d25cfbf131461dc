# config.py
# Role: Centralised configuration for the finance tracker.
#       Every other module reads settings from here instead of os.environ.

"""
BudgetFlow configuration.

Values come from environment variables; a local `.env` file is loaded first
(see `.env.example`).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Base directory of the project (where this module lives)
BASE_DIR = Path(__file__).resolve().parent

# -------------------------------------------------------------------
# Database
# -------------------------------------------------------------------

# Folder for the default SQLite DB (created on startup if missing)
DB_DIR = BASE_DIR / "database"

DB_URL = os.getenv("BUDGETFLOW_DB_URL", f"sqlite:///{DB_DIR / 'budgetflow.db'}")

# -------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------

LOG_LEVEL = os.getenv("BUDGETFLOW_LOG_LEVEL", "INFO")

# -------------------------------------------------------------------
# CSV import
# -------------------------------------------------------------------

# Upper bound on documents written by one import (one atomic batch)
MAX_IMPORT_BATCH = 500

# Templates for HTML pages
TEMPLATES_DIR = BASE_DIR / "app" / "templates"
