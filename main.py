# main.py
# Role: Application entry point for the finance tracker.
#       Initializes the FastAPI app, configures logging, creates database
#       tables, and registers all route modules.

"""
Main FastAPI app for the personal finance tracker.

Here we only:
- configure logging
- create the FastAPI app
- create DB tables
- include route modules

Run with:  uvicorn main:app --reload
"""

from fastapi import FastAPI

from db import init_db
from app.logging_setup import configure_logging
from app.routes_root import router as root_router
from app.routes_import import router as import_router
from app.routes_transactions import router as transactions_router
from app.routes_investments import router as investments_router
from app.routes_report import router as report_router


# -------------------------------------------------------------------
# App & DB setup
# -------------------------------------------------------------------

configure_logging()

# Create database tables (only if they don't exist yet).
init_db()

# FastAPI application instance
app = FastAPI(title="BudgetFlow")

# -------------------------------------------------------------------
# Include routers
# -------------------------------------------------------------------

# Root / landing routes
app.include_router(root_router)

# CSV select → import → feedback flow (both domains)
app.include_router(import_router)

# Transactions list + manual CRUD
app.include_router(transactions_router)

# Investments list, portfolio summary + manual CRUD
app.include_router(investments_router)

# Monthly report (income, expenses, savings, top categories)
app.include_router(report_router)
