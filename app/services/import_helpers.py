# app/services/import_helpers.py
#
# Import Helper Functions
# Provides the value parsers shared by row validation and manual entry,
# functions for converting normalized record dicts into ORM models,
# and date range helpers for monthly reports.

import math
from datetime import date

import pandas as pd

from models import Investment, Transaction, SOURCE_CSV_IMPORT


# ---- Value Parsing ----

def parse_finite_float(value) -> float:
    """
    Parse `value` as a float and reject NaN / +-inf.
    Raises ValueError when the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        number = float(str(value).strip())
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return number


def parse_calendar_date(value) -> date:
    """
    Parse a date string (YYYY-MM-DD expected, other unambiguous formats
    tolerated) into a date. Raises ValueError when it is not a calendar date.
    """
    if isinstance(value, pd.Timestamp):
        value = value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        raise ValueError("empty date")
    # pandas reads words like "now" and "today" as dates
    if not any(ch.isdigit() for ch in text):
        raise ValueError(f"not a date: {value!r}")

    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        raise ValueError(f"not a date: {value!r}")
    return parsed.date()


# ---- Record Conversion ----

def build_transaction_from_dict(tx: dict, source: str | None = SOURCE_CSV_IMPORT) -> Transaction:
    """
    Convert one normalized tx dict (from the transaction row validator)
    into a Transaction ORM object.
    """
    return Transaction(
        date=tx["date"],
        description=tx["description"],
        amount=tx["amount"],
        type=tx["type"],
        category=tx.get("category") or "Uncategorized",
        source=source,
    )


def build_investment_from_dict(inv: dict, source: str | None = SOURCE_CSV_IMPORT) -> Investment:
    """
    Convert one normalized investment dict into an Investment ORM object.
    created_at / last_updated are filled in by the database on insert.
    """
    return Investment(
        name=inv["name"],
        type=inv["type"],
        purchase_date=inv["purchase_date"],
        purchase_price=inv["purchase_price"],
        quantity=inv["quantity"],
        current_value=inv["current_value"],
        notes=inv.get("notes") or "",
        source=source,
    )


# ---- Date Range Utilities ----

def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by `delta` months, wrapping across years."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def get_month_range(month_str: str | None, today: date | None = None):
    """
    month_str: 'YYYY-MM' or None.
    Returns (start_date, end_date_exclusive, normalized_month_str).
    If month_str is None or invalid, uses the CURRENT month.
    """
    today = today or date.today()

    # 1) pick year/month
    year, month = today.year, today.month
    if month_str:
        try:
            year_str, month_only_str = month_str.split("-")
            parsed_year = int(year_str)
            parsed_month = int(month_only_str)
            if 1 <= parsed_month <= 12 and parsed_year >= 1:
                year, month = parsed_year, parsed_month
        except ValueError:
            pass

    # 2) compute start and first day of next month
    start_date = date(year, month, 1)
    next_year, next_month = shift_month(year, month, 1)
    end_date_exclusive = date(next_year, next_month, 1)

    normalized = f"{year:04d}-{month:02d}"
    return start_date, end_date_exclusive, normalized
