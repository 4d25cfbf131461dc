# app/services/validators.py
"""
Per-row validation and normalization for CSV imports.

Each validator takes one raw row (header -> string) and returns a normalized
record dict, or raises RowError describing the first problem found.
Callers collect RowErrors per row; a bad row never aborts the import.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict

from app.logging_setup import get_logger
from app.services.import_helpers import parse_calendar_date, parse_finite_float
from models import INVESTMENT_TYPES, TRANSACTION_TYPES

logger = get_logger("validators")

TRANSACTION_FIELDS = ("Date", "Description", "Amount", "Type")
INVESTMENT_FIELDS = ("Name", "Type", "PurchaseDate", "PurchasePrice", "Quantity", "CurrentValue")
INVESTMENT_NUMBER_FIELDS = ("PurchasePrice", "Quantity", "CurrentValue")

_KNOWN_INVESTMENT_TYPES = {t.lower() for t in INVESTMENT_TYPES}


class RowErrorKind(str, enum.Enum):
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    INVALID_AMOUNT = "InvalidAmount"
    INVALID_NUMBER = "InvalidNumber"
    INVALID_DATE = "InvalidDate"
    INVALID_TYPE = "InvalidType"


class RowError(Exception):
    """Raised when a row cannot be imported."""

    def __init__(self, kind: RowErrorKind, reason: str):
        super().__init__(reason)
        self.kind = kind
        self.reason = reason


@dataclass(frozen=True)
class RowIssue:
    """One skipped row: its 1-based display index (header = row 1) and why."""

    row: int
    kind: RowErrorKind
    reason: str

    @property
    def message(self) -> str:
        return f"Row {self.row}: {self.reason}. Row skipped."


def _text(value: Any) -> str:
    """Trimmed string value; None / absent become ''."""
    if value is None:
        return ""
    return str(value).strip()


# ---- Transactions ----

def validate_transaction_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate one `Date, Description, Amount, Type, Category` row.

    Checks run in order and the first failure wins:
    missing field -> amount -> date -> type.
    """
    date_raw = row.get("Date")
    amount_raw = row.get("Amount")
    type_raw = row.get("Type")

    if (
        not _text(date_raw)
        or not _text(row.get("Description"))
        or amount_raw is None
        or not _text(type_raw)
    ):
        raise RowError(
            RowErrorKind.MISSING_REQUIRED_FIELD,
            "Missing required fields (Date, Description, Amount, Type)",
        )

    try:
        amount = parse_finite_float(amount_raw)
    except ValueError:
        raise RowError(RowErrorKind.INVALID_AMOUNT, f"Invalid Amount '{amount_raw}'") from None
    if amount < 0:
        raise RowError(
            RowErrorKind.INVALID_AMOUNT,
            f"Invalid Amount '{amount_raw}'. Amount must not be negative, use Type for the sign",
        )
    # "-0" parses to -0.0
    amount = abs(amount)

    try:
        tx_date = parse_calendar_date(date_raw)
    except ValueError:
        raise RowError(
            RowErrorKind.INVALID_DATE,
            f"Invalid Date format '{date_raw}'. Please use YYYY-MM-DD",
        ) from None

    tx_type = _text(type_raw).lower()
    if tx_type not in TRANSACTION_TYPES:
        raise RowError(
            RowErrorKind.INVALID_TYPE,
            f"Invalid Type '{type_raw}'. Must be 'Income' or 'Expense'",
        )

    return {
        "date": tx_date,
        "description": _text(row.get("Description")),
        "amount": amount,
        "type": tx_type,
        "category": _text(row.get("Category")) or "Uncategorized",
    }


# ---- Investments ----

def validate_investment_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate one `Name, Type, PurchaseDate, PurchasePrice, Quantity,
    CurrentValue, Notes` row.

    Numeric fields only count as missing when absent, so "0" is accepted.
    A Type outside INVESTMENT_TYPES is imported as-is with a warning.
    """
    if (
        not _text(row.get("Name"))
        or not _text(row.get("Type"))
        or not _text(row.get("PurchaseDate"))
        or any(row.get(field) is None for field in INVESTMENT_NUMBER_FIELDS)
    ):
        raise RowError(RowErrorKind.MISSING_REQUIRED_FIELD, "Missing required fields")

    try:
        purchase_price, quantity, current_value = (
            parse_finite_float(row[field]) for field in INVESTMENT_NUMBER_FIELDS
        )
    except ValueError:
        raise RowError(
            RowErrorKind.INVALID_NUMBER,
            "Invalid number for PurchasePrice, Quantity, or CurrentValue",
        ) from None

    date_raw = row["PurchaseDate"]
    try:
        purchase_date = parse_calendar_date(date_raw)
    except ValueError:
        raise RowError(
            RowErrorKind.INVALID_DATE,
            f"Invalid PurchaseDate format '{date_raw}'. Please use YYYY-MM-DD",
        ) from None

    inv_type = _text(row["Type"])
    if inv_type.lower() not in _KNOWN_INVESTMENT_TYPES:
        logger.warning(
            "Investment type %r is not in the standard list but will be imported", inv_type
        )

    return {
        "name": _text(row["Name"]),
        "type": inv_type,
        "purchase_date": purchase_date,
        "purchase_price": purchase_price,
        "quantity": quantity,
        "current_value": current_value,
        "notes": _text(row.get("Notes")),
    }


# ---- Manual entry forms ----

class FormError(ValueError):
    """A manual-entry form was submitted with missing or invalid fields."""


def validate_transaction_form(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Rules for the "Add / edit transaction" form: every field is required
    and the amount must be a positive number.
    """
    description = _text(data.get("description"))
    amount_raw = data.get("amount")
    category = _text(data.get("category"))
    tx_type = _text(data.get("type")).lower()

    if not description or amount_raw in (None, "") or not category or not _text(data.get("date")):
        raise FormError("Please fill in all required fields.")

    try:
        amount = parse_finite_float(amount_raw)
    except ValueError:
        raise FormError("Please enter a valid positive amount.") from None
    if amount <= 0:
        raise FormError("Please enter a valid positive amount.")

    if tx_type not in TRANSACTION_TYPES:
        raise FormError("Type must be 'income' or 'expense'.")

    try:
        tx_date = parse_calendar_date(data["date"])
    except ValueError:
        raise FormError("Please enter a valid date (YYYY-MM-DD).") from None

    return {
        "date": tx_date,
        "description": description,
        "amount": amount,
        "type": tx_type,
        "category": category,
    }


def validate_investment_form(data: Dict[str, Any]) -> Dict[str, Any]:
    """Rules for the "Add / edit investment" form."""
    numbers = ("purchase_price", "quantity", "current_value")

    if (
        not _text(data.get("name"))
        or not _text(data.get("type"))
        or not _text(data.get("purchase_date"))
        or any(data.get(name) in (None, "") for name in numbers)
    ):
        raise FormError("Please fill in all required fields.")

    try:
        purchase_price, quantity, current_value = (parse_finite_float(data[n]) for n in numbers)
    except ValueError:
        raise FormError("Purchase price, quantity and current value must be numbers.") from None

    try:
        purchase_date = parse_calendar_date(data["purchase_date"])
    except ValueError:
        raise FormError("Please enter a valid purchase date (YYYY-MM-DD).") from None

    return {
        "name": _text(data["name"]),
        "type": _text(data["type"]),
        "purchase_date": purchase_date,
        "purchase_price": purchase_price,
        "quantity": quantity,
        "current_value": current_value,
        "notes": _text(data.get("notes")),
    }
