"""Tests for per-row validation and manual-entry form rules."""

import math
from datetime import date

import pytest

from app.services.validators import (
    FormError,
    RowError,
    RowErrorKind,
    validate_investment_form,
    validate_investment_row,
    validate_transaction_form,
    validate_transaction_row,
)


def tx_row(**overrides):
    row = {
        "Date": "2024-01-15",
        "Description": "Coffee",
        "Amount": "4.50",
        "Type": "Expense",
        "Category": "Food",
    }
    row.update(overrides)
    return {k: v for k, v in row.items() if v is not None}


def inv_row(**overrides):
    row = {
        "Name": "Vanguard S&P 500",
        "Type": "ETF",
        "PurchaseDate": "2023-06-01",
        "PurchasePrice": "400.25",
        "Quantity": "3",
        "CurrentValue": "1350",
        "Notes": "  long term ",
    }
    row.update(overrides)
    return {k: v for k, v in row.items() if v is not None}


def kind_of(validator, row) -> RowErrorKind:
    with pytest.raises(RowError) as exc_info:
        validator(row)
    return exc_info.value.kind


class TestTransactionRow:
    """Tests for validate_transaction_row."""

    def test_normalizes_valid_row(self) -> None:
        """Test the documented round trip example."""
        assert validate_transaction_row(tx_row()) == {
            "date": date(2024, 1, 15),
            "description": "Coffee",
            "amount": 4.5,
            "type": "expense",
            "category": "Food",
        }

    @pytest.mark.parametrize("category", ["", "   ", None])
    def test_blank_category_defaults(self, category) -> None:
        """Test that a blank or absent Category becomes Uncategorized."""
        record = validate_transaction_row(tx_row(Category=category))
        assert record["category"] == "Uncategorized"

    @pytest.mark.parametrize("raw", ["INCOME", "Income", " income "])
    def test_type_is_case_insensitive(self, raw: str) -> None:
        assert validate_transaction_row(tx_row(Type=raw))["type"] == "income"

    def test_unknown_type_rejected(self) -> None:
        assert kind_of(validate_transaction_row, tx_row(Type="Investment")) is RowErrorKind.INVALID_TYPE

    @pytest.mark.parametrize("field", ["Date", "Description", "Amount", "Type"])
    def test_absent_required_field(self, field: str) -> None:
        row = tx_row()
        del row[field]
        assert kind_of(validate_transaction_row, row) is RowErrorKind.MISSING_REQUIRED_FIELD

    @pytest.mark.parametrize("field", ["Date", "Description", "Type"])
    def test_empty_string_counts_as_missing(self, field: str) -> None:
        row = tx_row(**{field: ""})
        assert kind_of(validate_transaction_row, row) is RowErrorKind.MISSING_REQUIRED_FIELD

    def test_empty_amount_is_invalid_not_missing(self) -> None:
        """Test that an empty Amount fails number parsing rather than presence."""
        assert kind_of(validate_transaction_row, tx_row(Amount="")) is RowErrorKind.INVALID_AMOUNT

    @pytest.mark.parametrize("amount", ["abc", "NaN", "inf", "4,50", "-3"])
    def test_invalid_amount(self, amount: str) -> None:
        assert kind_of(validate_transaction_row, tx_row(Amount=amount)) is RowErrorKind.INVALID_AMOUNT

    def test_zero_amount_accepted(self) -> None:
        assert validate_transaction_row(tx_row(Amount="0"))["amount"] == 0.0

    def test_negative_zero_stored_as_zero(self) -> None:
        amount = validate_transaction_row(tx_row(Amount="-0"))["amount"]
        assert math.copysign(1.0, amount) == 1.0

    @pytest.mark.parametrize("value", ["not a date", "2024-13-45", "2024-02-30", "now", "today"])
    def test_invalid_date(self, value: str) -> None:
        assert kind_of(validate_transaction_row, tx_row(Date=value)) is RowErrorKind.INVALID_DATE

    def test_first_failure_wins(self) -> None:
        """Test that a bad amount is reported before a bad date and type."""
        row = tx_row(Amount="x", Date="nope", Type="other")
        assert kind_of(validate_transaction_row, row) is RowErrorKind.INVALID_AMOUNT

        row = tx_row(Date="nope", Type="other")
        assert kind_of(validate_transaction_row, row) is RowErrorKind.INVALID_DATE

    def test_trims_description(self) -> None:
        assert validate_transaction_row(tx_row(Description="  Rent  "))["description"] == "Rent"

    def test_error_reason_mentions_value(self) -> None:
        with pytest.raises(RowError) as exc_info:
            validate_transaction_row(tx_row(Type="Transfer"))
        assert exc_info.value.reason == "Invalid Type 'Transfer'. Must be 'Income' or 'Expense'"


class TestInvestmentRow:
    """Tests for validate_investment_row."""

    def test_normalizes_valid_row(self) -> None:
        assert validate_investment_row(inv_row()) == {
            "name": "Vanguard S&P 500",
            "type": "ETF",
            "purchase_date": date(2023, 6, 1),
            "purchase_price": 400.25,
            "quantity": 3.0,
            "current_value": 1350.0,
            "notes": "long term",
        }

    def test_zero_quantity_accepted(self) -> None:
        """Test that "0" is present even though it looks falsy."""
        assert validate_investment_row(inv_row(Quantity="0"))["quantity"] == 0.0

    def test_absent_quantity_missing(self) -> None:
        row = inv_row()
        del row["Quantity"]
        assert kind_of(validate_investment_row, row) is RowErrorKind.MISSING_REQUIRED_FIELD

    @pytest.mark.parametrize("field", ["Name", "Type", "PurchaseDate"])
    def test_empty_text_field_missing(self, field: str) -> None:
        row = inv_row(**{field: ""})
        assert kind_of(validate_investment_row, row) is RowErrorKind.MISSING_REQUIRED_FIELD

    @pytest.mark.parametrize("field", ["PurchasePrice", "Quantity", "CurrentValue"])
    def test_invalid_number(self, field: str) -> None:
        row = inv_row(**{field: "lots"})
        assert kind_of(validate_investment_row, row) is RowErrorKind.INVALID_NUMBER

    @pytest.mark.parametrize("value", ["someday", "now", "today"])
    def test_invalid_purchase_date(self, value: str) -> None:
        row = inv_row(PurchaseDate=value)
        assert kind_of(validate_investment_row, row) is RowErrorKind.INVALID_DATE

    def test_missing_notes_defaults_to_empty(self) -> None:
        assert validate_investment_row(inv_row(Notes=None))["notes"] == ""

    def test_unknown_type_imported_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a non-standard type is accepted and only logged."""
        with caplog.at_level("WARNING", logger="budgetflow"):
            record = validate_investment_row(inv_row(Type="Gold"))

        assert record["type"] == "Gold"
        assert "Gold" in caplog.text

    def test_known_type_case_insensitive_no_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="budgetflow"):
            validate_investment_row(inv_row(Type="stock"))
        assert caplog.text == ""


class TestForms:
    """Tests for manual-entry form validation."""

    def test_transaction_form(self) -> None:
        fields = validate_transaction_form(
            {
                "description": " Salary ",
                "amount": "2500",
                "type": "income",
                "category": "Salary",
                "date": "2024-03-01",
            }
        )
        assert fields["description"] == "Salary"
        assert fields["amount"] == 2500.0
        assert fields["date"] == date(2024, 3, 1)

    @pytest.mark.parametrize("amount", ["0", "-4", "abc"])
    def test_transaction_form_requires_positive_amount(self, amount: str) -> None:
        with pytest.raises(FormError, match="valid positive amount"):
            validate_transaction_form(
                {
                    "description": "Bus",
                    "amount": amount,
                    "type": "expense",
                    "category": "Transport",
                    "date": "2024-03-01",
                }
            )

    def test_transaction_form_requires_fields(self) -> None:
        with pytest.raises(FormError, match="required fields"):
            validate_transaction_form({"description": "Bus", "amount": "2"})

    def test_investment_form(self) -> None:
        fields = validate_investment_form(
            {
                "name": "BTC",
                "type": "Cryptocurrency",
                "purchase_date": "2022-01-01",
                "purchase_price": 30000,
                "quantity": 0.1,
                "current_value": "4000",
            }
        )
        assert fields["purchase_price"] == 30000.0
        assert fields["notes"] == ""

    def test_investment_form_rejects_bad_numbers(self) -> None:
        with pytest.raises(FormError):
            validate_investment_form(
                {
                    "name": "BTC",
                    "type": "Cryptocurrency",
                    "purchase_date": "2022-01-01",
                    "purchase_price": "a lot",
                    "quantity": 1,
                    "current_value": 1,
                }
            )
