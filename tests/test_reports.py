"""Tests for the monthly report, month helpers and portfolio summary."""

from datetime import date

import pytest

from app.services.import_helpers import get_month_range, shift_month
from app.services.reports import filter_investments, monthly_report, portfolio_summary
from models import Investment, Transaction


def tx(day: date, amount: float, type_: str, category: str = "Other") -> Transaction:
    return Transaction(
        date=day, description=f"{category} {amount}", amount=amount, type=type_, category=category
    )


def inv(name: str, type_: str, price: float, qty: float, value: float) -> Investment:
    return Investment(
        name=name,
        type=type_,
        purchase_date=date(2023, 1, 1),
        purchase_price=price,
        quantity=qty,
        current_value=value,
    )


@pytest.mark.parametrize(
    "year, month, delta, expected",
    [
        (2024, 1, -1, (2023, 12)),
        (2024, 12, 1, (2025, 1)),
        (2024, 5, 0, (2024, 5)),
        (2024, 3, -15, (2022, 12)),
    ],
)
def test_shift_month(year, month, delta, expected) -> None:
    assert shift_month(year, month, delta) == expected


class TestGetMonthRange:
    def test_valid_month(self) -> None:
        assert get_month_range("2024-02") == (date(2024, 2, 1), date(2024, 3, 1), "2024-02")

    def test_december_wraps(self) -> None:
        start, end, _ = get_month_range("2023-12")
        assert (start, end) == (date(2023, 12, 1), date(2024, 1, 1))

    @pytest.mark.parametrize("month_str", [None, "", "2024-13", "garbage", "2024-05-01"])
    def test_falls_back_to_current_month(self, month_str) -> None:
        today = date(2024, 7, 19)
        assert get_month_range(month_str, today=today)[2] == "2024-07"


class TestMonthlyReport:
    @pytest.fixture
    def seeded(self, store):
        store.batch_write(
            [
                tx(date(2024, 3, 1), 3000, "income", "Salary"),
                tx(date(2024, 3, 5), 1000, "expense", "Housing"),
                tx(date(2024, 3, 9), 300, "expense", "Food"),
                tx(date(2024, 3, 20), 200, "expense", "Food"),
                tx(date(2024, 3, 31), 500, "expense", "Transport"),
                tx(date(2024, 4, 1), 9999, "expense", "Housing"),
                tx(date(2024, 2, 29), 50, "income", "Bonus"),
            ]
        )

    def test_totals(self, db_session, seeded) -> None:
        report = monthly_report(db_session, 2024, 3)

        assert report["month"] == "2024-03"
        assert report["month_label"] == "March 2024"
        assert report["transaction_count"] == 5
        assert report["total_income"] == 3000
        assert report["total_expenses"] == 2000
        assert report["net_savings"] == 1000
        assert report["savings_rate"] == pytest.approx(33.333, rel=1e-3)

    def test_top_categories(self, db_session, seeded) -> None:
        report = monthly_report(db_session, 2024, 3)

        assert [c["category"] for c in report["top_categories"]] == ["Housing", "Food", "Transport"]
        assert report["top_categories"][1]["amount"] == 500
        assert report["top_categories"][0]["percentage"] == pytest.approx(50.0)

    def test_navigation(self, db_session) -> None:
        report = monthly_report(db_session, 2024, 1)
        assert report["previous_month"] == "2023-12"
        assert report["next_month"] == "2024-02"

    def test_empty_month(self, db_session) -> None:
        report = monthly_report(db_session, 2020, 6)
        assert report["transaction_count"] == 0
        assert report["total_income"] == 0.0
        assert report["savings_rate"] == 0.0
        assert report["top_categories"] == []


class TestPortfolio:
    @pytest.fixture
    def holdings(self):
        return [
            inv("VWCE", "ETF", 100, 10, 1200),
            inv("BTC", "Cryptocurrency", 30000, 0.1, 2500),
            inv("Bond 2030", "Bond", 1000, 1, 1000),
        ]

    def test_derived_fields(self, holdings) -> None:
        etf = holdings[0]
        assert etf.total_invested == 1000
        assert etf.profit_loss == 200
        assert etf.profit_loss_percentage == pytest.approx(20.0)

    def test_zero_cost_percentage(self) -> None:
        assert inv("Gift", "Stock", 0, 5, 50).profit_loss_percentage == 0.0

    def test_summary(self, holdings) -> None:
        summary = portfolio_summary(holdings)

        assert summary["holdings"] == 3
        assert summary["total_value"] == 4700
        assert summary["total_invested"] == pytest.approx(5000)
        assert summary["total_profit_loss"] == pytest.approx(-300)
        assert summary["total_profit_loss_percentage"] == pytest.approx(-6.0)
        assert summary["types"] == ["Bond", "Cryptocurrency", "ETF"]

    def test_empty_summary(self) -> None:
        assert portfolio_summary([])["total_profit_loss_percentage"] == 0.0

    @pytest.mark.parametrize(
        "flt, expected",
        [
            ("all", ["VWCE", "BTC", "Bond 2030"]),
            ("profit", ["VWCE", "Bond 2030"]),
            ("loss", ["BTC"]),
            ("ETF", ["VWCE"]),
            ("Stock", []),
        ],
    )
    def test_filter(self, holdings, flt, expected) -> None:
        assert [i.name for i in filter_investments(holdings, flt)] == expected
