# app/services/reports.py
"""
Monthly cash-flow report and portfolio summary.

Public API:
    monthly_report(db, year, month) -> dict
    portfolio_summary(investments) -> dict
    filter_investments(investments, flt) -> list
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.services.import_helpers import shift_month
from models import Investment, Transaction

TOP_CATEGORIES = 5


def monthly_report(db: Session, year: int, month: int) -> dict:
    """
    Totals for one calendar month plus the top expense categories.
    """
    month_start = date(year, month, 1)
    next_year, next_month = shift_month(year, month, 1)
    next_month_start = date(next_year, next_month, 1)

    in_month = (Transaction.date >= month_start, Transaction.date < next_month_start)

    income, expenses, tx_count = (
        db.query(
            func.coalesce(
                func.sum(case((Transaction.type == "income", Transaction.amount), else_=0.0)),
                0.0,
            ),
            func.coalesce(
                func.sum(case((Transaction.type == "expense", Transaction.amount), else_=0.0)),
                0.0,
            ),
            func.count(Transaction.id),
        )
        .filter(*in_month)
        .one()
    )
    income = float(income)
    expenses = float(expenses)

    net_savings = income - expenses
    savings_rate = net_savings / income * 100 if income > 0 else 0.0

    # Spending by category (expenses only), biggest first
    spent = func.sum(Transaction.amount)
    rows = (
        db.query(Transaction.category.label("category"), spent.label("spent"))
        .filter(*in_month, Transaction.type == "expense")
        .group_by(Transaction.category)
        .order_by(spent.desc(), Transaction.category)
        .limit(TOP_CATEGORIES)
        .all()
    )
    top_categories = [
        {
            "category": r.category,
            "amount": float(r.spent),
            "percentage": float(r.spent) / expenses * 100 if expenses > 0 else 0.0,
        }
        for r in rows
    ]

    prev_year, prev_month = shift_month(year, month, -1)

    return {
        "month": f"{year:04d}-{month:02d}",
        "month_label": month_start.strftime("%B %Y"),
        "previous_month": f"{prev_year:04d}-{prev_month:02d}",
        "next_month": f"{next_year:04d}-{next_month:02d}",
        "transaction_count": int(tx_count),
        "total_income": income,
        "total_expenses": expenses,
        "net_savings": net_savings,
        "savings_rate": savings_rate,
        "top_categories": top_categories,
    }


def filter_investments(investments: Iterable[Investment], flt: str = "all") -> List[Investment]:
    """
    flt: "all", "profit" (P/L >= 0), "loss" (P/L < 0), or an investment type.
    """
    investments = list(investments)
    if flt == "all":
        return investments
    if flt == "profit":
        return [inv for inv in investments if inv.profit_loss >= 0]
    if flt == "loss":
        return [inv for inv in investments if inv.profit_loss < 0]
    return [inv for inv in investments if inv.type == flt]


def portfolio_summary(investments: Iterable[Investment]) -> dict:
    investments = list(investments)
    total_value = sum(inv.current_value for inv in investments)
    total_invested = sum(inv.total_invested for inv in investments)
    total_profit_loss = total_value - total_invested
    percentage = total_profit_loss / total_invested * 100 if total_invested > 0 else 0.0

    return {
        "holdings": len(investments),
        "total_value": total_value,
        "total_invested": total_invested,
        "total_profit_loss": total_profit_loss,
        "total_profit_loss_percentage": percentage,
        "types": sorted({inv.type for inv in investments}),
    }
