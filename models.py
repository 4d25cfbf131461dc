# models.py
# Role: SQLAlchemy ORM models for the finance tracker domain.
#       Defines the Transaction model (cash income/expense) and the
#       Investment model (one holding in the portfolio).

from sqlalchemy import Column, Integer, String, Date, DateTime, Float, Text, func
from db import Base

# Value of `source` for rows created by the CSV import pipeline
SOURCE_CSV_IMPORT = "csv_import"

TRANSACTION_TYPES = ("income", "expense")

EXPENSE_CATEGORIES = [
    "Food", "Transport", "Housing", "Utilities", "Healthcare",
    "Entertainment", "Shopping/Personal Care", "Education", "Gifts/Donations", "Other",
]

INCOME_CATEGORIES = [
    "Salary", "Bonus", "Investment Income", "Gifts Received", "Other",
]

# Suggested investment types (not enforced)
INVESTMENT_TYPES = ["ETF", "Stock", "Cryptocurrency", "Bond", "Fixed Deposit", "Other"]


class Transaction(Base):
    """
    ORM model representing a single cash transaction.

    The stored amount is never negative: whether money came in or went out
    is carried by `type` ("income" / "expense").
    """

    __tablename__ = "transactions"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    # Day of the transaction
    date = Column(Date, nullable=False, index=True)

    description = Column(String, nullable=False)

    amount = Column(Float, nullable=False)

    # "income" or "expense"
    type = Column(String(7), nullable=False)

    category = Column(String, nullable=False, default="Uncategorized")

    # Set by the database when the row is written
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # "csv_import" for imported rows, NULL for manual entries
    source = Column(String, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": self.amount,
            "type": self.type,
            "category": self.category,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "source": self.source,
        }


class Investment(Base):
    """
    ORM model representing one investment holding.

    `purchase_price` is per unit, `current_value` is the value of the whole
    holding. Profit/loss figures are derived on read and never stored.
    """

    __tablename__ = "investments"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)

    # Free text; see INVESTMENT_TYPES for the suggested set
    type = Column(String, nullable=False)

    purchase_date = Column(Date, nullable=False, index=True)

    purchase_price = Column(Float, nullable=False)

    quantity = Column(Float, nullable=False)

    current_value = Column(Float, nullable=False)

    notes = Column(Text, nullable=False, default="")

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # Refreshed by the database on every UPDATE
    last_updated = Column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    source = Column(String, nullable=True)

    @property
    def total_invested(self) -> float:
        return self.purchase_price * self.quantity

    @property
    def profit_loss(self) -> float:
        return self.current_value - self.total_invested

    @property
    def profit_loss_percentage(self) -> float:
        invested = self.total_invested
        if invested > 0:
            return self.profit_loss / invested * 100
        return 0.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "purchase_date": self.purchase_date.isoformat(),
            "purchase_price": self.purchase_price,
            "quantity": self.quantity,
            "current_value": self.current_value,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "source": self.source,
            "total_invested": self.total_invested,
            "profit_loss": self.profit_loss,
            "profit_loss_percentage": self.profit_loss_percentage,
        }
