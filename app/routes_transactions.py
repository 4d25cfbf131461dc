# routes_transactions.py
"""
JSON routes for transactions: list with filters, manual add, edit, delete.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from sqlalchemy import or_

from models import EXPENSE_CATEGORIES, INCOME_CATEGORIES, Transaction
from app.deps import get_store
from app.logging_setup import get_logger
from app.services.import_helpers import build_transaction_from_dict, get_month_range
from app.services.store import CommitError, RecordNotFound, RecordStore
from app.services.validators import FormError, validate_transaction_form

logger = get_logger("routes.transactions")

router = APIRouter(prefix="/api/transactions")


@router.get("")
def list_transactions(
    month: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    category: List[str] = Query(default=[]),
    type: Optional[str] = Query(None),
    store: RecordStore = Depends(get_store),
):
    """
    Transactions, newest first.

    Filters:
    - month: 'YYYY-MM' (all months when omitted)
    - search: substring of the description
    - category: repeatable
    - type: 'income' or 'expense'
    """
    filters = []

    if month:
        range_start, range_end_exclusive, _ = get_month_range(month)
        filters += [Transaction.date >= range_start, Transaction.date < range_end_exclusive]

    if search:
        filters.append(Transaction.description.ilike(f"%{search}%"))

    if category:
        filters.append(or_(*[Transaction.category == cat for cat in category]))

    if type:
        filters.append(Transaction.type == type.lower())

    transactions = store.query(
        Transaction,
        *filters,
        order_by=(Transaction.date.desc(), Transaction.id.desc()),
    )
    return {
        "count": len(transactions),
        "transactions": [tx.to_dict() for tx in transactions],
    }


@router.get("/categories")
def list_categories():
    """Suggested categories per transaction type."""
    return {"expense": EXPENSE_CATEGORIES, "income": INCOME_CATEGORIES}


@router.post("", status_code=201)
def add_transaction(
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
):
    """Manually add one transaction (source stays empty)."""
    try:
        fields = validate_transaction_form(payload)
    except FormError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        tx = store.add_one(build_transaction_from_dict(fields, source=None))
    except CommitError as e:
        raise HTTPException(status_code=503, detail=f"Failed to add transaction: {e}")
    return tx.to_dict()


@router.put("/{tx_id}")
def update_transaction(
    tx_id: int,
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
):
    """
    Overwrite description, amount, category and type of one transaction.
    The date is kept unless the payload carries a new one.
    """
    try:
        existing = store.get(Transaction, tx_id)
        fields = validate_transaction_form({"date": existing.date, **payload})
        tx = store.update_one(Transaction, tx_id, fields)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FormError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except CommitError as e:
        raise HTTPException(status_code=503, detail=f"Failed to update transaction: {e}")
    return tx.to_dict()


@router.delete("/{tx_id}", status_code=204)
def delete_transaction(tx_id: int, store: RecordStore = Depends(get_store)):
    try:
        store.delete_one(Transaction, tx_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CommitError as e:
        raise HTTPException(status_code=503, detail=f"Failed to delete transaction: {e}")
    logger.info("Deleted transaction #%s", tx_id)
    return Response(status_code=204)
