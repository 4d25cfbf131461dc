# routes_investments.py
"""
JSON routes for investments: portfolio list and summary, manual add, edit, delete.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from models import INVESTMENT_TYPES, Investment
from app.deps import get_store
from app.logging_setup import get_logger
from app.services.import_helpers import build_investment_from_dict
from app.services.reports import filter_investments, portfolio_summary
from app.services.store import CommitError, RecordNotFound, RecordStore
from app.services.validators import FormError, validate_investment_form

logger = get_logger("routes.investments")

router = APIRouter(prefix="/api/investments")


def _all_investments(store: RecordStore):
    return store.query(
        Investment,
        order_by=(Investment.purchase_date.desc(), Investment.id.desc()),
    )


@router.get("")
def list_investments(
    filter: str = Query("all"),
    store: RecordStore = Depends(get_store),
):
    """
    Holdings by purchase date, newest first, with derived profit/loss.

    filter: 'all', 'profit', 'loss' or an investment type.
    The summary always covers the whole portfolio.
    """
    investments = _all_investments(store)
    shown = filter_investments(investments, filter)
    return {
        "filter": filter,
        "summary": portfolio_summary(investments),
        "investments": [inv.to_dict() for inv in shown],
    }


@router.get("/summary")
def investments_summary(store: RecordStore = Depends(get_store)):
    return portfolio_summary(_all_investments(store))


@router.get("/types")
def list_types():
    """Suggested investment types (others are accepted too)."""
    return {"types": INVESTMENT_TYPES}


@router.post("", status_code=201)
def add_investment(
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
):
    try:
        fields = validate_investment_form(payload)
    except FormError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        inv = store.add_one(build_investment_from_dict(fields, source=None))
    except CommitError as e:
        raise HTTPException(status_code=503, detail=f"Failed to add investment: {e}")
    return inv.to_dict()


@router.put("/{inv_id}")
def update_investment(
    inv_id: int,
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
):
    """
    Overwrite name, type, price, quantity, current value and notes.
    last_updated is refreshed by the database.
    """
    try:
        existing = store.get(Investment, inv_id)
        fields = validate_investment_form({"purchase_date": existing.purchase_date, **payload})
        inv = store.update_one(Investment, inv_id, fields)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FormError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except CommitError as e:
        raise HTTPException(status_code=503, detail=f"Failed to update investment: {e}")
    return inv.to_dict()


@router.delete("/{inv_id}", status_code=204)
def delete_investment(inv_id: int, store: RecordStore = Depends(get_store)):
    try:
        store.delete_one(Investment, inv_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CommitError as e:
        raise HTTPException(status_code=503, detail=f"Failed to delete investment: {e}")
    logger.info("Deleted investment #%s", inv_id)
    return Response(status_code=204)
