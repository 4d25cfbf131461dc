# routes_root.py
"""
Root / basic endpoints (health, landing).
"""

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.get("/")
def read_root():
    """
    Landing endpoint: the import page is the only HTML page.
    """
    return RedirectResponse(url="/import", status_code=302)


@router.get("/health")
def health():
    return {"message": "BudgetFlow is running"}
