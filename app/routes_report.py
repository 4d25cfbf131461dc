# app/routes_report.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .deps import get_db
from .services.import_helpers import get_month_range
from .services.reports import monthly_report

router = APIRouter()


@router.get("/api/report")
def report_page(
    month: str | None = Query(None),
    db: Session = Depends(get_db),
):
    # 'YYYY-MM'; missing or invalid -> current month
    month_start, _, _ = get_month_range(month)
    return monthly_report(db, month_start.year, month_start.month)
