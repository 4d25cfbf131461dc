# routes_import.py
"""
Routes for the CSV import flow: select file -> run import -> feedback.

Two import panels live on one page (transactions and investments); each has
its own selected file and feedback message.
"""

from typing import Dict

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse

from app.deps import IMPORT_PANELS, get_panel, get_store, templates
from app.logging_setup import get_logger
from app.services import feedback as fb
from app.services.import_pipeline import IMPORT_DOMAINS, run_import
from app.services.intake import ImportPanel, UnsupportedFileType, is_csv_upload
from app.services.store import RecordStore
from models import INVESTMENT_TYPES

logger = get_logger("routes.import")

router = APIRouter()

# Bumped whenever a panel's file selection is cleared. The template uses it
# in the file input's id, so the browser renders an empty control.
INPUT_GENERATION: Dict[str, int] = {name: 0 for name in IMPORT_PANELS}


def _bump_generation(name: str):
    def callback() -> None:
        INPUT_GENERATION[name] += 1
    return callback


for _name, _panel in IMPORT_PANELS.items():
    _panel.on_reset(_bump_generation(_name))


def _render(request: Request, status_code: int = 200) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "import.html",
        {
            "panels": list(IMPORT_PANELS.values()),
            "input_generation": INPUT_GENERATION,
            "investment_types": INVESTMENT_TYPES,
        },
        status_code=status_code,
    )


# -------------------------------------------------------------------
# Step 0 – show import page
# -------------------------------------------------------------------

@router.get("/import", response_class=HTMLResponse)
def import_page(request: Request):
    """
    Render both import panels with their CSV format guides,
    selected files and current feedback.
    """
    return _render(request)


# -------------------------------------------------------------------
# Step 1 – pick / drop a file
# -------------------------------------------------------------------

@router.post("/import/{domain}/select", response_class=HTMLResponse)
async def select_file(
    request: Request,
    csv_file: UploadFile = File(...),
    source: str = Form("picker"),
    panel: ImportPanel = Depends(get_panel),
):
    """
    Intake step. `source` is "picker" (file dialog) or "drop" (drag-and-drop);
    both are validated the same way.
    """
    content = await csv_file.read()
    try:
        panel.select_file(csv_file.filename or "", csv_file.content_type, content, source)
    except UnsupportedFileType as e:
        logger.info("Rejected upload for %s: %s", panel.domain.name, e)
        return _render(request, status_code=415)
    return _render(request)


@router.post("/import/{domain}/drag")
def drag_event(
    event_type: str = Form(...),
    panel: ImportPanel = Depends(get_panel),
):
    """
    Drop-zone highlight. The page posts dragenter / dragleave / drop here
    and toggles the zone's class from the returned flag.
    """
    return {"drag_active": panel.handle_drag(event_type)}


@router.post("/import/{domain}/reset")
def reset_panel(panel: ImportPanel = Depends(get_panel)):
    panel.reset()
    panel.feedback = None
    return RedirectResponse(url="/import", status_code=303)


# -------------------------------------------------------------------
# Step 2 – validate and save the selected file
# -------------------------------------------------------------------

@router.post("/import/{domain}/run", response_class=HTMLResponse)
async def run_panel_import(
    request: Request,
    panel: ImportPanel = Depends(get_panel),
    store: RecordStore = Depends(get_store),
):
    """
    Run the pipeline on the panel's selected file and show the outcome.
    """
    outcome = panel.run(store)
    if outcome is None:
        return _render(request, status_code=400)
    return _render(request)


# -------------------------------------------------------------------
# One-shot JSON import (scripts, tests)
# -------------------------------------------------------------------

@router.post("/api/import/{domain}")
async def api_import(
    domain: str,
    csv_file: UploadFile = File(...),
    store: RecordStore = Depends(get_store),
):
    """
    Upload and import in one request. Returns the feedback plus the outcome
    details (imported count, row errors).
    """
    import_domain = IMPORT_DOMAINS.get(domain)
    if import_domain is None:
        raise HTTPException(status_code=404, detail=f"Unknown import type {domain!r}")

    if not is_csv_upload(csv_file.filename, csv_file.content_type):
        raise HTTPException(status_code=415, detail=fb.UNSUPPORTED_FILE.message)

    outcome = run_import(import_domain, store, await csv_file.read())
    return {**fb.feedback_for(outcome).to_dict(), **outcome.to_dict()}
