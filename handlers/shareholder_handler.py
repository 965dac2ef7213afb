"""
handlers/shareholder_handler.py
-------------------------------
HTTP routes for the registry page.
Delegates all logic to ShareholderService.

    GET  /              HTML page with the create form and one form per record
    GET  /shareholders  JSON list of records
    POST /              form submission carrying an `intent` (create/update/delete)
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from handlers.page import render_index
from repositories.shareholder_repo import ShareholderRepository
from services.shareholder_service import ShareholderService
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def get_repository(request: Request) -> ShareholderRepository:
    """Repository bound to the pool opened at startup."""
    return ShareholderRepository(request.app.state.database)


def get_service(repo: ShareholderRepository = Depends(get_repository)) -> ShareholderService:  # noqa: B008
    return ShareholderService(repo)


def _wants_html(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "text/html" in accept and "application/json" not in accept


@router.get("/", response_class=HTMLResponse)
def index(service: ShareholderService = Depends(get_service)) -> HTMLResponse:  # noqa: B008
    result = service.list_shareholders()
    return HTMLResponse(render_index(result))


@router.get("/shareholders")
def list_shareholders(service: ShareholderService = Depends(get_service)) -> JSONResponse:  # noqa: B008
    result = service.list_shareholders()
    if not result.ok:
        return JSONResponse({"error": result.error, "shareholders": []}, status_code=503)
    return JSONResponse([r.to_dict() for r in result.records])


@router.post("/")
async def submit(
    request: Request,
    service: ShareholderService = Depends(get_service),  # noqa: B008
):
    form = await request.form()
    # Repository calls block on the pool, keep them off the event loop
    outcome = await run_in_threadpool(service.submit, dict(form))

    if not outcome.success:
        logger.warning(f"Rejected {form.get('intent')!r} submission: {outcome.error}")

    if _wants_html(request):
        if outcome.success:
            return RedirectResponse("/", status_code=303)
        listing = await run_in_threadpool(service.list_shareholders)
        # A rejected create keeps what was typed; record forms re-render from the store
        submitted = dict(form) if form.get("intent") == "create" else None
        page = render_index(
            listing, error=outcome.error, details=outcome.details, submitted=submitted
        )
        return HTMLResponse(page, status_code=outcome.status)

    return JSONResponse(outcome.to_dict(), status_code=outcome.status)
