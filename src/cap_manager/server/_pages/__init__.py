from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from cap_manager.store import VALID_STATUSES

router = APIRouter(include_in_schema=False)
templates = Jinja2Templates(Path(__file__).parent / "_templates")

PING_INTERVAL_MS = 30_000


@router.get("/", response_class=HTMLResponse)
async def get_index(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request=request,
        name="index.html",
        context={
            "statuses": VALID_STATUSES,
            "store_name": request.app.state.store_path.name,
            "ping_interval": PING_INTERVAL_MS,
        },
    )
