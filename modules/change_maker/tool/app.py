from __future__ import annotations

from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from modules.change_maker.core.solver import compute_change
from modules.change_maker.tool.schemas import ChangeRequest
from vendbox.errors import ValidationNormalizeMiddleware
from vendbox.settings import get_settings, shared_templates_dir

app = FastAPI(title="Change Maker")
app.add_middleware(ValidationNormalizeMiddleware)

BASE_DIR = Path(__file__).parent
ROOT_DIR = BASE_DIR.parents[2]
SHARED_TEMPLATES = shared_templates_dir(ROOT_DIR)

templates = Jinja2Templates(
    directory=[str(BASE_DIR / "templates"), str(SHARED_TEMPLATES)]
)

logger = structlog.get_logger(__name__)


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    base_path = request.url.path.rstrip("/")
    return templates.TemplateResponse(
        request,
        "index.html",
        {"base_path": base_path, "limits": get_settings().debug_limits()},
    )


@app.post("/api/change")
def change(payload: ChangeRequest):
    settings = get_settings()
    result = compute_change(
        payload.register(),
        payload.payment_amount,
        debug=payload.debug,
        limits=settings.debug_limits(),
    )
    body = result.as_payload()
    if not result.success:
        logger.info(
            "api.change.rejected",
            amount=payload.payment_amount,
            reason=body["reason"],
        )
        return JSONResponse(body, status_code=400)
    return body
