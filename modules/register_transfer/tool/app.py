from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ConfigDict, Field

from modules.change_maker.tool.schemas import CoinIn
from modules.register_transfer.core.transfer import export_data, import_data
from modules.vending_catalog.core.catalog import DEFAULT_PRODUCTS
from modules.vending_catalog.tool.schemas import ProductIn
from vendbox.errors import ValidationNormalizeMiddleware
from vendbox.settings import shared_templates_dir

app = FastAPI(title="Register Transfer")
app.add_middleware(ValidationNormalizeMiddleware)

BASE_DIR = Path(__file__).parent
ROOT_DIR = BASE_DIR.parents[2]
SHARED_TEMPLATES = shared_templates_dir(ROOT_DIR)

templates = Jinja2Templates(
    directory=[str(BASE_DIR / "templates"), str(SHARED_TEMPLATES)]
)


class ExportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cash_register: List[CoinIn] = Field(default_factory=list, alias="cashRegister")
    products: List[ProductIn] = Field(default_factory=list)
    metadata: Dict[str, str] = Field(default_factory=dict)


class ImportRequest(BaseModel):
    text: str


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    base_path = request.url.path.rstrip("/")
    return templates.TemplateResponse(
        request,
        "index.html",
        {"base_path": base_path, "sample": export_data([], DEFAULT_PRODUCTS)},
    )


@app.post("/export", response_class=PlainTextResponse)
def export(payload: ExportRequest):
    return export_data(
        [coin.to_slot() for coin in payload.cash_register],
        [item.to_product() for item in payload.products],
        payload.metadata,
    )


@app.post("/import")
def import_(payload: ImportRequest):
    data = import_data(payload.text)
    if not data.register and not data.products:
        return JSONResponse(
            {"success": False, "message": "No register or product rows found."},
            status_code=400,
        )
    return {
        "success": True,
        "cashRegister": [slot.as_dict() for slot in data.register],
        "products": [product.as_dict() for product in data.products],
        "metadata": data.metadata,
    }
