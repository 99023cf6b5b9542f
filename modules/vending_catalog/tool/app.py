from __future__ import annotations

from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from modules.vending_catalog.core.catalog import DEFAULT_PRODUCTS, find_product
from modules.vending_catalog.core.purchase import purchase
from modules.vending_catalog.tool.schemas import PurchaseRequest
from vendbox.errors import ValidationNormalizeMiddleware
from vendbox.settings import get_settings, shared_templates_dir

app = FastAPI(title="Vending Catalog")
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
        {"base_path": base_path, "products": DEFAULT_PRODUCTS},
    )


@app.get("/products")
def list_products():
    return {"products": [product.as_dict() for product in DEFAULT_PRODUCTS]}


@app.post("/purchase")
def buy(payload: PurchaseRequest):
    catalog = (
        [item.to_product() for item in payload.products]
        if payload.products is not None
        else DEFAULT_PRODUCTS
    )
    product = find_product(payload.product_id, catalog)
    if product is None:
        return JSONResponse(
            {"success": False, "message": f"Unknown product '{payload.product_id}'."},
            status_code=404,
        )

    result = purchase(
        product,
        payload.payment_amount,
        [coin.to_slot() for coin in payload.cash_register],
        debug=payload.debug,
        limits=get_settings().debug_limits(),
    )
    if not result.success:
        logger.info("api.purchase.rejected", product=product.id, message=result.message)
        return JSONResponse(result.as_payload(), status_code=400)
    return result.as_payload()
