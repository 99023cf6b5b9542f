from __future__ import annotations

from importlib import import_module
from pathlib import Path
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from vendbox.registry import load_modules

logger = structlog.get_logger(__name__)

CATEGORY_DESCRIPTIONS = {
    "Money": "Cash register tools: change making, rounding and transfers.",
    "Shop": "Product catalog and purchases paid in cash.",
    "Other": "Useful modules that do not fit a core category.",
}
DEFAULT_CATEGORY_DESCRIPTION = "Practical utilities for the vending machine."


def _slugify(value: str) -> str:
    return value.strip().lower().replace(" ", "-")


def build_categories(modules: dict[str, dict[str, Any]] | None = None) -> list[dict[str, Any]]:
    if modules is None:
        modules = load_modules()
    public = [module for module in modules.values() if module.get("public", True)]
    grouped: dict[str, list[dict[str, Any]]] = {}
    for module in public:
        category = module.get("category") or "Other"
        grouped.setdefault(str(category), []).append(module)

    categories: list[dict[str, Any]] = []
    for category, items in sorted(grouped.items(), key=lambda item: item[0].lower()):
        items.sort(key=lambda item: item.get("title") or item.get("name", ""))
        categories.append(
            {
                "name": category,
                "slug": _slugify(category),
                "description": CATEGORY_DESCRIPTIONS.get(
                    category, DEFAULT_CATEGORY_DESCRIPTION
                ),
                "modules": items,
            }
        )
    return categories


def import_attr(path: str) -> Any:
    if ":" not in path:
        raise ValueError(f"Invalid entrypoint '{path}'. Expected module:attr.")
    module_path, attr = path.split(":", 1)
    module = import_module(module_path)
    return getattr(module, attr)


def build_app() -> FastAPI:
    app = FastAPI(title="vendbox")

    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    modules = load_modules()

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request):
        base_path = request.scope.get("root_path", "").rstrip("/")
        return templates.TemplateResponse(
            request,
            "index.html",
            {"categories": build_categories(modules), "base_path": base_path},
        )

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    for meta in modules.values():
        entrypoints = meta.get("entrypoints") or {}
        api_entry = entrypoints.get("api")
        if not api_entry:
            continue

        try:
            subapp = import_attr(api_entry)
        except (ImportError, AttributeError, ValueError) as exc:
            logger.warning("engine.mount_failed", module=meta["name"], error=str(exc))
            continue

        app.mount(meta["mount"], subapp)
        logger.info("engine.mounted", module=meta["name"], mount=meta["mount"])

    return app
