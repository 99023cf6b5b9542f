from __future__ import annotations

import asyncio
import json

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from fastapi.testclient import TestClient

from vendbox.errors import ValidationNormalizeMiddleware, summarize_validation_body
from vendbox.settings import shared_templates_dir


def _run(app, scope):
    sent = []

    async def receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message):
        sent.append(message)

    asyncio.run(ValidationNormalizeMiddleware(app)(scope, receive, send))
    return sent


def _http_scope():
    return {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [],
        "extensions": {"http.response.debug": {}},
    }


def test_extension_messages_pass_through_once():
    async def app(scope, receive, send):
        await send({"type": "http.response.debug", "info": {"template": "index.html"}})
        await send({"type": "http.response.start", "status": 200, "headers": []})
        await send({"type": "http.response.body", "body": b"<p>ok</p>"})

    sent = _run(app, _http_scope())

    assert [message["type"] for message in sent] == [
        "http.response.debug",
        "http.response.start",
        "http.response.body",
    ]
    assert sent[1]["status"] == 200
    assert sent[2]["body"] == b"<p>ok</p>"


def test_chunked_422_is_rewritten():
    detail = {"detail": [{"loc": ["body", "paymentAmount"], "msg": "Field required"}]}
    raw = json.dumps(detail).encode("utf-8")

    async def app(scope, receive, send):
        await send({"type": "http.response.start", "status": 422, "headers": []})
        await send({"type": "http.response.body", "body": raw[:10], "more_body": True})
        await send({"type": "http.response.body", "body": raw[10:]})

    sent = _run(app, _http_scope())

    assert [message["type"] for message in sent] == ["http.response.start", "http.response.body"]
    assert sent[0]["status"] == 400
    assert json.loads(sent[1]["body"]) == {
        "success": False,
        "message": "paymentAmount: Field required",
    }
    assert (b"content-length", str(len(sent[1]["body"])).encode("ascii")) in sent[0]["headers"]


def test_template_page_renders_through_middleware():
    app = FastAPI()
    app.add_middleware(ValidationNormalizeMiddleware)
    templates = Jinja2Templates(directory=str(shared_templates_dir()))

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request):
        return templates.TemplateResponse(
            request, "index.html", {"base_path": "", "categories": []}
        )

    response = TestClient(app).get("/")

    assert response.status_code == 200
    assert response.template.name == "index.html"


def test_summary_for_unparseable_body():
    assert summarize_validation_body(b"not json") == "Invalid request payload"
    assert summarize_validation_body(b'{"detail": "nope"}') == "Invalid request payload"
