from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple


def _format_issue(issue: Dict[str, Any]) -> str:
    loc = [str(part) for part in issue.get("loc", []) if part != "body"]
    msg = str(issue.get("msg") or "Invalid value")
    if not loc:
        return msg
    return f"{'.'.join(loc)}: {msg}"


def summarize_validation_body(body: bytes) -> str:
    try:
        payload = json.loads(body.decode("utf-8") or "{}")
    except (UnicodeDecodeError, ValueError):
        return "Invalid request payload"

    detail = payload.get("detail") if isinstance(payload, dict) else None
    if not isinstance(detail, list):
        return "Invalid request payload"
    messages = [_format_issue(item) for item in detail if isinstance(item, dict)]
    return "; ".join(messages) or "Invalid request payload"


class ValidationNormalizeMiddleware:
    """Normalize FastAPI 422 validation responses into 400 with a short error body."""

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: Dict[str, Any], receive: Any, send: Any) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        status_code = 500
        headers: List[Tuple[bytes, bytes]] = []
        body_chunks: List[bytes] = []

        async def send_wrapper(message: Dict[str, Any]) -> None:
            nonlocal status_code, headers
            if message["type"] not in {"http.response.start", "http.response.body"}:
                await send(message)
                return
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
                headers = list(message.get("headers", []))
                return
            body_chunks.append(message.get("body", b"") or b"")
            if message.get("more_body"):
                return

            if status_code == 422:
                summary = summarize_validation_body(b"".join(body_chunks))
                payload = json.dumps({"success": False, "message": summary}).encode(
                    "utf-8"
                )
                filtered = [
                    (key, value)
                    for key, value in headers
                    if key.lower() not in {b"content-length", b"content-type"}
                ]
                filtered.append((b"content-type", b"application/json"))
                filtered.append((b"content-length", str(len(payload)).encode("ascii")))
                await send(
                    {
                        "type": "http.response.start",
                        "status": 400,
                        "headers": filtered,
                    }
                )
                await send({"type": "http.response.body", "body": payload})
                return

            await send(
                {
                    "type": "http.response.start",
                    "status": status_code,
                    "headers": headers,
                }
            )
            await send(
                {
                    "type": "http.response.body",
                    "body": b"".join(body_chunks),
                }
            )

        await self.app(scope, receive, send_wrapper)
