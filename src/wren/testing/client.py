"""Async test client for wren applications.

Drives the app through its ASGI interface in-process and returns the
same ``Response`` type used in production.
"""

from __future__ import annotations

import json as json_module
from typing import Any
from urllib.parse import unquote, urlencode

from wren._internal.invoke import invoke
from wren.app import App
from wren.http.response import Response


class TestClient:
    """Async test client for wren applications.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.status == 200

    Entering the context runs the app's startup hooks; leaving it runs
    the shutdown hooks.
    """

    __test__ = False  # Tell pytest this is not a test class

    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        for hook in self.app._startup_hooks:
            await invoke(hook)
        return self

    async def __aexit__(self, *args: object) -> None:
        for hook in self.app._shutdown_hooks:
            await invoke(hook)

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("HEAD", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        form: dict[str, str] | None = None,
        json: Any = None,
    ) -> Response:
        """Send a POST. ``form`` is URL-encoded; ``json`` is JSON-encoded."""
        return await self.request("POST", path, headers=headers, body=body, form=form, json=json)

    async def put(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        form: dict[str, str] | None = None,
    ) -> Response:
        return await self.request("PUT", path, headers=headers, body=body, form=form)

    async def patch(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        form: dict[str, str] | None = None,
    ) -> Response:
        return await self.request("PATCH", path, headers=headers, body=body, form=form)

    async def delete(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("DELETE", path, headers=headers)

    async def fragment(
        self,
        path: str,
        *,
        method: str = "GET",
        target: str | None = None,
        trigger: str | None = None,
        headers: dict[str, str] | None = None,
        form: dict[str, str] | None = None,
    ) -> Response:
        """Send an htmx request (``HX-Request: true``)."""
        fragment_headers = {"HX-Request": "true"}
        if target is not None:
            fragment_headers["HX-Target"] = target
        if trigger is not None:
            fragment_headers["HX-Trigger"] = trigger
        fragment_headers.update(headers or {})
        return await self.request(method, path, headers=fragment_headers, form=form)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        form: dict[str, str] | None = None,
        json: Any = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app."""
        path_part, _, query_string = path.partition("?")

        all_headers: dict[str, str] = {}
        request_body = body or b""
        if form is not None:
            request_body = urlencode(form).encode("utf-8")
            all_headers["content-type"] = "application/x-www-form-urlencoded"
        elif json is not None:
            request_body = json_module.dumps(json).encode("utf-8")
            all_headers["content-type"] = "application/json"
        if request_body:
            all_headers["content-length"] = str(len(request_body))
        all_headers.update(headers or {})

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            # Servers hand over the decoded path and keep the wire form in raw_path
            "path": unquote(path_part),
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in all_headers.items()
            ],
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        status = 200
        raw_headers: list[tuple[bytes, bytes]] = []
        body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal status, raw_headers
            if message["type"] == "http.response.start":
                status = message["status"]
                raw_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        content_type = "text/html; charset=utf-8"
        extra_headers: list[tuple[str, str]] = []
        for name_b, value_b in raw_headers:
            name, value = name_b.decode("latin-1"), value_b.decode("latin-1")
            if name == "content-type":
                content_type = value
            else:
                extra_headers.append((name, value))

        return Response(
            body=b"".join(body_parts),
            status=status,
            content_type=content_type,
            headers=tuple(extra_headers),
        )
