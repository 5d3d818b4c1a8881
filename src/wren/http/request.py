"""Immutable HTTP request.

Frozen metadata with async body access. Handlers receive one of these
alongside the path parameters their binding extracted.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from wren._internal.asgi import Receive, Scope
from wren.http.forms import FormData, parse_form_data
from wren.http.multidict import Headers, QueryParams


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is read asynchronously via ``.body()``, ``.json()``, ``.form()``.
    """

    method: str
    path: str
    # Percent-encoded path as received; empty when built by hand
    raw_path: str = ""
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    path_params: dict[str, str] = field(default_factory=dict)
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    # ASGI receive callable for body streaming
    _receive: Receive = field(default=_empty_receive, repr=False, compare=False)

    # Body and parsed form, filled on first read
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def is_fragment(self) -> bool:
        """True for htmx requests (``HX-Request: true``)."""
        return self.headers.get("hx-request") == "true"

    @property
    def htmx_target(self) -> str | None:
        return self.headers.get("hx-target")

    @property
    def htmx_trigger(self) -> str | None:
        return self.headers.get("hx-trigger")

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def route_path(self) -> str:
        """The encoded path that bindings match against."""
        return self.raw_path or quote(self.path)

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body. Cached after the first call."""
        if "body" not in self._cache:
            self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["body"]

    async def stream(self) -> AsyncGenerator[bytes]:
        while True:
            message = await self._receive()
            if chunk := message.get("body", b""):
                yield chunk
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        return json.loads(await self.body())

    async def text(self) -> str:
        return (await self.body()).decode("utf-8")

    async def form(self) -> FormData:
        """Parse the body as URL-encoded or multipart form data.

        Raises:
            ValueError: If Content-Type is not a form encoding.
        """
        if "form" not in self._cache:
            content_type = self.content_type or "application/x-www-form-urlencoded"
            self._cache["form"] = parse_form_data(await self.body(), content_type)
        return self._cache["form"]

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        client = scope.get("client")
        raw_path = scope.get("raw_path")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            raw_path=raw_path.decode("latin-1").partition("?")[0] if raw_path else "",
            headers=Headers.from_raw(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )
