"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

HTML = "text/html; charset=utf-8"
TEXT = "text/plain; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def header(self, name: str) -> str | None:
        """First header value named *name* (case-insensitive), or ``None``."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    # -- htmx response headers --

    def with_hx_redirect(self, url: str) -> Response:
        """Full-page client redirect (``HX-Redirect``)."""
        return self.with_header("HX-Redirect", url)

    def with_hx_retarget(self, selector: str) -> Response:
        """Swap into a different element than the request targeted."""
        return self.with_header("HX-Retarget", selector)

    def with_hx_reswap(self, strategy: str) -> Response:
        return self.with_header("HX-Reswap", strategy)

    def with_hx_trigger(self, event: str | dict[str, Any]) -> Response:
        """Fire a client-side event once the response arrives.

        Accepts an event name or a dict of events with payloads::

            .with_hx_trigger("closeModal")
            .with_hx_trigger({"showToast": {"message": "Saved!"}})
        """
        value = event if isinstance(event, str) else json.dumps(event)
        return self.with_header("HX-Trigger", value)

    def with_hx_push_url(self, url: str | bool) -> Response:
        value = url if isinstance(url, str) else ("true" if url else "false")
        return self.with_header("HX-Push-Url", value)

    def with_hx_refresh(self) -> Response:
        return self.with_header("HX-Refresh", "true")

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


def text_response(body: str, status: int) -> Response:
    """Plain-text response, used for the generic 404/405/500 bodies."""
    return Response(body=body, status=status, content_type=TEXT)
