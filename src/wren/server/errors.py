"""Error mapping — HTTPError and unexpected failures to Responses.

Registered ``@app.error()`` handlers win; otherwise a plain-text body
is returned, or a small HTML snippet when the request came from htmx.
"""

import inspect
import logging
import traceback
from collections.abc import Callable
from typing import Any

from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response, text_response
from wren.rendering.escape import escape_html
from wren.rendering.options import RenderOptions
from wren.rendering.renderer import render_to_response

logger = logging.getLogger("wren.server")

type ErrorHandlers = dict[int | type[Exception], Callable[..., Any]]


def default_fragment_error(status: int, detail: str) -> str:
    """HTML snippet swapped into the page for htmx error responses."""
    return f'<div class="wren-error" data-status="{status}">{escape_html(detail)}</div>'


def _with_htmx_error_headers(response: Response, request: Request) -> Response:
    """Point htmx at ``#wren-error`` and fire a ``wrenError`` event."""
    if not request.is_fragment:
        return response
    return (
        response
        .with_hx_retarget("#wren-error")
        .with_hx_reswap("innerHTML")
        .with_hx_trigger("wrenError")
    )


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    options: RenderOptions,
) -> Response:
    """Invoke a user error handler.

    Handlers may take zero, one (request), or two (request, exc)
    arguments, may be sync or async, and may return a ``Response``, a
    string, or a node tree to render.
    """
    arity = len(inspect.signature(handler).parameters)
    args = (request, exc)[: min(arity, 2)]

    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result

    if isinstance(result, Response):
        return result
    if isinstance(result, str):
        return Response(body=result)
    return render_to_response(result, options)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: ErrorHandlers,
    options: RenderOptions,
) -> Response:
    """Map an HTTPError to a Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    if handler is not None:
        response = await call_error_handler(handler, request, exc, options)
        # Keep the error status unless the handler chose its own
        if response.status == 200:
            response = response.with_status(exc.status)
    elif request.is_fragment:
        response = Response(body=default_fragment_error(exc.status, exc.detail), status=exc.status)
    else:
        response = text_response(exc.detail or f"Error {exc.status}", exc.status)

    for name, value in exc.headers:
        if response.header(name) is None:
            response = response.with_header(name, value)
    return _with_htmx_error_headers(response, request)


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    options: RenderOptions,
    *,
    debug: bool = False,
) -> Response:
    """Log an unexpected exception and answer 500.

    The body stays opaque unless *debug* is set, in which case it carries
    the traceback.
    """
    logger.exception("500 %s %s", request.method, request.path)

    handler = error_handlers.get(type(exc)) or error_handlers.get(500)
    if handler is not None:
        response = await call_error_handler(handler, request, exc, options)
        if response.status == 200:
            response = response.with_status(500)
        return response

    if debug:
        detail = "".join(traceback.format_exception(exc))
        if request.is_fragment:
            response = Response(body=default_fragment_error(500, detail), status=500)
            return _with_htmx_error_headers(response, request)
        return text_response(detail, 500)

    if request.is_fragment:
        response = Response(body=default_fragment_error(500, "Internal Server Error"), status=500)
        return _with_htmx_error_headers(response, request)
    return text_response("Internal Server Error", 500)
