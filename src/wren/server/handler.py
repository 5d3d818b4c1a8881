"""ASGI handler — translate one HTTP scope into a Response and send it.

The only component besides the sender that touches raw ASGI. Builds a
Request, runs it through the middleware chain around the dispatcher,
and maps any exception to an error response.
"""

from collections.abc import Callable
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Next
from wren.rendering.options import RenderOptions
from wren.server.dispatch import Dispatcher
from wren.server.errors import ErrorHandlers, handle_http_error, handle_internal_error
from wren.server.sender import send_response


def build_chain(dispatch: Next, middleware: tuple[Callable[..., Any], ...]) -> Next:
    """Wrap *dispatch* so the first middleware registered runs outermost."""
    handler = dispatch
    for mw in reversed(middleware):

        async def call_next(req: Request, _mw: Any = mw, _next: Next = handler) -> Response:
            return await _mw(req, _next)

        handler = call_next
    return handler


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    middleware: tuple[Callable[..., Any], ...],
    error_handlers: ErrorHandlers,
    render_options: RenderOptions,
    max_content_length: int,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    request = Request.from_asgi(scope, receive)

    try:
        length = request.content_length
        if length is not None and length > max_content_length:
            raise HTTPError(status=413, detail="Payload Too Large")
        response = await build_chain(dispatcher, middleware)(request)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, render_options)
    except Exception as exc:
        response = await handle_internal_error(
            exc, request, error_handlers, render_options, debug=debug
        )

    await send_response(response, send, method=request.method)
