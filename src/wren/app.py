"""Wren application class.

Mutable during setup (binding registration, middleware, error handlers).
Frozen when the ASGI server first calls it.
"""

import inspect
import threading
from collections.abc import Callable
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren.components import RouteBinding, component
from wren.config import AppConfig
from wren.http.request import Request
from wren.middleware.protocol import Middleware
from wren.middleware.static import StaticFiles
from wren.nodes import Node
from wren.pages.guard import validate_page
from wren.server.dispatch import Dispatcher
from wren.server.errors import ErrorHandlers
from wren.server.handler import handle_request


def _accepts_request(func: Callable[..., Any]) -> bool:
    return len(inspect.signature(func).parameters) > 0


class App:
    """The wren application.

    Collects ``RouteBinding``s and serves them over ASGI::

        app = App(AppConfig(static_dir="static"))
        app.mount(todo_list)

        @app.page("/")
        def home() -> Node:
            return h("html", None, h("head", None), h("body", None, h("main", None, "Hi")))

    Thread safety:
        Setup is single-threaded (decorators at import time). Freezing
        uses a lock plus double-check so exactly one thread builds the
        dispatcher, however many workers take their first request at once.
    """

    __slots__ = (
        "_bindings",
        "_dispatcher",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._bindings: list[RouteBinding] = []
        self._middleware_list: list[Middleware] = []
        self._error_handlers: ErrorHandlers = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._dispatcher: Dispatcher | None = None
        self._middleware: tuple[Middleware, ...] = ()

    # -- Registration --

    def mount(self, *bindings: RouteBinding) -> None:
        """Serve one or more bindings. Earlier registrations match first.

        Bindings created without ``render_options`` pick up the app's
        render limits and script settings.
        """
        self._check_not_frozen()
        options = self.config.render_options()
        for binding in bindings:
            if binding.render_options is None:
                binding = binding.with_options(options)
            self._bindings.append(binding)

    def page(self, path: str, *, guard: bool = True) -> Callable[[Callable[..., Any]], RouteBinding]:
        """Register a full-page GET handler via decorator.

        The handler takes no arguments or the request, may be async, and
        returns the page tree. With ``guard`` (the default) the tree must
        pass ``validate_page``.
        """

        def decorator(func: Callable[..., Any]) -> RouteBinding:
            pass_request = _accepts_request(func)

            async def load(request: Request, params: dict[str, str]) -> dict[str, Any]:
                tree = await (invoke(func, request) if pass_request else invoke(func))
                return {"tree": tree}

            def render(tree: Node) -> Node:
                if guard:
                    validate_page(tree)
                return tree

            render.__qualname__ = getattr(func, "__qualname__", render.__qualname__)
            binding = component(path, handler=load, render=render, full_page=True)
            self.mount(binding)
            return binding

        return decorator

    def error(self, code_or_exception: int | type[Exception]) -> Callable[..., Any]:
        """Register an error handler for a status code or exception type."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware. The first one added runs outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* (sync or async) during ASGI lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* (sync or async) during ASGI lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    @property
    def bindings(self) -> tuple[RouteBinding, ...]:
        return tuple(self._bindings)

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        self._ensure_frozen()
        assert self._dispatcher is not None

        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self._dispatcher,
            middleware=self._middleware,
            error_handlers=self._error_handlers,
            render_options=self.config.render_options(),
            max_content_length=self.config.max_content_length,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze, then run startup/shutdown hooks as the server asks."""
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the runtime state. Only called while holding _freeze_lock."""
        self._dispatcher = Dispatcher(tuple(self._bindings))

        middleware = list(self._middleware_list)
        if self.config.static_dir is not None:
            middleware.insert(0, StaticFiles(self.config.static_dir, prefix=self.config.static_url))
        self._middleware = tuple(middleware)

        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Mount bindings and add middleware before the first request."
            )
            raise RuntimeError(msg)
