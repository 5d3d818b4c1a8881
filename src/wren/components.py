"""Routed components — a path, a method allow-list, a handler, a render function.

A ``RouteBinding`` co-locates everything one URL needs::

    todo_list = component(
        "/todos",
        methods=("GET", "POST"),
        handler=load_todos,          # (request, params) -> props mapping
        render=TodoList,             # (**props) -> Node
    )

It is also a Route, so it can be used directly as a directive value::

    h("form", {"post": todo_list, "target": element_id("todo-list")}, ...)

``handle()`` never raises. Method and path mismatches become 405 and
404 responses; anything raised by the handler, render function, or
renderer is logged and turned into an opaque 500.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from wren._internal.invoke import invoke
from wren.http.request import Request
from wren.http.response import Response, text_response
from wren.nodes import Component, Node
from wren.rendering.options import RenderOptions
from wren.rendering.renderer import render_to_response
from wren.routing.pattern import PathPattern
from wren.routing.route import Params

logger = logging.getLogger("wren.server")

type Handler = Callable[[Request, dict[str, str]], Mapping[str, Any] | Awaitable[Mapping[str, Any]]]

DEFAULT_METHODS = ("GET",)


@dataclass(frozen=True, slots=True)
class RouteBinding:
    """An addressable component. Immutable once built; use ``component()``."""

    pattern: PathPattern
    handler: Handler
    render: Callable[..., Node]
    methods: tuple[str, ...] = DEFAULT_METHODS
    full_page: bool = False
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()
    render_options: RenderOptions | None = field(default=None, compare=False)

    @property
    def path(self) -> str:
        return self.pattern.path

    def build(self, params: Params | None = None) -> str:
        """Fill the path template. Values are percent-encoded.

        Raises ``MissingRouteParams`` naming every absent parameter.
        """
        return self.pattern.build(params or {})

    def match(self, path: str) -> dict[str, str] | None:
        return self.pattern.match(path)

    def allows(self, method: str) -> bool:
        return method.upper() in self.methods

    def component(self, **props: Any) -> Component:
        """The bare render function as a component node, for composition and tests."""
        return Component(self.render, props)

    def with_options(self, options: RenderOptions) -> RouteBinding:
        return replace(self, render_options=options)

    async def handle(self, request: Request) -> Response:
        """Dispatch one request: method, then path, then handler and render."""
        if not self.allows(request.method):
            return text_response("Method Not Allowed", 405).with_header(
                "Allow", ", ".join(self.methods)
            )

        params = self.match(request.route_path)
        if params is None:
            return text_response("Not Found", 404)

        try:
            props = await invoke(self.handler, replace(request, path_params=params), params)
            return self._render(props)
        except Exception:
            logger.exception("500 %s %s", request.method, request.path)
            return text_response("Internal Server Error", 500)

    def _render(self, props: Mapping[str, Any]) -> Response:
        options = self.render_options or RenderOptions()
        if self.full_page:
            options = options.merged(doctype=True)
        response = render_to_response(self.component(**props), options, status=self.status)
        if self.headers:
            response = response.with_headers(dict(self.headers))
        return response


def component(
    path: str,
    *,
    handler: Handler,
    render: Callable[..., Node],
    methods: tuple[str, ...] | list[str] = DEFAULT_METHODS,
    full_page: bool = False,
    status: int = 200,
    headers: Mapping[str, str] | None = None,
    render_options: RenderOptions | None = None,
) -> RouteBinding:
    """Create a ``RouteBinding``.

    The path template is compiled here, so a duplicated ``:param``
    raises ``DuplicateRouteParam`` at definition time rather than on
    the first request.
    """
    return RouteBinding(
        pattern=PathPattern.parse(path),
        handler=handler,
        render=render,
        methods=tuple(m.upper() for m in methods),
        full_page=full_page,
        status=status,
        headers=tuple((headers or {}).items()),
        render_options=render_options,
    )
