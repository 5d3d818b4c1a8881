"""Dispatcher — pick the RouteBinding that owns a request.

Built once when the app freezes. Bindings are tried in registration
order; the first whose pattern matches and whose method list allows the
request method wins.
"""

from dataclasses import replace

from wren.components import RouteBinding
from wren.errors import MethodNotAllowed, NotFound
from wren.http.request import Request
from wren.http.response import Response


class Dispatcher:
    """Immutable binding table."""

    __slots__ = ("_bindings",)

    def __init__(self, bindings: tuple[RouteBinding, ...]) -> None:
        self._bindings = bindings

    @property
    def bindings(self) -> tuple[RouteBinding, ...]:
        return self._bindings

    def resolve(self, method: str, path: str) -> RouteBinding:
        """Return the binding for *method* and *path*.

        Raises:
            NotFound: No binding matches the path.
            MethodNotAllowed: Some binding matches the path, none allows the
                method. ``Allow`` lists every method of every matching
                binding, in registration order.
        """
        allowed: list[str] = []
        for binding in self._bindings:
            if binding.match(path) is None:
                continue
            if binding.allows(method):
                return binding
            allowed.extend(m for m in binding.methods if m not in allowed)

        if not allowed:
            raise NotFound()
        raise MethodNotAllowed(tuple(allowed))

    async def __call__(self, request: Request) -> Response:
        method = request.method
        # HEAD is served by the GET binding; the sender drops the body
        if method == "HEAD":
            try:
                binding = self.resolve(method, request.route_path)
            except MethodNotAllowed:
                binding = self.resolve("GET", request.route_path)
                method = "GET"
        else:
            binding = self.resolve(method, request.route_path)
        if method != request.method:
            request = replace(request, method=method)
        return await binding.handle(request)
