"""Route — a path template paired with a URL builder.

Any directive that takes a URL (``get``, ``post``, ``href``...) accepts
either a literal string or a Route. Routes carry no matching logic;
``RouteBinding`` owns that.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from wren.routing.pattern import PathPattern

type Params = Mapping[str, Any]


@runtime_checkable
class Buildable(Protocol):
    """Anything with a ``path`` template and a ``build(params)`` method.

    ``Route`` and ``RouteBinding`` both satisfy it.
    """

    @property
    def path(self) -> str: ...

    def build(self, params: Params | None = None) -> str: ...


@dataclass(frozen=True, slots=True)
class Route:
    """An immutable path template and URL builder."""

    path: str
    builder: Callable[[Params], str]

    def build(self, params: Params | None = None) -> str:
        return self.builder(params or {})


def route(path: str, build: Callable[[Params], str]) -> Route:
    """Create a Route from a template and an explicit builder.

    ::

        user = route("/users/:id", lambda p: f"/users/{p['id']}")
        h("button", {"get": user, "params": {"id": 42}}, "View")
    """
    return Route(path=path, builder=build)


def route_for(path: str) -> Route:
    """Create a Route whose builder is derived from the template itself.

    Values are percent-encoded and missing parameters raise
    ``MissingRouteParams``. Duplicate names raise ``DuplicateRouteParam``
    immediately.
    """
    pattern = PathPattern.parse(path)
    return Route(path=path, builder=pattern.build)


def is_route(value: object) -> bool:
    """True if *value* can be used wherever a Route is accepted."""
    return not isinstance(value, str) and isinstance(value, Buildable)


def resolve_url(urlish: Any, params: Params | None = None) -> str:
    """Turn a literal URL or a Route into a URL string."""
    if is_route(urlish):
        return urlish.build(params or {})
    return str(urlish)
