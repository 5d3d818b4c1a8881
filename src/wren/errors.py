"""Wren exception hierarchy.

Shared across the renderer, page guard, component router, and app so
every module raises and catches the same types.

Render-time failures split into two families: ``RenderStructureError``
for malformed templates and ``RenderLimitError`` for oversized input.
Callers can tell "attacker-sized tree" apart from "bug in a component"
by catching one family or the other.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when routes or components are defined incorrectly.

    Always raised eagerly, at definition time, never during a request.
    """


class DuplicateRouteParam(ConfigurationError):  # noqa: N818
    """A path template names the same ``:param`` twice."""

    def __init__(self, name: str, path: str) -> None:
        self.name = name
        self.path = path
        super().__init__(
            f'Duplicate path parameter ":{name}" in route "{path}". '
            "Each parameter name must be unique."
        )


class MissingRouteParams(ConfigurationError, ValueError):  # noqa: N818
    """``build()`` was called without every parameter the template needs."""

    def __init__(self, missing: list[str], path: str) -> None:
        self.missing = tuple(missing)
        self.path = path
        super().__init__(
            f"Missing required route parameters: {', '.join(missing)}. "
            f'Route "{path}" requires these parameters to build a URL.'
        )


# -- Render errors --


class RenderError(WrenError):
    """Base for errors that abort a render pass."""


class RenderStructureError(RenderError):
    """The tree itself is malformed."""


class AmbiguousVerbError(RenderStructureError):
    """A ``<form>`` carries more than one HTTP verb directive."""

    def __init__(self, verbs: list[str]) -> None:
        self.verbs = tuple(verbs)
        super().__init__(
            f"<form> has multiple HTTP verb directives ({', '.join(verbs)}); "
            "use exactly one of get/post/put/patch/delete."
        )


class WireAttributeError(RenderStructureError):
    """A caller passed an ``hx-*`` attribute directly."""

    def __init__(self, name: str, tag: str) -> None:
        self.name = name
        self.tag = tag
        super().__init__(
            "Manual hx-* attributes are disallowed; use directives "
            f"(get/post/target/...) instead. Found {name} on <{tag}>."
        )


class AsyncComponentError(RenderStructureError):
    """A component returned an awaitable instead of a node."""

    def __init__(self, component: str) -> None:
        self.component = component
        super().__init__(
            f'Async components are not supported. Component "{component}" '
            "returned an awaitable. Fetch data in the handler before rendering."
        )


class CircularAttributeError(RenderStructureError):
    """An attribute value refers to itself and cannot be serialized."""

    def __init__(self, attribute: str) -> None:
        self.attribute = attribute
        super().__init__(
            f'Cannot serialize attribute "{attribute}": circular reference detected. '
            "Ensure values passed to vals, headers, etc. are JSON-serializable."
        )


class RenderLimitError(RenderError):
    """A configured resource ceiling was exceeded."""

    def __init__(self, message: str, *, limit: int, reached: int) -> None:
        self.limit = limit
        self.reached = reached
        super().__init__(message)


class RenderDepthExceeded(RenderLimitError):  # noqa: N818
    """Nesting went deeper than ``max_depth``."""

    def __init__(self, limit: int, depth: int) -> None:
        super().__init__(
            f"Maximum render depth exceeded: {limit} (at depth {depth})",
            limit=limit,
            reached=depth,
        )


class RenderNodeLimitExceeded(RenderLimitError):  # noqa: N818
    """More than ``max_nodes`` nodes were visited."""

    def __init__(self, limit: int, count: int) -> None:
        super().__init__(
            f"Maximum node count exceeded: {limit} (at node {count})",
            limit=limit,
            reached=count,
        )


# -- Page guard errors --


class PageStructureError(RenderStructureError):
    """A full-page tree broke a structural rule.

    ``tag`` is the offending element (or component name) and ``path``
    the ancestor chain leading to it, e.g. ``html > body > main > h1``.
    """

    def __init__(self, message: str, *, tag: str, path: str) -> None:
        self.tag = tag
        self.path = path
        super().__init__(message)


class PageRootError(PageStructureError):
    """The tree does not start with ``<html>``."""


class PageSkeletonError(PageStructureError):
    """``<head>``/``<body>`` are missing or out of order."""


class DisallowedTagError(PageStructureError):
    """An element outside the allow-list."""


class SemanticStyleError(PageStructureError):
    """A semantic element carries ``class`` or inline ``style``."""


class StylePlacementError(PageStructureError):
    """A ``<style>`` block outside ``<head>``."""


class PageDepthExceeded(PageStructureError):  # noqa: N818
    """Validation recursed past its own ceiling."""


# -- HTTP errors --


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by the app dispatcher and middleware. The ASGI handler
    catches these and dispatches to the matching ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no component matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: a component owns the path but not this HTTP method.

    Includes an ``Allow`` header listing the valid methods in the order
    they were declared.
    """

    def __init__(self, allowed: tuple[str, ...], detail: str = "") -> None:
        allow_value = ", ".join(allowed)
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
