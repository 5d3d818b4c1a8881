"""Node model — the virtual tree every other module consumes.

A node is one of:

- a primitive (``str``, ``int``, ``float``, ``bool``, ``None``)
- a sequence (``list`` or ``tuple`` of nodes), flattened on render
- an ``Element``: an HTML tag with attributes and children
- a ``Component``: a render function plus the props to call it with

Build trees with ``h()``::

    from wren import h

    def Greeting(name: str) -> Node:
        return h("p", None, "Hello, ", name)

    tree = h("main", None, h(Greeting, {"name": "Ada"}))

The renderer and page guard dispatch on these types with ``match``.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

type Primitive = str | int | float | bool | None
type Node = Primitive | Element | Component | list[Node] | tuple[Node, ...]
type RenderFn = Callable[..., Node]

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class Element:
    """An HTML element: tag, attributes, children."""

    tag: str
    attrs: Mapping[str, Any] = field(default=_EMPTY)
    children: Node = None


@dataclass(frozen=True, slots=True)
class Component:
    """A deferred call to a render function.

    ``render(**props)`` must return a node synchronously.
    """

    render: RenderFn
    props: Mapping[str, Any] = field(default=_EMPTY)

    @property
    def name(self) -> str:
        return component_name(self.render)

    def expand(self) -> Any:
        """Call the render function. The result is not checked here."""
        return self.render(**self.props)


def Fragment(children: Node = None) -> Node:  # noqa: N802
    """Group children without a wrapping element."""
    return children


def h(tag: str | RenderFn, attrs: Mapping[str, Any] | None = None, *children: Node) -> Element | Component:
    """Build an element or component node.

    A string ``tag`` builds an ``Element``; a callable builds a
    ``Component`` whose props are ``attrs`` plus ``children`` (when any
    children are given).
    """
    if len(children) == 1:
        kids: Node = children[0]
    elif children:
        kids = list(children)
    else:
        kids = None

    if isinstance(tag, str):
        return Element(tag, dict(attrs) if attrs else _EMPTY, kids)

    props = dict(attrs) if attrs else {}
    if children:
        props["children"] = kids
    return Component(tag, props)


def element_id(name: str) -> str:
    """Return the CSS selector for an element id, for use as a ``target``.

    ``element_id("todo-list")`` -> ``"#todo-list"``
    """
    return f"#{name}"


def component_name(render: Callable[..., Any]) -> str:
    """Human-readable name of a render function, for error messages."""
    return getattr(render, "__qualname__", None) or getattr(render, "__name__", None) or "(anonymous component)"
