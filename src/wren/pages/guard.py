"""Page guard — structural validation for full HTML documents.

A page must be an ``<html>`` root with exactly one ``<head>`` followed by
exactly one ``<body>``. Inside it:

- only allow-listed tags may appear
- semantic tags (headings, lists, sectioning, table parts...) carry
  neither ``class`` nor inline ``style``
- ``<style>`` blocks live directly inside ``<head>``

Components are expanded while walking; their names join the ancestor
path reported in errors::

    PageStructureError: Semantic element <h1> cannot have a class.
    Offending path: html > body > Layout > main > h1

Validation is pure. It returns ``None`` or raises.
"""

import inspect
import threading
from collections.abc import Callable, Iterator
from typing import Any

from wren.errors import (
    AsyncComponentError,
    DisallowedTagError,
    PageDepthExceeded,
    PageRootError,
    PageSkeletonError,
    SemanticStyleError,
    StylePlacementError,
)
from wren.http.response import Response
from wren.nodes import Component, Element, Node
from wren.rendering.options import RenderOptions
from wren.rendering.renderer import render_to_response

MAX_VALIDATION_DEPTH = 2000

SEMANTIC_TAGS = frozenset({
    "header", "main", "nav", "section", "article", "aside", "footer",
    "h1", "h2", "h3", "h4", "h5", "h6", "p",
    "ul", "ol", "li", "dl", "dt", "dd",
    "figure", "figcaption",
    "table", "thead", "tbody", "tfoot", "tr", "th", "td", "caption",
    "address", "time", "blockquote", "q", "cite",
})

PAGE_TAGS = frozenset({"html", "head", "body", "meta", "title", "link", "script", "style"})

# Allowed, and free to carry class/style
NON_SEMANTIC_TAGS = frozenset({
    "a", "div", "span", "img", "picture", "source", "video", "audio", "canvas",
    "svg", "path", "g", "button", "form", "label", "input", "textarea", "select",
    "option", "optgroup", "progress", "details", "summary", "fieldset", "legend",
    "code", "pre", "kbd", "samp", "strong", "em", "small", "sup", "sub",
    "br", "hr", "col", "colgroup",
})

ALLOWED_TAGS = SEMANTIC_TAGS | PAGE_TAGS | NON_SEMANTIC_TAGS

_CLASS_ATTRS = ("class", "className")


def path_string(ancestors: tuple[str, ...], current: str | None = None) -> str:
    parts = (*ancestors, current) if current else ancestors
    return " > ".join(parts) if parts else "<root>"


def _flatten(node: Node) -> Iterator[Node]:
    if not isinstance(node, (list, tuple)):
        yield node
        return
    stack = [iter(node)]
    while stack:
        for child in stack[-1]:
            if isinstance(child, (list, tuple)):
                stack.append(iter(child))
                break
            yield child
        else:
            stack.pop()


def _check_skeleton(root: Element) -> None:
    kids = [k for k in _flatten(root.children) if isinstance(k, Element)]
    heads = [i for i, k in enumerate(kids) if k.tag == "head"]
    bodies = [i for i, k in enumerate(kids) if k.tag == "body"]

    if len(heads) != 1 or len(bodies) != 1:
        raise PageSkeletonError(
            "A page requires exactly one <head> and one <body> as children of <html>",
            tag="html",
            path="html",
        )
    if heads[0] > bodies[0]:
        raise PageSkeletonError(
            "<head> must appear before <body> inside <html>",
            tag="html",
            path="html",
        )


def _check_element(node: Element, ancestors: tuple[str, ...], parent: str | None) -> None:
    tag = node.tag
    if tag not in ALLOWED_TAGS:
        raise DisallowedTagError(
            f"Element <{tag}> is not allowed in a page. Use semantic HTML, "
            f"standard head/body tags, or components. Path: {path_string(ancestors, tag)}",
            tag=tag,
            path=path_string(ancestors, tag),
        )

    if tag in SEMANTIC_TAGS:
        if any(node.attrs.get(name) is not None for name in _CLASS_ATTRS):
            raise SemanticStyleError(
                f"Semantic element <{tag}> cannot have a class. "
                f"Offending path: {path_string(ancestors, tag)}",
                tag=tag,
                path=path_string(ancestors, tag),
            )
        if node.attrs.get("style") is not None:
            raise SemanticStyleError(
                f"Semantic element <{tag}> cannot have inline style. "
                f"Offending path: {path_string(ancestors, tag)}",
                tag=tag,
                path=path_string(ancestors, tag),
            )

    if tag == "style" and parent != "head":
        raise StylePlacementError(
            f"<style> tags must live inside <head>. Path: {path_string(ancestors, tag)}",
            tag=tag,
            path=path_string(ancestors, tag),
        )


def _check_root(node: Element, ancestors: tuple[str, ...], root_seen: bool) -> None:
    if node.tag != "html" or root_seen:
        raise PageRootError(
            "A page must return a single root <html> element",
            tag=node.tag,
            path=path_string(ancestors, node.tag),
        )
    _check_skeleton(node)


def validate_page(tree: Node) -> None:
    """Validate a full-document tree, raising a ``PageStructureError`` subclass.

    Raises ``AsyncComponentError`` if a component returns an awaitable.

    The walk is iterative, so ``MAX_VALIDATION_DEPTH`` (not the
    interpreter's recursion limit) bounds self-referencing components.
    """
    root_seen = False
    # (node, ancestor labels, nearest element tag, depth)
    stack: list[tuple[Node, tuple[str, ...], str | None, int]] = [(tree, (), None, 0)]

    while stack:
        node, ancestors, parent, depth = stack.pop()
        if depth > MAX_VALIDATION_DEPTH:
            raise PageDepthExceeded(
                f"Page validation exceeded depth limit {MAX_VALIDATION_DEPTH} "
                "(possible infinite recursion)",
                tag=ancestors[-1] if ancestors else "",
                path=path_string(ancestors),
            )

        match node:
            case None | bool():
                continue
            case str() | int() | float():
                if parent is None:
                    raise PageRootError(
                        "A page must return a root <html> element",
                        tag="#text",
                        path="<root>",
                    )
            case list() | tuple():
                stack.extend((child, ancestors, parent, depth + 1) for child in reversed(node))
            case Component():
                name = node.name
                rendered = node.expand()
                if inspect.isawaitable(rendered):
                    if inspect.iscoroutine(rendered):
                        rendered.close()
                    raise AsyncComponentError(name)
                stack.append((rendered, (*ancestors, name), parent, depth + 1))
            case Element():
                if parent is None:
                    _check_root(node, ancestors, root_seen)
                    root_seen = True
                _check_element(node, ancestors, parent)
                stack.append((node.children, (*ancestors, node.tag), node.tag, depth + 1))

    if not root_seen:
        raise PageRootError("A page must return a root <html> element", tag="", path="<root>")


class Page:
    """A validated full-page component.

    ``page.component`` can be used as a component inside other trees;
    ``page.render()`` produces a complete document response.
    """

    __slots__ = ("_lock", "_render_fn", "_validated", "options", "validate_once")

    def __init__(
        self,
        render_fn: Callable[[], Node],
        *,
        validate_once: bool = False,
        options: RenderOptions | None = None,
    ) -> None:
        self._render_fn = render_fn
        self._validated = False
        self._lock = threading.Lock()
        self.validate_once = validate_once
        self.options = options or RenderOptions()

    @property
    def validated(self) -> bool:
        return self._validated

    def component(self, **_props: Any) -> Node:
        """Build the tree and validate it (once, if ``validate_once``)."""
        tree = self._render_fn()
        if not self.validate_once:
            validate_page(tree)
            return tree
        if not self._validated:
            with self._lock:
                if not self._validated:
                    validate_page(tree)
                    self._validated = True
        return tree

    def render(self, *, status: int = 200) -> Response:
        return render_to_response(self.component(), self.options.merged(doctype=True), status=status)


def page(
    render_fn: Callable[[], Node],
    *,
    validate_once: bool = False,
    options: RenderOptions | None = None,
) -> Page:
    """Wrap a zero-argument render function as a guarded page.

    ::

        home = page(lambda: h("html", None, h("head", None, h("title", None, "Home")),
                                             h("body", None, h("main", None, "Hi"))))
        response = home.render()
    """
    return Page(render_fn, validate_once=validate_once, options=options)
