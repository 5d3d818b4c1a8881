"""Renderer — walk a node tree and emit HTML.

Single pass, depth-first. Every element goes through directive
normalization before its attributes are serialized; text is escaped;
``<script>``/``<style>`` bodies are emitted raw. When any directive was
rewritten, the behavior script is appended just before ``</body>``.

Usage::

    from wren import h, render_to_string

    html = render_to_string(
        h("html", None,
          h("body", None, h("button", {"get": "/data", "target": "#out"}, "Load"))),
    )
    # <html><body><button hx-get="/data" hx-target="#out">Load</button>
    # <script src="/static/htmx.js"></script></body></html>

Pass ``max_depth`` / ``max_nodes`` when the tree's size depends on
untrusted input.
"""

import inspect
import json
import logging
from collections.abc import Iterator, Mapping
from typing import Any

from wren.errors import (
    AsyncComponentError,
    CircularAttributeError,
    RenderDepthExceeded,
    RenderLimitError,
    WireAttributeError,
)
from wren.http.response import Response
from wren.nodes import Component, Element, Node
from wren.rendering.context import RenderContext
from wren.rendering.escape import escape_html, style_to_css
from wren.rendering.normalize import WIRE_PREFIX, normalize
from wren.rendering.options import RenderOptions
from wren.routing.route import is_route

logger = logging.getLogger("wren.render")

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
})

# Raw text elements: content is not HTML-escaped
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

# JSX-style names accepted for convenience
_ATTR_ALIASES = {"className": "class", "htmlFor": "for"}

DOCTYPE = "<!DOCTYPE html>"


# -- Attribute serialization --


def _assert_acyclic(name: str, value: Any, active: set[int]) -> None:
    """Walk containers depth-first; a container seen on the current path is a cycle."""
    if not isinstance(value, (dict, list, tuple)):
        return
    marker = id(value)
    if marker in active:
        raise CircularAttributeError(name)
    active.add(marker)
    try:
        children = value.values() if isinstance(value, dict) else value
        for child in children:
            _assert_acyclic(name, child, active)
    finally:
        active.discard(marker)


def _json_attr(name: str, value: Any) -> str:
    _assert_acyclic(name, value, set())
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def serialize_attrs(attrs: Mapping[str, Any]) -> str:
    """Serialize normalized attributes to `` name="value"`` pairs."""
    parts: list[str] = []
    for key, value in attrs.items():
        if key == "children" or value is None or value is False:
            continue
        if callable(value) and not is_route(value):
            continue

        name = _ATTR_ALIASES.get(key, key)

        if value is True:
            parts.append(f" {name}")
        elif key == "style" and isinstance(value, Mapping):
            parts.append(f' style="{escape_html(style_to_css(value))}"')
        elif isinstance(value, (str, int, float)):
            parts.append(f' {name}="{escape_html(str(value))}"')
        elif is_route(value):
            parts.append(f' {name}="{escape_html(value.build({}))}"')
        else:
            # Structured values (hx-vals, hx-headers, ...) are JSON-encoded
            parts.append(f' {name}="{escape_html(_json_attr(name, value))}"')
    return "".join(parts)


# -- Tree walk --


def _iter_sequence(node: list[Node] | tuple[Node, ...], ctx: RenderContext) -> Iterator[Node]:
    """Yield the non-sequence items of *node* in order.

    Nested sequences are unrolled with an explicit stack, so list nesting
    is bounded by ``max_nodes`` rather than the interpreter's recursion
    limit. Each nested sequence counts as one visited node.
    """
    stack = [iter(node)]
    while stack:
        for child in stack[-1]:
            if isinstance(child, (list, tuple)):
                ctx.enter_node()
                stack.append(iter(child))
                break
            yield child
        else:
            stack.pop()


def _raw_text(node: Node) -> str:
    match node:
        case None | bool():
            return ""
        case str():
            return node
        case int() | float():
            return str(node)
        case _:
            return ""


def _render_raw_text(node: Node, ctx: RenderContext) -> str:
    """Children of ``<script>``/``<style>``: strings and numbers only.

    Every child is counted against ``max_nodes``; none opens a level.
    """
    ctx.enter_node()
    if not isinstance(node, (list, tuple)):
        return _raw_text(node)
    parts: list[str] = []
    for child in _iter_sequence(node, ctx):
        ctx.enter_node()
        parts.append(_raw_text(child))
    return "".join(parts)


def _render_component(node: Component, ctx: RenderContext) -> str:
    ctx.depth += 1
    try:
        rendered = node.expand()
        if inspect.isawaitable(rendered):
            if inspect.iscoroutine(rendered):
                rendered.close()
            raise AsyncComponentError(node.name)
        return _render_node(rendered, ctx)
    finally:
        ctx.depth -= 1


def _render_element(node: Element, ctx: RenderContext) -> str:
    tag = node.tag

    # Directives are the only sanctioned path to hx-* attributes.
    for key in node.attrs:
        if key.startswith(WIRE_PREFIX):
            raise WireAttributeError(key, tag)

    attrs = serialize_attrs(normalize(tag, node.attrs, ctx))

    if tag in VOID_ELEMENTS:
        return f"<{tag}{attrs}>"

    if tag in RAW_TEXT_ELEMENTS:
        if node.children is None:
            return f"<{tag}{attrs}></{tag}>"
        return f"<{tag}{attrs}>{_render_raw_text(node.children, ctx)}</{tag}>"

    inner = ""
    if node.children is not None:
        ctx.depth += 1
        try:
            inner = _render_node(node.children, ctx)
        finally:
            ctx.depth -= 1

    if tag == "body" and ctx.should_inject:
        inner += f'<script src="{escape_html(ctx.script_src)}"></script>'

    return f"<{tag}{attrs}>{inner}</{tag}>"


def _render_node(node: Node, ctx: RenderContext) -> str:
    ctx.enter_node(nested=isinstance(node, (Element, Component)))

    match node:
        case None | bool():
            return ""
        case str():
            return escape_html(node)
        case int() | float():
            return escape_html(str(node))
        case list() | tuple():
            return "".join(_render_node(child, ctx) for child in _iter_sequence(node, ctx))
        case Component():
            return _render_component(node, ctx)
        case Element():
            return _render_element(node, ctx)
        case _:
            return escape_html(str(node))


# -- Public API --


def render_to_string(node: Node, options: RenderOptions | None = None, **overrides: Any) -> str:
    """Render a tree to an HTML string.

    Keyword overrides replace fields of *options*::

        render_to_string(tree, max_nodes=10_000)

    Raises:
        RenderStructureError: malformed tree (ambiguous form verb, manual
            ``hx-*`` attribute, async component, circular attribute value).
        RenderLimitError: ``max_depth`` or ``max_nodes`` exceeded.
    """
    opts = (options or RenderOptions()).merged(**overrides)
    ctx = RenderContext.from_options(opts)
    try:
        html = _render_node(node, ctx)
    except RenderLimitError as exc:
        logger.debug("Render aborted: %s", exc)
        raise
    except RecursionError as exc:
        # Element nesting outgrew the interpreter stack before any configured ceiling
        limit = ctx.max_depth if ctx.max_depth is not None else ctx.deepest
        depth_exc = RenderDepthExceeded(limit, ctx.deepest)
        logger.debug("Render aborted: %s", depth_exc)
        raise depth_exc from exc
    if opts.doctype:
        return DOCTYPE + html
    return html


def render_to_response(
    node: Node,
    options: RenderOptions | None = None,
    *,
    status: int = 200,
    headers: Mapping[str, str] | None = None,
    **overrides: Any,
) -> Response:
    """Render a tree straight into an HTML ``Response``."""
    body = render_to_string(node, options, **overrides)
    response = Response(body=body, status=status)
    if headers:
        response = response.with_headers(headers)
    return response
