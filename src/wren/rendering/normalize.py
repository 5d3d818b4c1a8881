"""Directive normalization — rewrite directives into htmx wire attributes.

Directives are plain attributes (``get``, ``post``, ``target``, ``swap``,
...) that read like native HTML. Normalization replaces each one with
the ``hx-*`` / ``sse-*`` attribute htmx understands::

    {"post": "/todos", "target": "#list"}
    -> {"hx-post": "/todos", "hx-target": "#list"}

Rules by element kind:

- every element: verbs resolve to a URL (a literal string, or a Route
  built with the sibling ``params`` attribute, which is consumed)
- ``<form>``: at most one verb; ``action``/``method`` are filled in from
  it so the form still works without htmx
- ``<a>``: ``behavior="boost"`` becomes ``hx-boost="true"`` and a Route
  ``href`` is built

A directive never overwrites a wire attribute that is already set.
Attributes the table doesn't know pass through untouched.
"""

from collections.abc import Mapping
from typing import Any, Final, TypedDict

from wren.errors import AmbiguousVerbError
from wren.rendering.context import RenderContext
from wren.routing.route import Params, is_route, resolve_url

type Attrs = Mapping[str, Any]

VERBS: Final = ("get", "post", "put", "patch", "delete")

# directive -> wire attribute
NON_VERB_DIRECTIVES: Final = (
    ("target", "hx-target"),
    ("swap", "hx-swap"),
    ("trigger", "hx-trigger"),
    ("vals", "hx-vals"),
    ("headers", "hx-headers"),
    ("ext", "hx-ext"),
    ("sseConnect", "sse-connect"),
    ("sseSwap", "sse-swap"),
    ("sse_connect", "sse-connect"),
    ("sse_swap", "sse-swap"),
)

WIRE_PREFIX: Final = "hx-"


class Directives(TypedDict, total=False):
    """The attribute keys normalization consumes."""

    get: Any
    post: Any
    put: Any
    patch: Any
    delete: Any
    params: Params
    target: str
    swap: str
    trigger: str
    vals: Mapping[str, Any]
    headers: Mapping[str, str]
    ext: str
    sseConnect: str
    sseSwap: str
    behavior: str


def _is_set(value: Any) -> bool:
    """``None`` and ``False`` both mean "no directive"."""
    return value is not None and value is not False


def _has_directives(attrs: Attrs) -> bool:
    if attrs.get("params") is not None:
        return True
    if any(_is_set(attrs.get(verb)) for verb in VERBS):
        return True
    return any(_is_set(attrs.get(src)) for src, _ in NON_VERB_DIRECTIVES)


def _normalize_base(attrs: Attrs, ctx: RenderContext) -> Attrs:
    """Rewrite verb and non-verb directives. Copies only when needed."""
    if not _has_directives(attrs):
        return attrs

    out = dict(attrs)
    params = out.pop("params", None)

    for verb in VERBS:
        value = out.pop(verb, None)
        if not _is_set(value):
            continue
        ctx.mark_directive()
        wire = f"hx-{verb}"
        if out.get(wire) is None:
            out[wire] = resolve_url(value, params)

    for src, wire in NON_VERB_DIRECTIVES:
        value = out.pop(src, None)
        if not _is_set(value):
            continue
        ctx.mark_directive()
        if out.get(wire) is None:
            out[wire] = value

    return out


def normalize_form(attrs: Attrs, ctx: RenderContext) -> Attrs:
    verbs = [verb for verb in VERBS if _is_set(attrs.get(verb))]
    if len(verbs) > 1:
        raise AmbiguousVerbError(verbs)

    out = _normalize_base(attrs, ctx)
    if out.get("action") is not None:
        return out

    for verb in VERBS:
        url = out.get(f"hx-{verb}")
        if not url:
            continue
        if out is attrs:
            out = dict(attrs)
        out["action"] = url
        if out.get("method") is None:
            out["method"] = "post" if verb == "post" else "get"
        break
    return out


def normalize_anchor(attrs: Attrs, ctx: RenderContext) -> Attrs:
    behavior = attrs.get("behavior")
    href = attrs.get("href")
    route_href = href is not None and is_route(href)

    out = _normalize_base(attrs, ctx)
    if behavior is None and not route_href:
        return out
    if out is attrs:
        out = dict(attrs)

    if behavior is not None:
        out.pop("behavior", None)
        if behavior == "boost":
            ctx.mark_directive()
            if out.get("hx-boost") is None:
                out["hx-boost"] = "true"

    if route_href:
        out["href"] = resolve_url(href, attrs.get("params"))
    return out


def normalize(tag: str, attrs: Attrs, ctx: RenderContext) -> Attrs:
    """Normalize *attrs* for an element of kind *tag*.

    Returns *attrs* itself when nothing needed rewriting.
    """
    match tag:
        case "form":
            return normalize_form(attrs, ctx)
        case "a":
            return normalize_anchor(attrs, ctx)
        case _:
            return _normalize_base(attrs, ctx)
