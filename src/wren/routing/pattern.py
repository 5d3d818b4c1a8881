"""Path templates — compile ``/users/:id`` into a matcher and a URL builder.

Templates use ``:name`` segments. Compilation happens once, when a
component is defined; matching and building reuse the compiled form.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, unquote

from wren.errors import DuplicateRouteParam, MissingRouteParams

PARAM_RE = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


def param_names(path: str) -> list[str]:
    """Return the ``:param`` names in *path*, in order of appearance."""
    return PARAM_RE.findall(path)


def compile_path(path: str) -> re.Pattern[str]:
    """Compile a path template into an anchored regex.

    Literal text is escaped; each ``:name`` becomes a ``([^/]+)`` group.

    Examples::

        "/users"            -> ^/users$
        "/users/:id"        -> ^/users/([^/]+)$
        "/a/:x/b/:y"        -> ^/a/([^/]+)/b/([^/]+)$
    """
    parts: list[str] = []
    pos = 0
    for m in PARAM_RE.finditer(path):
        parts.append(re.escape(path[pos : m.start()]))
        parts.append("([^/]+)")
        pos = m.end()
    parts.append(re.escape(path[pos:]))
    return re.compile(f"^{''.join(parts)}$")


@dataclass(frozen=True, slots=True)
class PathPattern:
    """A compiled path template.

    Raises ``DuplicateRouteParam`` on construction if a name repeats.
    """

    path: str
    regex: re.Pattern[str]
    names: tuple[str, ...]

    @classmethod
    def parse(cls, path: str) -> PathPattern:
        names = param_names(path)
        seen: set[str] = set()
        for name in names:
            if name in seen:
                raise DuplicateRouteParam(name, path)
            seen.add(name)
        return cls(path=path, regex=compile_path(path), names=tuple(names))

    def match(self, pathname: str) -> dict[str, str] | None:
        """Return extracted parameters, or ``None`` if *pathname* doesn't match.

        *pathname* is the percent-encoded path as sent on the wire, so an
        encoded ``/`` (``%2F``) stays inside its segment. Captured values
        are decoded, which makes ``match(build(params))`` give back
        *params* as strings.
        """
        m = self.regex.match(pathname)
        if m is None:
            return None
        return {name: unquote(value) for name, value in zip(self.names, m.groups(), strict=True)}

    def build(self, params: Mapping[str, Any] | None = None) -> str:
        """Substitute parameters into the template.

        Every value is stringified and percent-encoded, so ``/`` and ``..``
        can't escape their segment. Raises ``MissingRouteParams`` naming
        every absent parameter.
        """
        values = params or {}
        missing = [name for name in self.names if name not in values]
        if missing:
            raise MissingRouteParams(missing, self.path)
        return PARAM_RE.sub(lambda m: quote(str(values[m.group(1)]), safe=""), self.path)
