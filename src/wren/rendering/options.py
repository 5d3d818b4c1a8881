"""Render options — frozen per-call settings."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

DEFAULT_SCRIPT_SRC = "/static/htmx.js"


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Options controlling a single render call.

    ``max_depth`` / ``max_nodes``: resource ceilings, unlimited when ``None``.
    ``inject_behavior_script``: ``True`` always injects the behavior script
    before ``</body>``, ``False`` never does, ``None`` injects only when a
    directive was normalized somewhere in the tree.
    ``doctype``: prefix ``<!DOCTYPE html>`` (full-page responses only).
    """

    max_depth: int | None = None
    max_nodes: int | None = None
    inject_behavior_script: bool | None = None
    script_src: str = DEFAULT_SCRIPT_SRC
    doctype: bool = False

    def merged(self, **overrides: Any) -> RenderOptions:
        """Return a copy with the given fields replaced."""
        if not overrides:
            return self
        return replace(self, **overrides)
