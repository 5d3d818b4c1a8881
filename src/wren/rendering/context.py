"""Render context — mutable state for exactly one render pass.

Created fresh by every ``render_to_string()`` call and discarded after,
so nothing leaks between requests.
"""

from dataclasses import dataclass

from wren.errors import RenderDepthExceeded, RenderNodeLimitExceeded
from wren.rendering.options import DEFAULT_SCRIPT_SRC, RenderOptions


@dataclass(slots=True)
class RenderContext:
    depth: int = 0
    nodes: int = 0
    max_depth: int | None = None
    max_nodes: int | None = None
    # Set by the normalizer whenever a directive is rewritten
    uses_directives: bool = False
    inject_override: bool | None = None
    # Deepest element/component level reached so far
    deepest: int = 0
    script_src: str = DEFAULT_SCRIPT_SRC

    @classmethod
    def from_options(cls, options: RenderOptions) -> "RenderContext":
        return cls(
            max_depth=options.max_depth,
            max_nodes=options.max_nodes,
            inject_override=options.inject_behavior_script,
            script_src=options.script_src,
        )

    def enter_node(self, *, nested: bool = False) -> None:
        """Count one visited node, enforcing both ceilings.

        ``nested`` is true for elements and components, the only nodes
        that open a new level; primitives and sequences never trip the
        depth ceiling.
        """
        if nested and self.max_depth is not None and self.depth >= self.max_depth:
            raise RenderDepthExceeded(self.max_depth, self.depth)
        if nested and self.depth > self.deepest:
            self.deepest = self.depth
        if self.max_nodes is not None and self.nodes >= self.max_nodes:
            raise RenderNodeLimitExceeded(self.max_nodes, self.nodes)
        self.nodes += 1

    def mark_directive(self) -> None:
        self.uses_directives = True

    @property
    def should_inject(self) -> bool:
        """Whether ``<body>`` gets the behavior script appended."""
        if self.inject_override is not None:
            return self.inject_override
        return self.uses_directives
