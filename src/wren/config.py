"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

from wren.rendering.options import RenderOptions


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, static_dir="static", max_nodes=50_000)
    """

    debug: bool = False

    # Static files (the behavior script is served from here)
    static_dir: str | Path | None = None
    static_url: str = "/static"
    behavior_script: str = "htmx.js"

    # Rendering limits, None means unlimited
    max_depth: int | None = None
    max_nodes: int | None = None

    # None = inject the behavior script only when directives are used
    inject_behavior_script: bool | None = None

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    @property
    def script_src(self) -> str:
        """URL the injected ``<script>`` tag points at."""
        return f"{self.static_url.rstrip('/')}/{self.behavior_script}"

    def render_options(self) -> RenderOptions:
        """Render options derived from this config."""
        return RenderOptions(
            max_depth=self.max_depth,
            max_nodes=self.max_nodes,
            inject_behavior_script=self.inject_behavior_script,
            script_src=self.script_src,
        )
