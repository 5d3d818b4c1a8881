"""Rendering — directive normalization, escaping, and HTML emission."""

from wren.rendering.options import RenderOptions
from wren.rendering.renderer import render_to_response, render_to_string

__all__ = ["RenderOptions", "render_to_response", "render_to_string"]
