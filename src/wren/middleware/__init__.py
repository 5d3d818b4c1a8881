"""Middleware: ``async (request, next) -> Response`` callables."""

from wren.middleware.protocol import Middleware, Next
from wren.middleware.static import StaticFiles

__all__ = ["Middleware", "Next", "StaticFiles"]
