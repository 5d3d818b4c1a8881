"""Routing — typed path templates and URL building.

Templates are compiled once at definition time into an immutable
``PathPattern``; ``Route`` pairs a template with a builder.
"""

from wren.routing.pattern import PathPattern
from wren.routing.route import Route, is_route, resolve_url, route, route_for

__all__ = ["PathPattern", "Route", "is_route", "resolve_url", "route", "route_for"]
