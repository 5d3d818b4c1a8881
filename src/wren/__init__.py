"""Wren — server-side rendering for htmx, without templates.

Build a tree, render it to HTML. Interaction directives (``get``,
``post``, ``target``, ``swap``...) compile to htmx attributes, and the
htmx script is injected only when a page actually uses them.

Basic usage::

    from wren import App, component, element_id, h

    def Counter(count: int) -> Node:
        return h("p", {"id": "counter"}, f"Count: {count}")

    counter = component("/counter", handler=load_count, render=Counter)

    app = App()
    app.mount(counter)

    h("button", {"post": counter, "target": element_id("counter")}, "+1")
"""

__version__ = "0.1.0"

# public name -> defining module, imported on first access
_LAZY_IMPORTS: dict[str, str] = {
    # Nodes
    "Component": "wren.nodes",
    "Element": "wren.nodes",
    "Fragment": "wren.nodes",
    "Node": "wren.nodes",
    "element_id": "wren.nodes",
    "h": "wren.nodes",
    # Routes
    "Route": "wren.routing.route",
    "route": "wren.routing.route",
    "route_for": "wren.routing.route",
    # Rendering
    "RenderOptions": "wren.rendering.options",
    "render_to_response": "wren.rendering.renderer",
    "render_to_string": "wren.rendering.renderer",
    # Pages and components
    "Page": "wren.pages.guard",
    "page": "wren.pages.guard",
    "validate_page": "wren.pages.guard",
    "RouteBinding": "wren.components",
    "component": "wren.components",
    # Application
    "App": "wren.app",
    "AppConfig": "wren.config",
    "Middleware": "wren.middleware.protocol",
    "Next": "wren.middleware.protocol",
    "Request": "wren.http.request",
    "Response": "wren.http.response",
    # Errors
    "ConfigurationError": "wren.errors",
    "HTTPError": "wren.errors",
    "MethodNotAllowed": "wren.errors",
    "NotFound": "wren.errors",
    "PageStructureError": "wren.errors",
    "RenderError": "wren.errors",
    "RenderLimitError": "wren.errors",
    "RenderStructureError": "wren.errors",
    "WrenError": "wren.errors",
}

__all__ = sorted(_LAZY_IMPORTS)


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import wren`` fast while providing a flat top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module 'wren' has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    value = getattr(importlib.import_module(module_name), name)
    globals()[name] = value
    return value
