"""Static file serving middleware.

Serves files under a URL prefix from one directory, typically the
behavior script the renderer injects (``/static/htmx.js``). Requests
outside the prefix, or for files that don't exist, fall through to the
next handler.
"""

import mimetypes
from pathlib import Path

from wren.http.request import Request
from wren.http.response import Response, text_response
from wren.middleware.protocol import Next


class StaticFiles:
    """Middleware that serves files from *directory* under *prefix*.

    Symlinks are resolved and the final path must stay inside
    *directory*; anything else is answered with 403.

    Usage::

        app.add_middleware(StaticFiles("./static", prefix="/static"))
    """

    __slots__ = ("_cache_control", "_directory", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._prefix = "/" + prefix.strip("/")
        self._cache_control = cache_control

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def prefix(self) -> str:
        return self._prefix

    async def __call__(self, request: Request, next: Next) -> Response:
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        path = request.path
        if not path.startswith(self._prefix.rstrip("/") + "/"):
            return await next(request)

        relative = path[len(self._prefix) :].lstrip("/")
        file_path = (self._directory / relative).resolve()
        if not file_path.is_relative_to(self._directory):
            return text_response("Forbidden", 403)

        if not file_path.is_file():
            return await next(request)

        content_type, _ = mimetypes.guess_type(file_path.name)
        return Response(
            body=file_path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        ).with_header("Cache-Control", self._cache_control)
