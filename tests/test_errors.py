"""Tests for the wren error hierarchy and HTTP error mapping."""

import logging

import pytest

from wren.errors import (
    AmbiguousVerbError,
    AsyncComponentError,
    ConfigurationError,
    DuplicateRouteParam,
    HTTPError,
    MethodNotAllowed,
    MissingRouteParams,
    NotFound,
    PageRootError,
    PageStructureError,
    RenderDepthExceeded,
    RenderError,
    RenderLimitError,
    RenderNodeLimitExceeded,
    RenderStructureError,
    WireAttributeError,
    WrenError,
)
from wren.http.response import Response
from wren.nodes import h
from wren.rendering.options import RenderOptions
from wren.server.errors import (
    call_error_handler,
    default_fragment_error,
    handle_http_error,
    handle_internal_error,
)
from wren.testing import make_request

OPTIONS = RenderOptions()


class TestHierarchy:
    def test_configuration_errors(self) -> None:
        assert issubclass(DuplicateRouteParam, ConfigurationError)
        assert issubclass(MissingRouteParams, ValueError)
        assert issubclass(ConfigurationError, WrenError)

    def test_render_families_are_disjoint(self) -> None:
        for cls in (AmbiguousVerbError, WireAttributeError, AsyncComponentError, PageRootError):
            assert issubclass(cls, RenderStructureError)
            assert not issubclass(cls, RenderLimitError)
        for cls in (RenderDepthExceeded, RenderNodeLimitExceeded):
            assert issubclass(cls, RenderLimitError)
            assert not issubclass(cls, RenderStructureError)
        assert issubclass(RenderLimitError, RenderError)

    def test_depth_message(self) -> None:
        exc = RenderDepthExceeded(10, 11)
        assert str(exc) == "Maximum render depth exceeded: 10 (at depth 11)"
        assert exc.limit == 10
        assert exc.reached == 11

    def test_page_error_carries_path(self) -> None:
        exc = PageRootError("bad root", tag="div", path="<root>")
        assert isinstance(exc, PageStructureError)
        assert exc.tag == "div"
        assert exc.path == "<root>"

    def test_missing_params_lists_all(self) -> None:
        exc = MissingRouteParams(["id", "slug"], "/posts/:id/:slug")
        assert exc.missing == ("id", "slug")
        assert "id, slug" in str(exc)


class TestHTTPError:
    def test_str(self) -> None:
        assert str(HTTPError(status=400, detail="Bad")) == "400: Bad"
        assert str(HTTPError(status=418)) == "418"

    def test_not_found(self) -> None:
        exc = NotFound()
        assert exc.status == 404
        assert exc.detail == "Not Found"

    def test_method_not_allowed(self) -> None:
        exc = MethodNotAllowed(("GET", "POST"))
        assert exc.status == 405
        assert exc.headers == (("Allow", "GET, POST"),)
        assert "GET, POST" in exc.detail


class TestHandleHttpError:
    async def test_plain_text_default(self) -> None:
        response = await handle_http_error(NotFound(), make_request(), {}, OPTIONS)
        assert response.status == 404
        assert response.text == "Not Found"
        assert response.content_type.startswith("text/plain")

    async def test_fragment_snippet(self) -> None:
        request = make_request(headers={"HX-Request": "true"})
        response = await handle_http_error(NotFound("No <todo>"), request, {}, OPTIONS)
        assert response.text == default_fragment_error(404, "No <todo>")
        assert "&lt;todo&gt;" in response.text
        assert response.header("HX-Retarget") == "#wren-error"
        assert response.header("HX-Reswap") == "innerHTML"
        assert response.header("HX-Trigger") == "wrenError"

    async def test_allow_header_copied(self) -> None:
        response = await handle_http_error(MethodNotAllowed(("GET",)), make_request("POST"), {}, OPTIONS)
        assert response.header("Allow") == "GET"

    async def test_status_handler_keeps_status(self) -> None:
        handlers = {404: lambda: "custom"}
        response = await handle_http_error(NotFound(), make_request(), handlers, OPTIONS)
        assert response.status == 404
        assert response.text == "custom"

    async def test_type_handler_wins(self) -> None:
        handlers = {NotFound: lambda: "by type", 404: lambda: "by status"}
        response = await handle_http_error(NotFound(), make_request(), handlers, OPTIONS)
        assert response.text == "by type"

    async def test_handler_may_return_node(self) -> None:
        handlers = {404: lambda request: h("p", None, f"missing {request.path}")}
        response = await handle_http_error(NotFound(), make_request(path="/x"), handlers, OPTIONS)
        assert response.text == "<p>missing /x</p>"


class TestHandleInternalError:
    async def test_opaque_500(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="wren.server"):
            response = await handle_internal_error(
                RuntimeError("secret detail"), make_request(), {}, OPTIONS
            )
        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert "secret" not in response.text
        assert any("500 GET /" in r.getMessage() for r in caplog.records)

    async def test_fragment_500(self) -> None:
        request = make_request(headers={"HX-Request": "true"})
        response = await handle_internal_error(RuntimeError("x"), request, {}, OPTIONS)
        assert 'data-status="500"' in response.text
        assert response.header("HX-Trigger") == "wrenError"

    async def test_debug_500_shows_exception(self) -> None:
        response = await handle_internal_error(
            RuntimeError("secret detail"), make_request(), {}, OPTIONS, debug=True
        )
        assert response.status == 500
        assert response.content_type.startswith("text/plain")
        assert "RuntimeError: secret detail" in response.text

    async def test_debug_fragment_500_escapes_detail(self) -> None:
        request = make_request(headers={"HX-Request": "true"})
        response = await handle_internal_error(
            ValueError("<b>bad</b>"), request, {}, OPTIONS, debug=True
        )
        assert 'data-status="500"' in response.text
        assert "ValueError: &lt;b&gt;bad&lt;/b&gt;" in response.text
        assert response.header("HX-Trigger") == "wrenError"

    async def test_handler_receives_exception(self) -> None:
        async def on_error(request, exc):
            return Response(f"failed: {type(exc).__name__}")

        response = await handle_internal_error(
            KeyError("k"), make_request(), {500: on_error}, OPTIONS
        )
        assert response.status == 500
        assert response.text == "failed: KeyError"


async def test_call_error_handler_arity() -> None:
    request = make_request()
    exc = RuntimeError("boom")
    assert (await call_error_handler(lambda: "a", request, exc, OPTIONS)).text == "a"
    assert (await call_error_handler(lambda r: r.path, request, exc, OPTIONS)).text == "/"
    assert (await call_error_handler(lambda r, e: str(e), request, exc, OPTIONS)).text == "boom"
