"""Tests for wren.http.response — chainable immutable responses."""

import json

from wren.http.response import HTML, TEXT, Response, text_response


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.content_type == HTML
        assert response.body_bytes == b""
        assert response.headers == ()

    def test_with_status_returns_new(self) -> None:
        original = Response("x")
        changed = original.with_status(201)
        assert changed.status == 201
        assert original.status == 200

    def test_with_header_appends(self) -> None:
        response = Response().with_header("X-A", "1").with_header("X-A", "2")
        assert response.headers == (("X-A", "1"), ("X-A", "2"))
        assert response.header("x-a") == "1"

    def test_with_headers(self) -> None:
        response = Response().with_headers({"X-A": "1", "X-B": "2"})
        assert response.header("X-B") == "2"
        assert response.header("X-C") is None

    def test_with_content_type(self) -> None:
        assert Response().with_content_type(TEXT).content_type == TEXT

    def test_text_and_bytes(self) -> None:
        assert Response("héllo").body_bytes == "héllo".encode()
        assert Response(b"abc").text == "abc"


class TestHtmxHeaders:
    def test_redirect_retarget_reswap(self) -> None:
        response = (
            Response()
            .with_hx_redirect("/login")
            .with_hx_retarget("#main")
            .with_hx_reswap("outerHTML")
        )
        assert response.header("HX-Redirect") == "/login"
        assert response.header("HX-Retarget") == "#main"
        assert response.header("HX-Reswap") == "outerHTML"

    def test_trigger_string(self) -> None:
        assert Response().with_hx_trigger("closeModal").header("HX-Trigger") == "closeModal"

    def test_trigger_dict(self) -> None:
        response = Response().with_hx_trigger({"showToast": {"message": "Saved!"}})
        assert json.loads(response.header("HX-Trigger")) == {"showToast": {"message": "Saved!"}}

    def test_push_url(self) -> None:
        assert Response().with_hx_push_url("/todos").header("HX-Push-Url") == "/todos"
        assert Response().with_hx_push_url(False).header("HX-Push-Url") == "false"

    def test_refresh(self) -> None:
        assert Response().with_hx_refresh().header("HX-Refresh") == "true"


def test_text_response() -> None:
    response = text_response("Not Found", 404)
    assert response.status == 404
    assert response.content_type == TEXT
    assert response.text == "Not Found"
