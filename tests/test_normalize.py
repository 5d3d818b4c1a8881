"""Tests for wren.rendering.normalize — directives to htmx wire attributes."""

import pytest

from wren.errors import AmbiguousVerbError, MissingRouteParams
from wren.rendering.context import RenderContext
from wren.rendering.normalize import normalize
from wren.routing.route import route, route_for

USER = route_for("/users/:id")


@pytest.fixture
def ctx() -> RenderContext:
    return RenderContext()


class TestGenericElements:
    @pytest.mark.parametrize("verb", ["get", "post", "put", "patch", "delete"])
    def test_verbs(self, ctx: RenderContext, verb: str) -> None:
        out = normalize("button", {verb: "/x"}, ctx)
        assert out == {f"hx-{verb}": "/x"}
        assert ctx.uses_directives

    @pytest.mark.parametrize(
        ("directive", "wire"),
        [
            ("target", "hx-target"),
            ("swap", "hx-swap"),
            ("trigger", "hx-trigger"),
            ("ext", "hx-ext"),
            ("sseConnect", "sse-connect"),
            ("sseSwap", "sse-swap"),
            ("sse_connect", "sse-connect"),
            ("sse_swap", "sse-swap"),
        ],
    )
    def test_non_verb_directives(self, ctx: RenderContext, directive: str, wire: str) -> None:
        out = normalize("div", {directive: "v"}, ctx)
        assert out == {wire: "v"}

    def test_structured_values_pass_through(self, ctx: RenderContext) -> None:
        out = normalize("div", {"vals": {"a": 1}, "headers": {"X-A": "b"}}, ctx)
        assert out == {"hx-vals": {"a": 1}, "hx-headers": {"X-A": "b"}}

    def test_route_built_with_params(self, ctx: RenderContext) -> None:
        out = normalize("button", {"get": USER, "params": {"id": 42}}, ctx)
        assert out == {"hx-get": "/users/42"}

    def test_params_consumed(self, ctx: RenderContext) -> None:
        out = normalize("button", {"get": "/plain", "params": {"id": 1}}, ctx)
        assert "params" not in out

    def test_route_missing_params_raises(self, ctx: RenderContext) -> None:
        with pytest.raises(MissingRouteParams, match="id"):
            normalize("button", {"delete": USER}, ctx)

    def test_custom_builder(self, ctx: RenderContext) -> None:
        custom = route("/t/:slug", lambda p: f"/t/{p['slug']}?v=2")
        out = normalize("div", {"get": custom, "params": {"slug": "a"}}, ctx)
        assert out["hx-get"] == "/t/a?v=2"

    def test_explicit_wire_attribute_wins(self, ctx: RenderContext) -> None:
        out = normalize("div", {"sseConnect": "/a", "sse-connect": "/b"}, ctx)
        assert out == {"sse-connect": "/b"}

    def test_unknown_attributes_pass_through(self, ctx: RenderContext) -> None:
        out = normalize("button", {"get": "/x", "id": "b", "class": "btn"}, ctx)
        assert out == {"hx-get": "/x", "id": "b", "class": "btn"}

    def test_fast_path_returns_same_object(self, ctx: RenderContext) -> None:
        attrs = {"id": "plain", "class": "x"}
        assert normalize("div", attrs, ctx) is attrs
        assert not ctx.uses_directives

    def test_none_directives_ignored(self, ctx: RenderContext) -> None:
        attrs = {"get": None, "target": None}
        assert normalize("div", attrs, ctx) is attrs
        assert not ctx.uses_directives

    def test_input_not_mutated(self, ctx: RenderContext) -> None:
        attrs = {"post": "/x", "target": "#t"}
        normalize("div", attrs, ctx)
        assert attrs == {"post": "/x", "target": "#t"}


class TestForms:
    def test_post_sets_action_and_method(self, ctx: RenderContext) -> None:
        out = normalize("form", {"post": "/todos"}, ctx)
        assert out == {"hx-post": "/todos", "action": "/todos", "method": "post"}

    @pytest.mark.parametrize("verb", ["get", "put", "patch", "delete"])
    def test_other_verbs_use_get(self, ctx: RenderContext, verb: str) -> None:
        out = normalize("form", {verb: "/x"}, ctx)
        assert out["action"] == "/x"
        assert out["method"] == "get"

    def test_explicit_action_kept(self, ctx: RenderContext) -> None:
        out = normalize("form", {"post": "/todos", "action": "/fallback"}, ctx)
        assert out["action"] == "/fallback"
        assert "method" not in out

    def test_explicit_method_kept(self, ctx: RenderContext) -> None:
        out = normalize("form", {"put": "/x", "method": "post"}, ctx)
        assert out["method"] == "post"
        assert out["action"] == "/x"

    def test_route_action(self, ctx: RenderContext) -> None:
        out = normalize("form", {"put": USER, "params": {"id": "a b"}}, ctx)
        assert out["action"] == "/users/a%20b"

    def test_two_verbs_ambiguous(self, ctx: RenderContext) -> None:
        with pytest.raises(AmbiguousVerbError) as exc_info:
            normalize("form", {"get": "/a", "post": "/b"}, ctx)
        assert exc_info.value.verbs == ("get", "post")

    def test_form_without_verb_untouched(self, ctx: RenderContext) -> None:
        attrs = {"action": "/search"}
        assert normalize("form", attrs, ctx) is attrs

    def test_two_verbs_fine_on_other_elements(self, ctx: RenderContext) -> None:
        out = normalize("div", {"get": "/a", "post": "/b"}, ctx)
        assert out == {"hx-get": "/a", "hx-post": "/b"}


class TestAnchors:
    def test_boost(self, ctx: RenderContext) -> None:
        out = normalize("a", {"href": "/about", "behavior": "boost"}, ctx)
        assert out == {"href": "/about", "hx-boost": "true"}
        assert ctx.uses_directives

    def test_other_behavior_dropped(self, ctx: RenderContext) -> None:
        out = normalize("a", {"href": "/about", "behavior": "fancy"}, ctx)
        assert out == {"href": "/about"}
        assert not ctx.uses_directives

    def test_route_href(self, ctx: RenderContext) -> None:
        out = normalize("a", {"href": USER, "params": {"id": 7}}, ctx)
        assert out == {"href": "/users/7"}

    def test_plain_anchor_fast_path(self, ctx: RenderContext) -> None:
        attrs = {"href": "/x"}
        assert normalize("a", attrs, ctx) is attrs

    def test_behavior_only_applies_to_anchors(self, ctx: RenderContext) -> None:
        out = normalize("div", {"behavior": "boost"}, ctx)
        assert out == {"behavior": "boost"}


class TestFalseDirectives:
    @pytest.mark.parametrize("verb", ["get", "post", "put", "patch", "delete"])
    def test_false_verb_is_absent(self, ctx: RenderContext, verb: str) -> None:
        out = normalize("button", {verb: False}, ctx)
        assert f"hx-{verb}" not in out
        assert not ctx.uses_directives

    def test_false_non_verb_consumed(self, ctx: RenderContext) -> None:
        out = normalize("div", {"get": "/x", "target": False}, ctx)
        assert out == {"hx-get": "/x"}

    def test_false_verb_does_not_make_form_ambiguous(self, ctx: RenderContext) -> None:
        out = normalize("form", {"post": "/save", "get": False}, ctx)
        assert out["hx-post"] == "/save"
        assert "hx-get" not in out
        assert out["method"] == "post"
