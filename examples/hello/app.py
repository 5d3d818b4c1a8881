"""Hello — the smallest wren app: one guarded page and one fragment.

The page renders a counter and a button. Clicking the button POSTs to
the counter component, which answers with just the new ``<p>``::

    uvicorn examples.hello.app:app
"""

from dataclasses import dataclass

from wren import App, Node, component, element_id, h

COUNTER_ID = "counter"


@dataclass(slots=True)
class Clicks:
    count: int = 0


def Counter(count: int) -> Node:
    return h("p", {"id": COUNTER_ID}, f"Clicked {count} times")


def make_app(clicks: Clicks) -> App:
    """Build the app around a click counter the caller owns."""

    def load_counter(request, params):
        if request.method == "POST":
            clicks.count += 1
        return {"count": clicks.count}

    counter = component("/counter", methods=("GET", "POST"), handler=load_counter, render=Counter)

    app = App()
    app.mount(counter)

    @app.page("/")
    def index() -> Node:
        return h(
            "html",
            {"lang": "en"},
            h("head", None, h("title", None, "Hello")),
            h(
                "body",
                None,
                h("main", None,
                    h("h1", None, "Hello, World!"),
                    h(Counter, {"count": clicks.count}),
                    h("button", {
                        "post": counter,
                        "target": element_id(COUNTER_ID),
                        "swap": "outerHTML",
                    }, "Click"),
                ),
            ),
        )

    return app


app = make_app(Clicks())
