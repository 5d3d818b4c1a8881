"""Todos — routed components over an injected store.

``make_app(store)`` builds three bindings whose handlers close over the
store they are given:

- ``/todos`` (GET, POST): the list; POST adds an item and re-renders it
- ``/todos/:id`` (PATCH, DELETE): one item; toggled or removed in place
- ``/`` : the guarded full page that composes the list

Render functions stay pure. They only see props and the two routes.

Run with::

    uvicorn examples.todos.app:app
"""

import itertools
import threading
from dataclasses import dataclass, replace

from wren import App, AppConfig, Node, component, element_id, h, route_for
from wren.http import form_from

LIST_ID = "todo-list"

TODOS = route_for("/todos")
TODO = route_for("/todos/:id")


@dataclass(frozen=True, slots=True)
class Todo:
    id: int
    text: str
    done: bool = False


@dataclass(frozen=True, slots=True)
class NewTodo:
    text: str


class TodoStore:
    """In-memory todo storage. Safe to share across request threads."""

    def __init__(self) -> None:
        self._todos: dict[int, Todo] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def all(self) -> list[Todo]:
        with self._lock:
            return list(self._todos.values())

    def add(self, text: str) -> Todo:
        with self._lock:
            todo = Todo(id=next(self._ids), text=text)
            self._todos[todo.id] = todo
            return todo

    def toggle(self, todo_id: int) -> Todo | None:
        with self._lock:
            todo = self._todos.get(todo_id)
            if todo is None:
                return None
            todo = replace(todo, done=not todo.done)
            self._todos[todo.id] = todo
            return todo

    def remove(self, todo_id: int) -> bool:
        with self._lock:
            return self._todos.pop(todo_id, None) is not None


def item_id(todo: Todo) -> str:
    return f"todo-{todo.id}"


# -- Render functions --


def TodoItem(todo: Todo | None) -> Node:
    if todo is None:
        return None
    controls = {"params": {"id": todo.id}, "target": element_id(item_id(todo)), "swap": "outerHTML"}
    return h(
        "li",
        {"id": item_id(todo), "data-done": "true" if todo.done else None},
        h("span", None, todo.text),
        h("button", {"patch": TODO, **controls}, "Undo" if todo.done else "Done"),
        h("button", {"delete": TODO, **controls}, "Remove"),
    )


def TodoList(todos: list[Todo]) -> Node:
    return h("ul", {"id": LIST_ID}, [h(TodoItem, {"todo": t}) for t in todos])


def Document(todos: list[Todo]) -> Node:
    return h(
        "html",
        {"lang": "en"},
        h(
            "head",
            None,
            h("meta", {"charset": "utf-8"}),
            h("title", None, "Todos"),
            h("style", None, "li[data-done] span { text-decoration: line-through; }"),
        ),
        h(
            "body",
            None,
            h(
                "main",
                None,
                h("h1", None, "Todos"),
                h(
                    "form",
                    {"post": TODOS, "target": element_id(LIST_ID), "swap": "outerHTML"},
                    h("input", {"name": "text", "placeholder": "What needs doing?"}),
                    h("button", {"type": "submit"}, "Add"),
                ),
                h(TodoList, {"todos": todos}),
                h("div", {"id": "wren-error"}),
            ),
        ),
    )


# -- Application --


def make_app(store: TodoStore) -> App:
    """Build the todo app around *store*."""

    async def list_todos(request, params):
        if request.method == "POST":
            new = await form_from(request, NewTodo)
            if new.text:
                store.add(new.text)
        return {"todos": store.all()}

    def change_todo(request, params):
        try:
            todo_id = int(params["id"])
        except ValueError:
            return {"todo": None}
        if request.method == "DELETE":
            store.remove(todo_id)
            return {"todo": None}
        return {"todo": store.toggle(todo_id)}

    app = App(AppConfig(max_depth=64, max_nodes=10_000))
    app.mount(
        component(TODOS.path, methods=("GET", "POST"), handler=list_todos, render=TodoList),
        component(TODO.path, methods=("PATCH", "DELETE"), handler=change_todo, render=TodoItem),
    )

    @app.page("/")
    def index() -> Node:
        return Document(store.all())

    @app.error(404)
    @app.error(405)
    def http_error(request, exc):
        return h("p", {"id": "error"}, exc.detail)

    return app


app = make_app(TodoStore())
