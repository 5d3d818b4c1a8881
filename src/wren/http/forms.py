"""Form parsing and dataclass binding.

URL-encoded bodies are parsed with ``urllib.parse``; multipart bodies
with ``python-multipart``.

``form_from()`` binds a form to a frozen dataclass with light type
coercion for ``str``, ``int``, ``float``, and ``bool``::

    @dataclass(frozen=True, slots=True)
    class NewTodo:
        text: str

    async def create(request, params):
        todo = await form_from(request, NewTodo)
"""

import types
from collections.abc import Iterable, Mapping
from dataclasses import MISSING, dataclass
from dataclasses import fields as dc_fields
from typing import Any, get_type_hints
from urllib.parse import parse_qsl

from python_multipart.multipart import MultipartParser, parse_options_header

from wren.http.multidict import MultiDict


@dataclass(frozen=True, slots=True)
class UploadFile:
    """An uploaded file held in memory."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(MultiDict):
    """Parsed form fields plus uploaded files (``form.files``)."""

    __slots__ = ("files",)

    def __init__(
        self,
        pairs: Iterable[tuple[str, str]] = (),
        files: Mapping[str, UploadFile] | None = None,
    ) -> None:
        super().__init__(pairs)
        object.__setattr__(self, "files", dict(files or {}))


class FormBindingError(ValueError):
    """Form data could not be bound to a dataclass.

    ``errors`` maps field names to messages.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__(f"Form binding failed for: {', '.join(sorted(errors))}")


_COERCIONS: dict[type, Any] = {
    str: lambda v: v.strip(),
    int: int,
    float: float,
    bool: lambda v: v.lower() in ("true", "1", "yes", "on"),
}


def _unwrap_optional(hint: Any) -> type:
    """``X | None`` -> ``X``; anything unusable falls back to ``str``."""
    if isinstance(hint, types.UnionType):
        args = [a for a in hint.__args__ if a is not type(None)]
        if args:
            return args[0]
    return hint if isinstance(hint, type) else str


def bind_form[T](form: Mapping[str, str], datacls: type[T]) -> T:
    """Bind an already-parsed form to *datacls*.

    Raises ``FormBindingError`` listing every missing or invalid field.
    """
    hints = get_type_hints(datacls)
    errors: dict[str, list[str]] = {}
    values: dict[str, Any] = {}

    for f in dc_fields(datacls):  # type: ignore[arg-type]
        raw = form.get(f.name)
        if raw is None:
            if f.default is not MISSING:
                values[f.name] = f.default
            elif f.default_factory is not MISSING:
                values[f.name] = f.default_factory()
            else:
                errors.setdefault(f.name, []).append(f"{f.name} is required.")
            continue

        target = _unwrap_optional(hints.get(f.name, str))
        coerce = _COERCIONS.get(target, target)
        try:
            values[f.name] = coerce(raw)
        except (ValueError, TypeError):
            errors.setdefault(f.name, []).append(
                f"Invalid value for {f.name}: expected {target.__name__}."
            )

    if errors:
        raise FormBindingError(errors)
    return datacls(**values)


async def form_from[T](request: Any, datacls: type[T]) -> T:
    """Read ``request.form()`` and bind it to *datacls*."""
    return bind_form(await request.form(), datacls)


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a form body.

    Raises ``ValueError`` for content types that aren't form encodings.
    """
    media_type = content_type.lower().split(";")[0].strip()

    if media_type == "application/x-www-form-urlencoded":
        return FormData(parse_qsl(body.decode("utf-8"), keep_blank_values=True))

    if media_type == "multipart/form-data":
        return _parse_multipart(body, content_type)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    fields: list[tuple[str, str]] = []
    files: dict[str, UploadFile] = {}

    # Per-part state, reset on every part boundary
    part: dict[str, Any] = {}
    header_name = ""

    def on_part_begin() -> None:
        part.clear()
        part["data"] = bytearray()
        part["headers"] = {}

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        part["data"].extend(chunk[start:end])

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        nonlocal header_name
        header_name = chunk[start:end].decode("latin-1").lower()

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        value = chunk[start:end].decode("latin-1")
        part["headers"][header_name] = value
        if header_name == "content-disposition":
            _, params = parse_options_header(value)
            if (name := params.get(b"name")) is not None:
                part["name"] = name.decode("utf-8")
            if (filename := params.get(b"filename")) is not None:
                part["filename"] = filename.decode("utf-8")

    def on_part_end() -> None:
        name = part.get("name")
        if name is None:
            return
        content = bytes(part["data"])
        if "filename" in part:
            files[name] = UploadFile(
                filename=part["filename"],
                content_type=part["headers"].get("content-type", "application/octet-stream"),
                content=content,
            )
        else:
            fields.append((name, content.decode("utf-8", errors="replace")))

    parser = MultipartParser(
        boundary,
        {
            "on_part_begin": on_part_begin,
            "on_part_data": on_part_data,
            "on_part_end": on_part_end,
            "on_header_field": on_header_field,
            "on_header_value": on_header_value,
        },
    )
    parser.write(body)
    parser.finalize()
    return FormData(fields, files)
