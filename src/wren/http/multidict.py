"""Immutable multi-valued string mappings: headers, query strings, forms.

All three share one shape, ``Mapping[str, str]``, where ``m[key]``
returns the first value and ``m.get_list(key)`` returns all of them.
Headers additionally fold key case.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import parse_qsl


class MultiDict(Mapping[str, str]):
    """Ordered ``(key, value)`` pairs with first-value lookup."""

    __slots__ = ("_index", "_pairs")

    _fold_case = False

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        items = tuple(pairs)
        index: dict[str, list[str]] = {}
        for key, value in items:
            index.setdefault(self._key(key), []).append(value)
        object.__setattr__(self, "_pairs", items)
        object.__setattr__(self, "_index", index)

    def _key(self, key: str) -> str:
        return key.lower() if self._fold_case else key

    def __getitem__(self, key: str) -> str:
        return self._index[self._key(key)][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._key(key) in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"{type(self).__name__}({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._index.get(self._key(key))
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Return every value for *key*, in arrival order."""
        return list(self._index.get(self._key(key), ()))

    @property
    def pairs(self) -> tuple[tuple[str, str], ...]:
        return self._pairs


class Headers(MultiDict):
    """Case-insensitive request headers, decoded from ASGI byte pairs."""

    __slots__ = ()

    _fold_case = True

    @classmethod
    def from_raw(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)


class QueryParams(MultiDict):
    """Parsed query string. Blank values are kept."""

    __slots__ = ("raw",)

    def __init__(self, query_string: bytes | str = b"") -> None:
        text = query_string.decode("latin-1") if isinstance(query_string, bytes) else query_string
        super().__init__(parse_qsl(text, keep_blank_values=True))
        object.__setattr__(self, "raw", text)

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default
