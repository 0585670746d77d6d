"""Case-insensitive request headers.

Built once per request from the raw ASGI byte pairs. Names are
lower-cased into an index at construction, so every lookup after that
is a single dict access.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import TypeAlias

RawHeaders: TypeAlias = Iterable[tuple[bytes, bytes]]


def _decode(raw: RawHeaders) -> dict[str, list[str]]:
    index: dict[str, list[str]] = {}
    for name, value in raw:
        index.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
    return index


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``headers["Accept"]`` is the first ``accept`` value and
    ``get_list("set-cookie")`` every one of them. Iteration yields
    lower-cased names in the order they first appeared.
    """

    __slots__ = ("_index",)

    _index: dict[str, list[str]]

    def __init__(self, raw: RawHeaders = ()) -> None:
        object.__setattr__(self, "_index", _decode(raw))

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> "Headers":
        """Headers from a plain ``str -> str`` mapping (tests, tooling)."""
        return cls((name.encode("latin-1"), value.encode("latin-1")) for name, value in headers.items())

    def __getitem__(self, key: str) -> str:
        values = self._index.get(key.lower())
        if not values:
            raise KeyError(key)
        return values[0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        items = ", ".join(f"{name!r}: {values[0]!r}" for name, values in self._index.items())
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """First value for *key*, or *default*."""
        values = self._index.get(key.lower())
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key* (empty when absent)."""
        return list(self._index.get(key.lower(), ()))
