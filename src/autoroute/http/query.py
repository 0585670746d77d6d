"""Query string parameters of a request.

Route handlers see the query string the way they see headers: a
read-only mapping where a repeated key keeps all of its values, in the
order they were sent.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    ``params["tag"]`` is the first ``tag`` value; ``get_list("tag")`` is
    every one of them. ``to_dict()`` collapses the parameters into plain
    JSON-friendly values.
    """

    __slots__ = ("_values",)

    _values: dict[str, list[str]]

    def __init__(self, query_string: bytes | str = b"") -> None:
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        values: dict[str, list[str]] = {}
        for key, value in parse_qsl(query_string, keep_blank_values=True):
            values.setdefault(key, []).append(value)
        object.__setattr__(self, "_values", values)

    def __getitem__(self, key: str) -> str:
        return self._values[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"QueryParams({self.to_dict()!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """First value for *key*, or *default*."""
        values = self._values.get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key* (empty when absent)."""
        return list(self._values.get(key, ()))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """First value for *key* as an int; *default* when missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def to_dict(self) -> dict[str, str | list[str]]:
        """A plain dict: single values as strings, repeated keys as lists."""
        return {key: vals[0] if len(vals) == 1 else list(vals) for key, vals in self._values.items()}
