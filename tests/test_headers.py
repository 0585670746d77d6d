"""Tests for autoroute.http.headers — immutable, case-insensitive Headers."""

import pytest

from autoroute.http.headers import Headers


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            _h(("Accept", "*/*"))["X-Missing"]

    def test_contains_rejects_non_str(self) -> None:
        assert 42 not in _h(("Accept", "*/*"))  # type: ignore[operator]

    def test_len_deduplicates(self) -> None:
        assert len(_h(("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"))) == 1

    def test_get_list(self) -> None:
        h = _h(("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"))
        assert h.get_list("set-cookie") == ["a=1", "b=2"]
        assert h.get_list("x-missing") == []

    def test_get_default(self) -> None:
        assert _h().get("x-missing", "fallback") == "fallback"

    def test_from_dict(self) -> None:
        h = Headers.from_dict({"X-Token": "abc"})
        assert h["x-token"] == "abc"
        assert list(h) == ["x-token"]

    def test_iteration_keeps_first_seen_order(self) -> None:
        h = _h(("Host", "shop.test"), ("Accept", "*/*"), ("host", "other"))
        assert list(h) == ["host", "accept"]
        assert h.get_list("HOST") == ["shop.test", "other"]
