"""Tests for autoroute.http.query — immutable QueryParams."""

import pytest

from autoroute.http.query import QueryParams


class TestQueryParams:
    def test_getitem(self) -> None:
        q = QueryParams(b"q=hello&page=2")
        assert q["q"] == "hello"
        assert q["page"] == "2"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            QueryParams(b"q=hello")["missing"]

    def test_get_list(self) -> None:
        q = QueryParams(b"tag=python&tag=rust")
        assert q.get_list("tag") == ["python", "rust"]
        assert q.get_list("missing") == []

    def test_get_int(self) -> None:
        q = QueryParams(b"page=3&size=abc")
        assert q.get_int("page") == 3
        assert q.get_int("size") is None
        assert q.get_int("missing", 10) == 10

    def test_blank_value_preserved(self) -> None:
        assert QueryParams(b"flag=")["flag"] == ""

    def test_first_value_returned(self) -> None:
        assert QueryParams(b"x=first&x=second")["x"] == "first"

    def test_to_dict_collapses_single_values(self) -> None:
        q = QueryParams(b"q=shoes&tag=red&tag=blue")
        assert q.to_dict() == {"q": "shoes", "tag": ["red", "blue"]}

    def test_accepts_str(self) -> None:
        assert QueryParams("name=caf%C3%A9")["name"] == "café"
