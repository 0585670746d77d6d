"""Tests for autoroute.http.response — the mutable Response builder."""

from autoroute.http.response import JSON, TEXT, Response


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status_code == 200
        assert response.body == b""
        assert response.finished is False

    def test_chaining(self) -> None:
        response = Response().status(201).header("Location", "/orders/1")
        assert response.status_code == 201
        assert response.get_header("location") == "/orders/1"

    def test_header_replaces(self) -> None:
        response = Response().header("X-A", "1").header("x-a", "2")
        assert response.headers == [("x-a", "2")]

    def test_text(self) -> None:
        response = Response().text("hi")
        assert response.body == b"hi"
        assert response.content_type == TEXT
        assert response.finished

    def test_json(self) -> None:
        response = Response().json({"a": 1})
        assert response.body == b'{"a": 1}'
        assert response.content_type == JSON

    def test_redirect(self) -> None:
        response = Response().redirect("/login")
        assert response.status_code == 302
        assert response.get_header("Location") == "/login"
        assert response.finished
