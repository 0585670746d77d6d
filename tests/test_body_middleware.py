"""Tests for autoroute.middleware — body parsers, upload parser, cache."""

from typing import Any

import pytest

from autoroute.errors import HTTPError, PayloadTooLarge
from autoroute.http.headers import Headers
from autoroute.http.request import Request
from autoroute.http.response import Response
from autoroute.middleware import (
    MiddlewareCache,
    json_parser,
    no_cache_headers,
    upload_parser,
    urlencoded_parser,
)
from autoroute.testing import encode_multipart


class _Next:
    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, error: Any = None) -> None:
        self.calls.append(error)


def _request(body: bytes, content_type: str) -> Request:
    async def receive() -> dict[str, Any]:
        return {"type": "http.request", "body": body, "more_body": False}

    headers = Headers.from_dict(
        {"content-type": content_type, "content-length": str(len(body))}
    )
    return Request(method="POST", path="/x", headers=headers, _receive=receive)


class TestJsonParser:
    @pytest.mark.asyncio
    async def test_parses_json(self) -> None:
        request = _request(b'{"a": 1}', "application/json; charset=utf-8")
        next = _Next()
        await json_parser(1024)(request, Response(), next)
        assert request.body == {"a": 1}
        assert next.calls == [None]

    @pytest.mark.asyncio
    async def test_ignores_other_types(self) -> None:
        request = _request(b"a=1", "application/x-www-form-urlencoded")
        next = _Next()
        await json_parser(1024)(request, Response(), next)
        assert request.body is None
        assert next.calls == [None]

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        request = _request(b"{nope", "application/json")
        next = _Next()
        await json_parser(1024)(request, Response(), next)
        (error,) = next.calls
        assert isinstance(error, HTTPError)
        assert error.status == 400

    @pytest.mark.asyncio
    async def test_too_large(self) -> None:
        request = _request(b'{"a": "' + b"x" * 50 + b'"}', "application/json")
        next = _Next()
        await json_parser(10)(request, Response(), next)
        (error,) = next.calls
        assert isinstance(error, PayloadTooLarge)
        assert error.status == 413


class TestUrlencodedParser:
    @pytest.mark.asyncio
    async def test_parses_form(self) -> None:
        request = _request(b"name=Ada&tag=a&tag=b", "application/x-www-form-urlencoded")
        next = _Next()
        await urlencoded_parser(1024)(request, Response(), next)
        assert request.form is not None
        assert request.form["name"] == "Ada"
        assert request.form.get_list("tag") == ["a", "b"]
        assert next.calls == [None]


class TestUploadParser:
    @pytest.mark.asyncio
    async def test_files_and_fields(self) -> None:
        body = encode_multipart(
            {"title": "x"},
            {
                "doc": ("a.txt", b"first", "text/plain"),
            },
        )
        request = _request(body, "multipart/form-data; boundary=autoroute-test-boundary")
        next = _Next()
        await upload_parser(1024)(request, Response(), next)
        assert next.calls == [None]
        assert request.form is not None and request.form["title"] == "x"
        assert request.uploaded_files["doc"].content == b"first"
        assert len(request.uploaded_files_list) == 1

    @pytest.mark.asyncio
    async def test_oversized_file_not_fatal(self) -> None:
        body = encode_multipart(files={"doc": ("a.bin", b"x" * 64, "application/octet-stream")})
        request = _request(body, "multipart/form-data; boundary=autoroute-test-boundary")
        next = _Next()
        await upload_parser(8)(request, Response(), next)
        assert next.calls == [None]
        assert request.uploaded_files["doc"].error_code == "LIMIT_FILE_SIZE"

    @pytest.mark.asyncio
    async def test_missing_boundary(self) -> None:
        request = _request(b"garbage", "multipart/form-data")
        next = _Next()
        await upload_parser(8)(request, Response(), next)
        (error,) = next.calls
        assert isinstance(error, HTTPError)
        assert error.status == 400


class TestMiddlewareCache:
    def test_shared_per_limit(self) -> None:
        cache = MiddlewareCache()
        assert cache.upload(100) is cache.upload(100)
        assert cache.upload(100) is not cache.upload(200)
        assert len(cache) == 2

    def test_default_limit(self) -> None:
        cache = MiddlewareCache()
        assert cache.upload(None) is cache.upload(0)
        assert cache.upload(-5) is cache.upload(10_485_760)
        assert cache.upload(0).file_size_limit == 10_485_760

    def test_clear(self) -> None:
        cache = MiddlewareCache()
        first = cache.upload(100)
        cache.clear()
        assert len(cache) == 0
        assert cache.upload(100) is not first


class TestNoCacheHeaders:
    def test_sets_headers(self) -> None:
        response = Response()
        next = _Next()
        no_cache_headers(Request(method="GET", path="/"), response, next)
        assert response.get_header("Cache-Control") == "private, no-cache, no-store, must-revalidate"
        assert response.get_header("Expires") == "-1"
        assert response.get_header("Pragma") == "no-cache"
        assert next.calls == [None]
