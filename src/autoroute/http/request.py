"""HTTP request passed to route handlers and middleware.

Metadata (method, path, headers, query) is fixed at creation. The
parsed-body slots start empty and are filled by the body middleware
selected for the route: ``body`` by the JSON parser, ``form`` by the
URL-encoded and upload parsers, ``uploaded_files`` by the upload parser.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

from autoroute._internal.types import Receive, Scope
from autoroute.http.forms import FormData, UploadedFile
from autoroute.http.headers import Headers
from autoroute.http.query import QueryParams


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(slots=True, eq=False)
class Request:
    """An HTTP request travelling through one route's handler chain."""

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    path_params: dict[str, Any] = field(default_factory=dict)
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    # Filled by body middleware
    body: Any = None
    form: FormData | None = None
    uploaded_files: dict[str, UploadedFile] = field(default_factory=dict)
    uploaded_files_list: list[UploadedFile] = field(default_factory=list)

    # Private: ASGI receive callable and the body read from it
    _receive: Receive = field(default=_empty_receive, repr=False)
    _raw_body: bytes | None = field(default=None, repr=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def media_type(self) -> str:
        """The Content-Type without parameters, lower-cased (``""`` if absent)."""
        ct = self.content_type or ""
        return ct.split(";", 1)[0].strip().lower()

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    def accepts(self, media_type: str) -> bool:
        """True if the Accept header mentions *media_type*."""
        return media_type in (self.headers.get("accept") or "")

    # -- Async body access --

    async def read_body(self) -> bytes:
        """Read the full raw request body.

        Result is cached — the ASGI receive is consumed once, then the
        same bytes are returned on subsequent calls.
        """
        if self._raw_body is None:
            self._raw_body = b"".join([chunk async for chunk in self.stream()])
        return self._raw_body

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        if self._raw_body is not None:
            yield self._raw_body
            return
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the raw body as JSON, bypassing the body middleware."""
        return json_module.loads(await self.read_body())

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )
