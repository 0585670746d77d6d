"""Mutable HTTP response written by route handlers.

Handlers receive the response next to the request and write to it in
place, chaining where convenient::

    def show(self, request, response):
        response.status(201).header("Location", "/orders/1").json({"id": 1})

The pipeline sends whatever the response holds once the handler chain
stops.
"""

import json as json_module
from typing import Any

TEXT = "text/plain; charset=utf-8"
JSON = "application/json"
HTML = "text/html; charset=utf-8"


class Response:
    """An HTTP response under construction."""

    __slots__ = ("body", "content_type", "finished", "headers", "status_code")

    def __init__(self) -> None:
        self.status_code: int = 200
        self.headers: list[tuple[str, str]] = []
        self.content_type: str = HTML
        self.body: bytes = b""
        self.finished: bool = False

    def __repr__(self) -> str:
        return f"Response({self.status_code}, {self.content_type!r}, {len(self.body)} bytes)"

    # -- Chainable setters --

    def status(self, status: int) -> "Response":
        """Set the status code."""
        self.status_code = status
        return self

    def header(self, name: str, value: str) -> "Response":
        """Set a header, replacing previous values with the same name."""
        lowered = name.lower()
        self.headers = [(n, v) for n, v in self.headers if n.lower() != lowered]
        self.headers.append((name, value))
        return self

    def get_header(self, name: str) -> str | None:
        """Return the value of a header set on this response, if any."""
        lowered = name.lower()
        for n, v in self.headers:
            if n.lower() == lowered:
                return v
        return None

    # -- Terminal writers --

    def send(self, body: str | bytes = b"", *, content_type: str | None = None) -> "Response":
        """Set the body and mark the response finished."""
        if content_type is not None:
            self.content_type = content_type
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        self.finished = True
        return self

    def text(self, value: str) -> "Response":
        """Send a plain-text body."""
        return self.send(value, content_type=TEXT)

    def json(self, value: Any) -> "Response":
        """Send *value* serialized as JSON."""
        return self.send(json_module.dumps(value, default=str), content_type=JSON)

    def redirect(self, url: str, status: int = 302) -> "Response":
        """Send an empty redirect to *url*."""
        return self.status(status).header("Location", url).send(b"")
