"""Multipart upload middleware and its per-session cache.

Routes declaring ``@route.file_upload(limit)`` get an upload parser for
that limit. Parsers are shared between routes with the same limit
through :class:`MiddlewareCache`, which lives only as long as the build
session that fills it.
"""

import logging

from autoroute._internal.types import Middleware, Next
from autoroute.config import DEFAULT_SIZE_LIMIT
from autoroute.errors import HTTPError
from autoroute.http.forms import parse_multipart
from autoroute.http.request import Request
from autoroute.http.response import Response

logger = logging.getLogger("autoroute.server")


def upload_parser(file_size_limit: int) -> Middleware:
    """Parse ``multipart/form-data`` bodies into uploaded files and fields.

    ``request.uploaded_files`` maps each field to its first file;
    ``request.uploaded_files_list`` keeps every file in arrival order.
    Files over *file_size_limit* are recorded with an error code rather
    than failing the request.
    """

    async def parse_upload(request: Request, response: Response, next: Next) -> None:
        if request.media_type != "multipart/form-data":
            next()
            return
        try:
            result = parse_multipart(
                await request.read_body(),
                request.content_type or "",
                file_size_limit=file_size_limit,
            )
        except ValueError as exc:
            next(HTTPError(status=400, detail=f"Invalid multipart body: {exc}"))
            return

        request.form = result.form
        request.uploaded_files_list = list(result.files)
        for uploaded in result.files:
            request.uploaded_files.setdefault(uploaded.field_name, uploaded)
            if not uploaded.ok:
                logger.info(
                    "Upload rejected on %s %s: field %r %s",
                    request.method,
                    request.path,
                    uploaded.field_name,
                    uploaded.error_code,
                )
        next()

    parse_upload.file_size_limit = file_size_limit  # type: ignore[attr-defined]
    return parse_upload


class MiddlewareCache:
    """Upload parsers keyed by the string form of their size limit.

    Owned by one build session; :meth:`clear` is called when the route
    table is final so a reconfigured app never reuses a stale limit.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, Middleware] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def upload(self, limit: int | None) -> Middleware:
        """Return the upload parser for *limit*, building it on first use.

        A missing or non-positive limit means the default 10 MB.
        """
        if not limit or limit <= 0:
            limit = DEFAULT_SIZE_LIMIT
        key = str(limit)
        middleware = self._entries.get(key)
        if middleware is None:
            middleware = upload_parser(limit)
            self._entries[key] = middleware
        return middleware

    def clear(self) -> None:
        self._entries.clear()
