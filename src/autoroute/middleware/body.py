"""Body parser middleware for JSON and URL-encoded requests.

Only routes whose verbs can carry a body get these parsers, and each
parser only acts on its own content type; anything else passes through
untouched.
"""

import json as json_module
import logging

from autoroute._internal.types import Middleware, Next
from autoroute.errors import HTTPError, PayloadTooLarge
from autoroute.http.forms import parse_urlencoded
from autoroute.http.request import Request
from autoroute.http.response import Response

logger = logging.getLogger("autoroute.server")


async def _read_limited(request: Request, limit: int) -> bytes:
    declared = request.content_length
    if declared is not None and declared > limit:
        raise PayloadTooLarge(limit)
    raw = await request.read_body()
    if len(raw) > limit:
        raise PayloadTooLarge(limit)
    return raw


def json_parser(limit: int) -> Middleware:
    """Parse ``application/json`` bodies into ``request.body``."""

    async def parse_json(request: Request, response: Response, next: Next) -> None:
        if request.media_type != "application/json":
            next()
            return
        try:
            raw = await _read_limited(request, limit)
            if raw:
                request.body = json_module.loads(raw)
        except HTTPError as exc:
            next(exc)
            return
        except ValueError as exc:
            logger.debug("Rejected malformed JSON body on %s %s", request.method, request.path)
            next(HTTPError(status=400, detail=f"Invalid JSON body: {exc}"))
            return
        next()

    return parse_json


def urlencoded_parser(limit: int) -> Middleware:
    """Parse ``application/x-www-form-urlencoded`` bodies into ``request.form``."""

    async def parse_form(request: Request, response: Response, next: Next) -> None:
        if request.media_type != "application/x-www-form-urlencoded":
            next()
            return
        try:
            request.form = parse_urlencoded(await _read_limited(request, limit))
        except HTTPError as exc:
            next(exc)
            return
        except UnicodeDecodeError as exc:
            next(HTTPError(status=400, detail=f"Invalid form body: {exc}"))
            return
        next()

    return parse_form
