"""Middleware — body parsers, upload parser, and app-wide helpers.

Middleware has the same shape as a route handler::

    async def require_login(request, response, next):
        if "authorization" not in request.headers:
            next(HTTPError(status=401))
            return
        next()

Call ``next()`` to continue the chain, ``next(error)`` to jump to the
error handlers, or write the response and return to stop.
"""

from autoroute.middleware.body import json_parser, urlencoded_parser
from autoroute.middleware.builtin import no_cache_headers
from autoroute.middleware.upload import MiddlewareCache, upload_parser

__all__ = [
    "MiddlewareCache",
    "json_parser",
    "no_cache_headers",
    "upload_parser",
    "urlencoded_parser",
]
