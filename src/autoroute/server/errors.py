"""Default error rendering for the request pipeline.

Runs after the app's own error handlers when an error is still pending.
API requests (a path containing ``/api/`` or an ``Accept`` header asking
for JSON) get a JSON string body; everything else gets plain text.
"""

import logging

from autoroute._internal.types import Next
from autoroute.errors import HTTPError, NotFound
from autoroute.http.request import Request
from autoroute.http.response import Response

logger = logging.getLogger("autoroute.server")


def error_status(error: BaseException) -> int:
    """HTTP status for *error*: its own status, or 500."""
    if isinstance(error, HTTPError):
        return error.status
    status = getattr(error, "status", None)
    if isinstance(status, int) and 400 <= status < 600:
        return status
    return 500


def error_message(error: BaseException, status: int, *, debug: bool) -> str:
    """Client-facing message; internal failures stay opaque unless *debug*."""
    if isinstance(error, HTTPError) and error.detail:
        return error.detail
    if debug and not isinstance(error, HTTPError):
        return f"{type(error).__name__}: {error}"
    return "Not found" if status == 404 else "Internal error"


def wants_json(request: Request) -> bool:
    return "/api/" in request.path or request.accepts("application/json")


def render_error(error: BaseException, request: Request, response: Response, *, debug: bool) -> None:
    """Write the default error response for *error*."""
    status = error_status(error)
    if status >= 500:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.path,
            exc_info=(type(error), error, error.__traceback__),
        )

    response.status(status)
    if isinstance(error, HTTPError):
        for name, value in error.headers:
            response.header(name, value)

    message = error_message(error, status, debug=debug)
    if wants_json(request):
        response.json(message)
    else:
        response.text(message)


def not_found(request: Request, response: Response, next: Next) -> None:
    """Last handler of every chain: nothing answered the request."""
    next(NotFound())
