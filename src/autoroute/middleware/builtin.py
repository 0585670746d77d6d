"""Built-in app-wide middleware."""

from autoroute._internal.types import Next
from autoroute.http.request import Request
from autoroute.http.response import Response


def no_cache_headers(request: Request, response: Response, next: Next) -> None:
    """Mark every dynamic response as uncacheable."""
    response.header("Cache-Control", "private, no-cache, no-store, must-revalidate")
    response.header("Expires", "-1")
    response.header("Pragma", "no-cache")
    next()
