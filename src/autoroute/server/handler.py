"""ASGI handler — translates ASGI scope/messages to autoroute types.

The only component that touches raw ASGI for HTTP requests. Builds the
Request and Response, runs the app middleware and the matched route's
handler chain, hands a pending error to the error handlers, and sends
the Response back through ASGI send().

A chain runs one handler at a time. Each handler gets its own ``next``:
returning without calling it (or after finishing the response) stops
the chain, ``next()`` moves on, ``next(error)`` abandons the chain and
starts the error handlers.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from autoroute._internal.signature import positional_arity, trim_args
from autoroute._internal.types import Receive, Scope, Send
from autoroute.errors import HTTPError, NotFound
from autoroute.http.request import Request
from autoroute.http.response import Response
from autoroute.routing.router import Router
from autoroute.server.dispatch import capture, forward
from autoroute.server.errors import not_found, render_error
from autoroute.server.sender import send_response

logger = logging.getLogger("autoroute.server")


class Continuation:
    """The ``next`` handed to a single handler invocation.

    ``next()`` marks the chain as continuing; ``next(error)`` records the
    error. An error arriving after a plain ``next()`` still counts.
    """

    __slots__ = ("called", "error")

    def __init__(self) -> None:
        self.called: bool = False
        self.error: Exception | None = None

    def __call__(self, error: Any = None) -> None:
        self.called = True
        if error is None or self.error is not None:
            return
        if not isinstance(error, Exception):
            error = HTTPError(status=500, detail=str(error))
        self.error = error


async def run_chain(
    handlers: Sequence[Callable[..., Any]],
    request: Request,
    response: Response,
) -> Exception | None:
    """Run *handlers* in order; return the error that stopped them, if any."""
    for handler in handlers:
        next = Continuation()
        args = trim_args(positional_arity(handler), (request, response, next))
        forward(await capture(handler, *args), next)
        if next.error is not None:
            return next.error
        if not next.called or response.finished:
            return None
    return None


async def run_error_chain(
    handlers: Sequence[Callable[..., Any]],
    error: Exception,
    request: Request,
    response: Response,
) -> Exception | None:
    """Offer *error* to each error handler; return it if still unhandled.

    A handler may replace the error by calling ``next(other_error)``.
    """
    for handler in handlers:
        next = Continuation()
        forward(await capture(handler, error, request, response, next), next)
        if next.error is not None:
            error = next.error
        elif not next.called or response.finished:
            return None
    return error


def _fail_with(error: Exception) -> Callable[..., None]:
    def fail(request: Request, response: Response, next: Callable[..., Any]) -> None:
        next(error)

    return fail


def resolve_handlers(
    router: Router,
    request: Request,
    *,
    middleware: Sequence[Callable[..., Any]] = (),
    fallbacks: Sequence[Callable[..., Any]] = (),
) -> tuple[Callable[..., Any], ...]:
    """Build the full handler chain for *request*.

    App middleware first, then the matched route's middleware and handler,
    then middleware registered after the routes, then the not-found handler.
    """
    try:
        match = router.match(request.method, request.path)
    except NotFound:
        return (*middleware, *fallbacks, not_found)
    except HTTPError as exc:
        return (*middleware, *fallbacks, _fail_with(exc))

    request.path_params = match.path_params
    return (*middleware, *match.route.handlers, *fallbacks, not_found)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: Sequence[Callable[..., Any]] = (),
    fallbacks: Sequence[Callable[..., Any]] = (),
    error_handlers: Sequence[Callable[..., Any]] = (),
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    response = Response()

    handlers = resolve_handlers(router, request, middleware=middleware, fallbacks=fallbacks)
    error = await run_chain(handlers, request, response)
    if error is not None:
        logger.debug("%s %s failed: %r", request.method, request.path, error)
        error = await run_error_chain(error_handlers, error, request, response)
    if error is not None:
        render_error(error, request, response, debug=debug)

    await send_response(response, send, head=request.method == "HEAD")
