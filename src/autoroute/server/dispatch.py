"""Handler dispatch — forward every handler failure to ``next``.

A handler either raises while being called, or returns an awaitable
that later fails. Both end up as a :class:`Failure` outcome, and a
failure is always handed to the continuation instead of escaping into
the server. A successful outcome has no further effect: the handler is
expected to have written its own response.
"""

from collections.abc import Callable
from dataclasses import dataclass
from functools import update_wrapper
from typing import Any, TypeAlias

from autoroute._internal.invoke import invoke
from autoroute._internal.signature import positional_arity, trim_args
from autoroute._internal.types import ErrorHandler, Handler, Next


@dataclass(frozen=True, slots=True)
class Success:
    """The handler returned (or its awaitable resolved to) ``value``."""

    value: Any = None


@dataclass(frozen=True, slots=True)
class Failure:
    """The handler raised, synchronously or while being awaited."""

    error: Exception


Outcome: TypeAlias = Success | Failure


async def capture(handler: Callable[..., Any], *args: Any) -> Outcome:
    """Run *handler* and turn its result or exception into an :data:`Outcome`."""
    try:
        result = await invoke(handler, *args)
    except Exception as exc:
        return Failure(exc)
    return Success(result)


def forward(outcome: Outcome, next: Next) -> None:
    """Hand a failure to *next*; successes need no action."""
    if isinstance(outcome, Failure):
        next(outcome.error)


def wrap_handler(bound: Handler) -> Handler:
    """Adapt a bound route handler to the ``(request, response, next)`` shape.

    The handler receives only as many of the three arguments as it
    declares.
    """
    arity = positional_arity(bound)

    async def dispatch(request: Any, response: Any, next: Next) -> None:
        outcome = await capture(bound, *trim_args(arity, (request, response, next)))
        forward(outcome, next)

    return _named(dispatch, bound)


def wrap_error_handler(bound: ErrorHandler) -> ErrorHandler:
    """Adapt an error handler to the ``(error, request, response, next)`` shape."""
    arity = positional_arity(bound)

    async def dispatch_error(error: Exception, request: Any, response: Any, next: Next) -> None:
        outcome = await capture(bound, *trim_args(arity, (error, request, response, next)))
        forward(outcome, next)

    return _named(dispatch_error, bound)


def _named(wrapper: Callable[..., Any], wrapped: Callable[..., Any]) -> Callable[..., Any]:
    # Keeps __name__/__qualname__ for route listings; __wrapped__ would
    # make inspect.signature report the user's (shorter) signature
    update_wrapper(
        wrapper,
        wrapped,
        assigned=("__module__", "__name__", "__qualname__", "__doc__"),
        updated=(),
    )
    del wrapper.__wrapped__
    return wrapper
