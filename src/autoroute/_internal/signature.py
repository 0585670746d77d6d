"""Positional arity of handlers.

Handlers are called with up to three positional arguments (request,
response, next), or four for error handlers. A handler may accept fewer;
the pipeline passes only as many as it declares.
"""

import inspect
from typing import Any

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def positional_arity(func: Any) -> int | None:
    """Count the positional parameters of *func*.

    Bound methods exclude their ``self``/``cls``. Returns ``None`` when the
    signature takes ``*args`` or cannot be inspected (builtins), meaning
    any number of arguments is accepted.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in _POSITIONAL:
            count += 1
    return count


def trim_args(arity: int | None, args: tuple[Any, ...]) -> tuple[Any, ...]:
    """Drop the trailing arguments a handler of *arity* does not accept."""
    if arity is None or arity >= len(args):
        return args
    return args[:arity]
