"""Type aliases shared across autoroute modules.

Handler shapes are documented here rather than enforced: handlers may be
``def`` or ``async def`` and declare fewer parameters than they are
offered (see :mod:`autoroute._internal.signature`).
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

# Raw ASGI
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]

# (request, response, next)
Handler: TypeAlias = Callable[..., Any]

# (error, request, response, next)
ErrorHandler: TypeAlias = Callable[..., Any]

# Same shape as a handler; calls next() to pass the request on
Middleware: TypeAlias = Callable[..., Any]

# next() continues the chain, next(error) switches to the error handlers
Next: TypeAlias = Callable[..., Any]
