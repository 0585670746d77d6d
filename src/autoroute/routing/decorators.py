"""Route decorators.

Decorators only stage facts on the decorated function or class (see
:mod:`autoroute.routing.metadata`); nothing is registered until the
build session walks the routes directories.

Usage::

    from autoroute import http, route

    @route.class_name("orders")
    class Order:
        @http.post()
        @http.put()
        @route.middleware(require_login)
        async def save(self, request, response, next):
            ...

        @http.post()
        @route.file_upload(5 * 1024 * 1024)
        def image(self, request, response):
            ...
"""

from collections.abc import Callable
from typing import Any, TypeVar

from autoroute.routing.metadata import stage, stage_append

T = TypeVar("T")


def _verb(name: str) -> Callable[[T], T]:
    def decorator(target: T) -> T:
        stage_append(target, "verbs", name)
        return target

    return decorator


# HTTP verb decorators, re-exported as ``autoroute.http.get()`` and so on.
# Stacking several registers the function once per verb; ``all()``
# subsumes every other verb.


def all() -> Callable[[T], T]:  # noqa: A001
    return _verb("all")


def get() -> Callable[[T], T]:
    return _verb("get")


def post() -> Callable[[T], T]:
    return _verb("post")


def put() -> Callable[[T], T]:
    return _verb("put")


def delete() -> Callable[[T], T]:
    return _verb("delete")


def patch() -> Callable[[T], T]:
    return _verb("patch")


def options() -> Callable[[T], T]:
    return _verb("options")


def head() -> Callable[[T], T]:
    return _verb("head")


def hidden() -> Callable[[T], T]:
    """Never expose the decorated function as a route."""

    def decorator(target: T) -> T:
        stage(target, "hidden", True)
        return target

    return decorator



class _RouteDecorators:
    """Route shaping decorators: names, full routes, middleware, uploads."""

    __slots__ = ()

    def full_class_route(self, path: str) -> Callable[[T], T]:
        """Use *path* verbatim as the prefix of every route in the class.

        The directory and file names are ignored; ``""`` means the site root.
        """

        def decorator(target: T) -> T:
            stage(target, "class_full_route", path)
            return target

        return decorator

    def class_name(self, name: str) -> Callable[[T], T]:
        """Use *name* as the class segment instead of the class or file name."""

        def decorator(target: T) -> T:
            stage(target, "class_name", name)
            return target

        return decorator

    def full_method_route(self, path: str) -> Callable[[T], T]:
        """Use *path* verbatim as the route, ignoring the class prefix."""

        def decorator(target: T) -> T:
            stage(target, "full_route", path)
            return target

        return decorator

    def method_name(self, name: str) -> Callable[[T], T]:
        """Use *name* as the last route segment instead of the function name."""

        def decorator(target: T) -> T:
            stage(target, "name", name)
            return target

        return decorator

    def middleware(self, *middleware: Callable[..., Any]) -> Callable[[T], T]:
        """Run *middleware* before the handler, after any body parser."""

        def decorator(target: T) -> T:
            stage_append(target, "middleware", *middleware)
            return target

        return decorator

    def file_upload(self, limit: int | None = None) -> Callable[[T], T]:
        """Parse ``multipart/form-data`` bodies, rejecting files over *limit* bytes.

        The function must also accept at least one body-capable verb
        (all, delete, patch, post or put).
        """

        def decorator(target: T) -> T:
            stage(target, "file_upload_limit", int(limit or 0))
            return target

        return decorator


route = _RouteDecorators()
