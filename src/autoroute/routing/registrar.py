"""Registration of the final route table into an HTTP router."""

import logging
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from autoroute.errors import AutorouteError
from autoroute.routing.route import RouteDefinition
from autoroute.routing.verbs import VALID_VERBS
from autoroute.server.dispatch import wrap_handler

logger = logging.getLogger("autoroute.routing")


class RouterProtocol(Protocol):
    """The per-verb registration functions the registrar needs.

    :class:`~autoroute.routing.router.Router` implements it; any object
    with the same methods works.
    """

    def all(self, path: str, *handlers: Callable[..., Any]) -> Any: ...
    def get(self, path: str, *handlers: Callable[..., Any]) -> Any: ...
    def post(self, path: str, *handlers: Callable[..., Any]) -> Any: ...
    def put(self, path: str, *handlers: Callable[..., Any]) -> Any: ...
    def delete(self, path: str, *handlers: Callable[..., Any]) -> Any: ...
    def patch(self, path: str, *handlers: Callable[..., Any]) -> Any: ...
    def options(self, path: str, *handlers: Callable[..., Any]) -> Any: ...
    def head(self, path: str, *handlers: Callable[..., Any]) -> Any: ...


def mount_path(root: str, path: str) -> str:
    """Prefix *path* with the app root (``""`` when the app is mounted at ``/``)."""
    if not root:
        return path
    if path == "/":
        return root
    return root + path


def register_routes(
    router: RouterProtocol,
    routes: Sequence[RouteDefinition],
    *,
    root: str = "",
) -> int:
    """Register *routes* in their discovery order; return how many were registered.

    Each handler is wrapped so its failures reach the error handlers.

    Raises:
        AutorouteError: A definition carries a verb the router has no
            registration function for.
    """
    for route in routes:
        registration = getattr(router, route.verb, None) if route.verb in VALID_VERBS else None
        if registration is None:
            msg = f'Invalid http method "{route.verb}" for route {route.path} in file {route.source}'
            raise AutorouteError(msg)
        path = mount_path(root, route.path)
        registration(path, *route.middleware, wrap_handler(route.handler))
        logger.debug("%s %s -> %s", route.verb, path, route.handler_name)
    logger.debug("Registered %d routes", len(routes))
    return len(routes)
