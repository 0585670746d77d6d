"""Route definitions and router entries as frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """One discovered (route, verb) pair, ready for registration.

    Created while walking route files; never changed afterwards.

    Attributes:
        source: Path of the file the route was discovered in.
        path: Route starting with ``/``; ends with ``/`` only when it is ``/``.
        verb: One of the valid verbs, or ``all``.
        middleware: Middleware run before the handler, in order.
        handler: The bound route function.
    """

    source: str
    path: str
    verb: str
    middleware: tuple[Callable[..., Any], ...]
    handler: Callable[..., Any]

    @property
    def handler_name(self) -> str:
        return getattr(self.handler, "__qualname__", None) or repr(self.handler)


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A route registered with the router: the full handler chain for one verb."""

    path: str
    verb: str
    handlers: tuple[Callable[..., Any], ...]


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, Any]
