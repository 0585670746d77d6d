"""Compiled router with trie-based path matching.

The HTTP router primitive the route table is registered into. It offers
one registration function per verb (``router.get(path, *handlers)``,
``router.post(...)``, ``router.all(...)``) and is compiled into an
immutable lookup structure when the app freezes.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from autoroute.errors import ConfigurationError, MethodNotAllowed, NotFound
from autoroute.routing.params import CONVERTERS, convert_param
from autoroute.routing.route import PathSegment, Route, RouteMatch
from autoroute.routing.verbs import VALID_VERBS, WILDCARD


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{path:path}" -> [PathSegment("{path:path}", is_param=True, param_type="path")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown converter {param_type!r} in route {path!r}"
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "param_child", "routes_by_verb")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all edge (path converter)
        self.catch_all: _CatchAllEdge | None = None
        # Routes at this node, keyed by lower-case verb ("all" included)
        self.routes_by_verb: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A catch-all (path) edge — consumes remaining path."""

    param_name: str
    routes_by_verb: dict[str, Route]


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.get("/users", list_users)
        router.post("/users", parse_json, create_user)
        router.all("/users/{id:int}", user_handler)
        router.compile()
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_registered", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False
        self._registered: list[Route] = []

    # -- Registration --

    def register(self, verb: str, path: str, *handlers: Callable[..., Any]) -> Route:
        """Register a handler chain for *verb* on *path*.

        Must be called before :meth:`compile`. The last handler is the
        route handler; the ones before it are middleware.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        if verb not in VALID_VERBS:
            msg = f"Invalid http method {verb!r} for route {path!r}"
            raise ConfigurationError(msg)
        if not handlers:
            msg = f"Route {verb} {path!r} needs at least one handler"
            raise ConfigurationError(msg)

        route = Route(path=path, verb=verb, handlers=handlers)
        table = self._terminal_table(parse_path(path))
        if verb in table:
            msg = f"Route {verb} {path!r} is already registered"
            raise ConfigurationError(msg)
        table[verb] = route
        self._registered.append(route)
        return route

    def all(self, path: str, *handlers: Callable[..., Any]) -> Route:
        return self.register("all", path, *handlers)

    def get(self, path: str, *handlers: Callable[..., Any]) -> Route:
        return self.register("get", path, *handlers)

    def post(self, path: str, *handlers: Callable[..., Any]) -> Route:
        return self.register("post", path, *handlers)

    def put(self, path: str, *handlers: Callable[..., Any]) -> Route:
        return self.register("put", path, *handlers)

    def delete(self, path: str, *handlers: Callable[..., Any]) -> Route:
        return self.register("delete", path, *handlers)

    def patch(self, path: str, *handlers: Callable[..., Any]) -> Route:
        return self.register("patch", path, *handlers)

    def options(self, path: str, *handlers: Callable[..., Any]) -> Route:
        return self.register("options", path, *handlers)

    def head(self, path: str, *handlers: Callable[..., Any]) -> Route:
        return self.register("head", path, *handlers)

    def _terminal_table(self, segments: list[PathSegment]) -> dict[str, Route]:
        node = self._root
        for seg in segments:
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes rest of path, must be last segment
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(
                        param_name=seg.param_name or "path",
                        routes_by_verb={},
                    )
                return node.catch_all.routes_by_verb

            if seg.is_param:
                if node.param_child is None:
                    pattern, _ = CONVERTERS[seg.param_type]
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        param_type=seg.param_type,
                        regex=re.compile(f"^{pattern}$"),
                        node=_TrieNode(),
                    )
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())
        return node.routes_by_verb

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._registered)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    # -- Matching --

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path against the registered routes.

        The exact verb wins over ``all``; ``HEAD`` falls back to ``GET``.

        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        verb = method.lower()
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        table, params = result
        for candidate in (verb, WILDCARD, "get" if verb == "head" else None):
            if candidate is not None and candidate in table:
                return RouteMatch(route=table[candidate], path_params=params)

        raise MethodNotAllowed(frozenset(v.upper() for v in table))

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, Any],
    ) -> tuple[dict[str, Route], dict[str, Any]] | None:
        """Recursively match path parts against the trie."""
        # All parts consumed, return this node's routes
        if index == len(parts):
            if node.routes_by_verb:
                return node.routes_by_verb, params
            return None

        part = parts[index]

        # 1. Try static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        # 2. Try parameter child
        if node.param_child is not None:
            edge = node.param_child
            if edge.regex.match(part):
                value = convert_param(part, edge.param_type)
                new_params = {**params, edge.param_name: value}
                result = self._match_node(edge.node, parts, index + 1, new_params)
                if result is not None:
                    return result

        # 3. Try catch-all
        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            new_params = {**params, node.catch_all.param_name: remaining}
            return node.catch_all.routes_by_verb, new_params

        return None
