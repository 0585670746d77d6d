"""Build session — the state that exists only while the route table is built.

One session per build: it owns the metadata store, the upload parser
cache, the body parser pair, and the accumulated route definitions.
:meth:`BuildSession.close` discards the caches once the table is final.
"""

from autoroute._internal.types import Middleware
from autoroute.config import RoutingConfig
from autoroute.middleware.body import json_parser, urlencoded_parser
from autoroute.middleware.upload import MiddlewareCache
from autoroute.routing.metadata import MetadataStore
from autoroute.routing.route import RouteDefinition


class BuildSession:
    """Transient state of one route table build."""

    __slots__ = ("body_parsers", "closed", "config", "metadata", "uploads", "_routes")

    def __init__(self, config: RoutingConfig) -> None:
        self.config = config
        self.metadata = MetadataStore()
        self.uploads = MiddlewareCache()
        self.body_parsers: tuple[Middleware, ...] = ()
        if not config.disable_body_parser:
            limit = config.effective_body_parser_limit
            self.body_parsers = (json_parser(limit), urlencoded_parser(limit))
        self.closed = False
        self._routes: list[RouteDefinition] = []

    def add(self, route: RouteDefinition) -> None:
        if self.closed:
            msg = "Build session is closed"
            raise RuntimeError(msg)
        self._routes.append(route)

    @property
    def routes(self) -> tuple[RouteDefinition, ...]:
        """Routes accumulated so far, in discovery order."""
        return tuple(self._routes)

    def close(self) -> None:
        """Discard every cache; the session cannot accept routes afterwards."""
        self.metadata.clear()
        self.uploads.clear()
        self.body_parsers = ()
        self._routes.clear()
        self.closed = True
