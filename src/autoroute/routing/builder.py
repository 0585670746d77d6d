"""Route table construction.

Runs one build session end to end: discover route files, load and
classify each one, walk its entities, then reject conflicts. The result
is an immutable tuple in discovery order, ready for
:func:`~autoroute.routing.registrar.register_routes`.

Usage::

    from autoroute.config import RoutingConfig
    from autoroute.routing.builder import build_route_table

    routes = build_route_table(RoutingConfig(routes_dirs=("routes",)))
"""

import inspect
import logging
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Any, TypeAlias

from autoroute.config import RoutingConfig
from autoroute.errors import ConfigurationError
from autoroute.routing.conflicts import check_conflicts
from autoroute.routing.discovery import RouteFile, iter_route_files, load_module
from autoroute.routing.exports import classify
from autoroute.routing.route import RouteDefinition
from autoroute.routing.session import BuildSession
from autoroute.routing.walker import walk_export

logger = logging.getLogger("autoroute.routing")

# load_module(path) -> module value, or an awaitable resolving to it
ModuleLoader: TypeAlias = Callable[[Path], Any]


def build_route_table(
    config: RoutingConfig,
    *,
    roots: Iterable[str | Path] | None = None,
    loader: ModuleLoader = load_module,
) -> tuple[RouteDefinition, ...]:
    """Build the conflict-free route table synchronously.

    Args:
        config: Routing configuration.
        roots: Routes directories; defaults to ``config.resolve_routes_dirs()``.
        loader: Loads one route file. Must not return an awaitable; use
            :func:`abuild_route_table` for asynchronous loaders.

    Raises:
        AutorouteError: Any invalid route definition, export, or conflict.
    """
    session = BuildSession(config)
    try:
        for route_file in _route_files(config, roots):
            value = loader(route_file.path)
            if inspect.isawaitable(value):
                if inspect.iscoroutine(value):
                    value.close()
                msg = "The module loader returned an awaitable; use abuild_route_table()"
                raise ConfigurationError(msg)
            _add_file(session, route_file, value)
        return _finish(session)
    finally:
        session.close()


async def abuild_route_table(
    config: RoutingConfig,
    *,
    roots: Iterable[str | Path] | None = None,
    loader: ModuleLoader = load_module,
) -> tuple[RouteDefinition, ...]:
    """Build the route table, awaiting the loader when it is asynchronous.

    Files are still loaded one at a time, in discovery order.
    """
    session = BuildSession(config)
    try:
        for route_file in _route_files(config, roots):
            value = loader(route_file.path)
            if inspect.isawaitable(value):
                value = await value
            _add_file(session, route_file, value)
        return _finish(session)
    finally:
        session.close()


def _route_files(config: RoutingConfig, roots: Iterable[str | Path] | None) -> list[RouteFile]:
    if roots is None:
        roots = config.resolve_routes_dirs()
    return list(iter_route_files(roots))


def _add_file(session: BuildSession, route_file: RouteFile, value: Any) -> None:
    source = str(route_file.path)
    walk_export(
        session,
        classify(value, source),
        source=source,
        directory_prefix=route_file.prefix,
        file_name=route_file.name,
    )


def _finish(session: BuildSession) -> tuple[RouteDefinition, ...]:
    routes = session.routes
    if session.config.log_routes:
        log_route_table(routes)
    check_conflicts(routes)
    logger.debug("Built route table with %d routes", len(routes))
    return routes


def format_route_table(routes: Sequence[RouteDefinition]) -> list[str]:
    """One ``"<verb> - <route> - <file>"`` line per route, by file, route, verb."""
    ordered = sorted(routes, key=lambda r: (r.source, r.path, r.verb))
    return [f"{r.verb} - {r.path} - {r.source}" for r in ordered]


def log_route_table(routes: Sequence[RouteDefinition]) -> None:
    """Log the discovered routes at INFO level."""
    if not routes:
        logger.info("No routes found!")
        return
    logger.info("HTTP Method - Full Route - File")
    for line in format_route_table(routes):
        logger.info(line)
