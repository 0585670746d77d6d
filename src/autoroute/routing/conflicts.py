"""Conflict detection across the whole route table.

Two definitions conflict when they share a route and either share the
verb or one of them is ``all``. Sorting by (route, verb) puts every
conflicting pair next to each other, since ``all`` sorts before every
other verb of the same route.
"""

from collections.abc import Sequence

from autoroute.errors import RouteConflictError
from autoroute.routing.route import RouteDefinition
from autoroute.routing.verbs import WILDCARD


def _sort_key(route: RouteDefinition) -> tuple[str, str]:
    return (route.path, route.verb)


def conflicts(first: RouteDefinition, second: RouteDefinition) -> bool:
    """True if a request could match both definitions."""
    if first.path != second.path:
        return False
    return first.verb == second.verb or WILDCARD in (first.verb, second.verb)


def find_conflict(
    routes: Sequence[RouteDefinition],
) -> tuple[RouteDefinition, RouteDefinition] | None:
    """Return the first conflicting pair in (route, verb) order, or ``None``."""
    ordered = sorted(routes, key=_sort_key)
    for previous, current in zip(ordered, ordered[1:], strict=False):
        if conflicts(previous, current):
            return previous, current
    return None


def check_conflicts(routes: Sequence[RouteDefinition]) -> None:
    """Raise on the first conflict; *routes* itself is left untouched.

    Raises:
        RouteConflictError: Names the route, the verb and both source files.
    """
    pair = find_conflict(routes)
    if pair is None:
        return
    previous, current = pair
    raise RouteConflictError(current.path, current.verb, (current.source, previous.source))
