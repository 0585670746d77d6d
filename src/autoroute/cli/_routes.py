"""``autoroute routes`` — list discovered routes.

Builds the route table for the given directories and prints one row per
route with method, full path, and source file.
"""

import argparse
import sys

from autoroute.config import RoutingConfig
from autoroute.errors import AutorouteError
from autoroute.routing.builder import build_route_table
from autoroute.routing.registrar import mount_path


def run_routes(args: argparse.Namespace) -> None:
    """Print the route table, sorted by file, path, then method.

    Exits with status 1 when a route file cannot be imported, or the
    route files are invalid or conflict.
    """
    try:
        config = RoutingConfig(
            routes_dirs=tuple(args.dirs),
            root=args.root,
            use_class_names_as_routes=args.class_names,
            all_methods_routes_all_by_default=args.all_by_default,
            all_methods_routes_hidden_by_default=args.hidden_by_default,
        )
        routes = build_route_table(config)
    except (AutorouteError, ImportError, SyntaxError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not routes:
        print("No routes found!")
        return

    root = config.normalized_root
    rows = [
        (route.verb.upper(), mount_path(root, route.path), route.source)
        for route in sorted(routes, key=lambda r: (r.source, r.path, r.verb))
    ]

    # Column widths
    max_methods = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "FILE"))
    sep_len = max_methods + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
