"""Autoroute CLI — inspect the routes discovered in a project.

Entry point registered as ``autoroute`` in ``pyproject.toml``::

    [project.scripts]
    autoroute = "autoroute.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``autoroute`` command."""
    parser = argparse.ArgumentParser(
        prog="autoroute",
        description="Autoroute — file-system route discovery for Python web apps.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- autoroute routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List discovered routes")
    routes_parser.add_argument(
        "dirs",
        nargs="*",
        help="Routes directories (default: routes, route, controllers, controller)",
    )
    routes_parser.add_argument("--root", default="", help="URL prefix applied to every route")
    routes_parser.add_argument(
        "--class-names",
        action="store_true",
        help="Use class and function names as route segments",
    )
    defaults = routes_parser.add_mutually_exclusive_group()
    defaults.add_argument(
        "--all-by-default",
        action="store_true",
        help="Undecorated methods answer every verb",
    )
    defaults.add_argument(
        "--hidden-by-default",
        action="store_true",
        help="Undecorated methods are not routes",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from autoroute.cli._routes import run_routes

        run_routes(args)
