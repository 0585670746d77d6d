"""Autoroute — file-system route discovery for Python web apps.

Drop classes and functions into a ``routes/`` directory; their location
and decorators decide the URL and HTTP verbs they answer.

Basic usage::

    # routes/api/sales/order.py
    from autoroute import http

    class Order:
        @http.get()
        def m1(self, request, response):
            response.json({"ok": True})

        def index(self, request, response):
            response.text("orders")

    # app.py
    from autoroute import App, RoutingConfig

    app = App(RoutingConfig(routes_dirs=("routes",)))

``GET /api/sales/order/m1`` and ``GET /api/sales/order`` are now served
by any ASGI server.
"""

import importlib

__version__ = "0.1.0"
__all__ = [
    "App",
    "AutorouteError",
    "ConfigurationError",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "Request",
    "Response",
    "RouteConflictError",
    "RouteDefinitionError",
    "RouteExportError",
    "RoutingConfig",
    "UploadedFile",
    "http",
    "route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import autoroute`` fast while providing a clean top-level API.
    """
    if name == "App":
        from autoroute.app import App

        return App

    if name == "RoutingConfig":
        from autoroute.config import RoutingConfig

        return RoutingConfig

    if name == "http":
        # Submodule imports bind autoroute.http too; both paths give the package
        return importlib.import_module("autoroute.http")

    if name == "route":
        from autoroute.routing.decorators import route

        return route

    if name == "Request":
        from autoroute.http.request import Request

        return Request

    if name == "Response":
        from autoroute.http.response import Response

        return Response

    if name == "UploadedFile":
        from autoroute.http.forms import UploadedFile

        return UploadedFile

    if name in (
        "AutorouteError",
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "RouteConflictError",
        "RouteDefinitionError",
        "RouteExportError",
    ):
        from autoroute import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
