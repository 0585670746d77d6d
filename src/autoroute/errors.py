"""Autoroute exception hierarchy.

Shared by the route builder, router, app, and middleware so every module
raises and catches the same types. Everything except ``HTTPError`` is a
startup-time failure raised while the route table is being built.
"""

from dataclasses import dataclass


class AutorouteError(Exception):
    """Base for all autoroute-specific errors."""


class ConfigurationError(AutorouteError):
    """Raised when app configuration is invalid.

    Typically raised by ``RoutingConfig`` at construction or during
    ``App.build()`` at startup.
    """


class RouteDefinitionError(AutorouteError):
    """A routable function is declared in a way that cannot be registered.

    Covers invalid HTTP verbs, handlers accepting too many positional
    arguments, and file upload declared on a function that cannot receive
    a body (or while uploads are disabled).
    """

    def __init__(
        self,
        message: str,
        *,
        file: str = "",
        function: str = "",
        route: str = "",
        verb: str = "",
    ) -> None:
        super().__init__(message)
        self.file = file
        self.function = function
        self.route = route
        self.verb = verb


class RouteExportError(AutorouteError):
    """A route file exports a value that cannot hold routes."""

    def __init__(self, message: str, *, file: str) -> None:
        super().__init__(message)
        self.file = file


class RouteConflictError(AutorouteError):
    """Two route table entries would match the same request."""

    def __init__(self, route: str, verb: str, files: tuple[str, str]) -> None:
        super().__init__(
            f'Conflicting route "{verb} {route}" in files {files[0]} and {files[1]}'
        )
        self.route = route
        self.verb = verb
        self.files = files


@dataclass(frozen=True, slots=True)
class HTTPError(AutorouteError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, body middleware, or handlers. The request
    pipeline forwards it to the error handlers, which use ``status``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )


class PayloadTooLarge(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """413 — request body exceeds the configured parser limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(status=413, detail=f"Request body exceeds {limit} bytes")
