"""Autoroute application class.

Mutable during setup (middleware, error handlers, lifecycle hooks).
Frozen by ``build()``, which discovers the route files, registers the
resulting table into the router, and compiles it. The first ASGI
request or lifespan startup builds automatically.
"""

import asyncio
import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any

from autoroute._internal.invoke import invoke
from autoroute._internal.signature import positional_arity, trim_args
from autoroute._internal.types import ErrorHandler, Middleware, Receive, Scope, Send
from autoroute.config import RoutingConfig
from autoroute.errors import ConfigurationError
from autoroute.middleware.builtin import no_cache_headers
from autoroute.routing.builder import ModuleLoader, abuild_route_table, build_route_table
from autoroute.routing.discovery import load_module
from autoroute.routing.registrar import register_routes
from autoroute.routing.route import RouteDefinition
from autoroute.routing.router import Router
from autoroute.server.dispatch import wrap_error_handler
from autoroute.server.handler import handle_request

logger = logging.getLogger("autoroute.server")

# Error handlers receive (error, request, response, next)
ERROR_HANDLER_ARITY = 4


class App:
    """The autoroute application.

    Usage::

        app = App(RoutingConfig(routes_dirs=("routes",), root="/shop"))

        @app.error_handler
        def on_error(error, request, response, next):
            response.status(500).text("Sorry")

    Thread safety:
        ``build()`` uses a Lock + double-check so exactly one thread
        registers the routes, even when several ASGI workers hit the
        first request concurrently. Callbacks passed to the constructor
        run inside ``build()``, after the route files are loaded:
        ``init_callback`` first, then ``before_route_callback`` once the
        app-wide middleware is installed, then ``after_route_callback``
        once the routes are registered. Middleware added with ``use()``
        from ``after_route_callback`` runs after the route handlers.
    """

    __slots__ = (
        "_after_route_callback",
        "_before_route_callback",
        "_build_error",
        "_build_lock",
        "_error_handlers",
        "_fallbacks",
        "_freeze_lock",
        "_frozen",
        "_init_callback",
        "_loader",
        "_middleware",
        "_router",
        "_routes",
        "_routes_registered",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(
        self,
        config: RoutingConfig | None = None,
        router: Router | None = None,
        *,
        loader: ModuleLoader = load_module,
        init_callback: Callable[..., Any] | None = None,
        before_route_callback: Callable[..., Any] | None = None,
        after_route_callback: Callable[..., Any] | None = None,
    ) -> None:
        self.config: RoutingConfig = config or RoutingConfig()
        self._router: Router = router if router is not None else Router()
        self._loader = loader
        self._init_callback = init_callback
        self._before_route_callback = before_route_callback
        self._after_route_callback = after_route_callback

        self._middleware: list[Middleware] = []
        self._fallbacks: list[Middleware] = []
        self._error_handlers: list[ErrorHandler] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []

        self._routes: tuple[RouteDefinition, ...] = ()
        self._routes_registered: bool = False
        self._frozen: bool = False
        self._build_error: Exception | None = None
        self._freeze_lock: threading.Lock = threading.Lock()
        self._build_lock: asyncio.Lock = asyncio.Lock()

    # -- Setup --

    def use(self, middleware: Middleware) -> Middleware:
        """Add app-wide middleware, run for every request.

        Middleware added before the routes are registered runs before them;
        middleware added afterwards (from ``after_route_callback``) only
        sees requests the route handlers passed on.
        """
        self._check_not_frozen()
        if self._routes_registered:
            self._fallbacks.append(middleware)
        else:
            self._middleware.append(middleware)
        return middleware

    def error_handler(self, func: ErrorHandler) -> ErrorHandler:
        """Register an error handler via decorator.

        Error handlers must declare exactly four parameters:
        ``(error, request, response, next)``. Handlers run in
        registration order; the built-in handler renders whatever error
        is left.

        Raises:
            ConfigurationError: The handler does not take four parameters.
        """
        self._check_not_frozen()
        if positional_arity(func) != ERROR_HANDLER_ARITY:
            msg = (
                f"Error handler {getattr(func, '__qualname__', func)!r} must have "
                f"{ERROR_HANDLER_ARITY} parameters: (error, request, response, next)"
            )
            raise ConfigurationError(msg)
        self._error_handlers.append(wrap_error_handler(func))
        return func

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async startup hook, run during ASGI lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async shutdown hook, run during ASGI lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Introspection --

    @property
    def router(self) -> Router:
        return self._router

    @property
    def routes(self) -> tuple[RouteDefinition, ...]:
        """The route table registered by ``build()`` (empty before)."""
        return self._routes

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Build --

    def build(self) -> None:
        """Discover, check and register every route exactly once.

        Raises:
            AutorouteError: Invalid route files or conflicting routes. The
                app stays unbuilt and a later call retries.
            Exception: Whatever a build callback or the router raised. The
                same error is raised by every later call.
        """
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._check_build_error()
            self._freeze(build_route_table(self.config, loader=self._loader))

    async def abuild(self) -> None:
        """Like ``build()``, but awaits asynchronous module loaders."""
        if self._frozen:
            return
        async with self._build_lock:
            if self._frozen:
                return
            self._check_build_error()
            routes = await abuild_route_table(self.config, loader=self._loader)
            with self._freeze_lock:
                if self._frozen:
                    return
                self._check_build_error()
                self._freeze(routes)

    def _freeze(self, routes: Sequence[RouteDefinition]) -> None:
        """Install middleware and *routes*, then compile the router.

        MUST only be called while holding _freeze_lock. Middleware is
        rolled back on failure; the router is not, so the error is kept and
        every later build raises it again.
        """
        middleware, fallbacks = list(self._middleware), list(self._fallbacks)
        try:
            self._install(routes)
        except Exception as exc:
            self._middleware, self._fallbacks = middleware, fallbacks
            self._routes, self._routes_registered = (), False
            self._build_error = exc
            raise

    def _install(self, routes: Sequence[RouteDefinition]) -> None:
        self._run_callback(self._init_callback)

        if not self.config.disable_no_cache_header:
            self._middleware.append(no_cache_headers)

        self._run_callback(self._before_route_callback)

        count = register_routes(self._router, routes, root=self.config.normalized_root)
        self._routes = tuple(routes)
        self._routes_registered = True

        self._run_callback(self._after_route_callback)

        self._router.compile()
        self._frozen = True
        logger.debug("App built with %d routes", count)

    def _run_callback(self, callback: Callable[..., Any] | None) -> None:
        # Callbacks may take the app as their only argument
        if callback is not None:
            callback(*trim_args(positional_arity(callback), (self,)))

    def _check_build_error(self) -> None:
        if self._build_error is not None:
            raise self._build_error

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has been built"
            raise RuntimeError(msg)

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        await self.abuild()

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=tuple(self._middleware),
            fallbacks=tuple(self._fallbacks),
            error_handlers=tuple(self._error_handlers),
            debug=self.config.debug,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Builds the app at startup (before the first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.abuild()
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    logger.exception("Application startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return
