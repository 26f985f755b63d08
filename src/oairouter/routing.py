"""Method-keyed routing layer built on Starlette.

:class:`Router` is the registration surface the orchestrator mounts onto:
``add_route(method, path, *handlers)`` plus one shortcut per HTTP verb,
mirroring the ``router.get(path, ...handlers)`` style of koa-like routers.
Each registration composes its handlers into a single Starlette
:class:`~starlette.routing.Route` endpoint.

A handler is either a :class:`~oairouter.models.NamedMiddleware` or a bare
callable. Callables with one required positional parameter are terminal
endpoints (``handler(request)``); any other callable is middleware
(``handler(request, call_next)``). When the chain finishes without any
handler returning a response, the route answers ``404 Not Found``.

:meth:`Router.routes` returns a :class:`Dispatcher`, the ASGI application
handed to the host. Routes registered after the dispatcher was returned
are visible to it immediately.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any

from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route
from starlette.routing import Router as StarletteRouter
from starlette.types import Receive, Scope, Send

from oairouter.exceptions import ConfigError
from oairouter.models import HTTP_METHODS, NamedMiddleware, RouterOptions
from oairouter.paths import url_join

logger = logging.getLogger(__name__)


def as_middleware(handler: Any) -> NamedMiddleware:
    """Wrap *handler* as a named middleware unit (endpoints become terminal units)."""
    if isinstance(handler, NamedMiddleware):
        return handler
    if not callable(handler):
        raise ConfigError(f"Route handler must be callable, got {type(handler).__name__}")

    name = getattr(handler, "__name__", type(handler).__name__)
    try:
        parameters = inspect.signature(handler).parameters.values()
    except (TypeError, ValueError):
        arity = 2
    else:
        arity = sum(
            1
            for p in parameters
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
        )

    if arity == 1:

        async def endpoint(request, call_next):  # noqa: ANN001, ANN202
            result = handler(request)
            if inspect.isawaitable(result):
                result = await result
            return result

        return NamedMiddleware(name=name, handler=endpoint)
    return NamedMiddleware(name=name, handler=handler)


def compose(chain: list[NamedMiddleware]) -> Callable:
    """Fold a middleware chain into one Starlette endpoint coroutine."""

    async def dispatch(request, index: int):  # noqa: ANN001, ANN202
        if index >= len(chain):
            return None
        call_next = functools.partial(dispatch, request, index + 1)
        return await chain[index].handler(request, call_next)

    async def endpoint(request) -> Response:  # noqa: ANN001
        response = await dispatch(request, 0)
        if response is None:
            return PlainTextResponse("Not Found", status_code=404)
        return response

    return endpoint


class Dispatcher:
    """ASGI entry point returned by :meth:`Router.routes`.

    Forwards every call to the underlying Starlette router. Callbacks
    registered with :meth:`defer` run once, just before the first call is
    forwarded; the orchestrator uses this to start its boot task when
    :meth:`Router.routes` was called outside a running event loop.
    """

    def __init__(self, app: StarletteRouter) -> None:
        self.app = app
        self._deferred: list[Callable[[], None]] = []

    def defer(self, callback: Callable[[], None]) -> None:
        self._deferred.append(callback)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        while self._deferred:
            self._deferred.pop(0)()
        await self.app(scope, receive, send)


class Router:
    """Method-keyed route registration on top of a Starlette router.

    Registering the same method and path twice replaces the earlier route,
    so the last registration wins. There is no ``options`` shortcut because
    that name holds the router options; use ``add_route("options", ...)``.

    Args:
        options: Router-wide options; ``options.prefix`` is prepended to
            every registered path.

    Example::

        router = Router(RouterOptions(prefix="/api"))
        router.get("/health", lambda request: PlainTextResponse("ok"))
        app = router.routes()
    """

    def __init__(self, options: RouterOptions | None = None) -> None:
        self.options = options or RouterOptions()
        self._app = StarletteRouter()
        self._dispatcher = Dispatcher(self._app)
        self._registered: dict[tuple[str, str], tuple[Route, list[str]]] = {}

    def add_route(self, method: str, path: str, *handlers: Any) -> Route:
        """Mount *handlers* as a chain at ``(method, path)``.

        Args:
            method: HTTP verb, any case.
            path: Route path in Starlette syntax, relative to the prefix.
            *handlers: Middleware units or endpoint callables, in order.

        Returns:
            The Starlette route that was added.

        Raises:
            ConfigError: If *method* is unknown or no handler was given.
        """
        verb = method.lower()
        if verb not in HTTP_METHODS:
            raise ConfigError(f"Unsupported HTTP method: {method}")
        if not handlers:
            raise ConfigError(f"No handlers given for {verb.upper()} {path}")

        chain = [as_middleware(h) for h in handlers]
        full_path = url_join(self.options.prefix, path)
        route = Route(full_path, compose(chain), methods=[verb.upper()])

        key = (verb.upper(), full_path)
        # Starlette answers HEAD on every GET route; an explicit HEAD route
        # for the same path takes that over.
        if verb == "get" and ("HEAD", full_path) in self._registered:
            route.methods.discard("HEAD")
        elif verb == "head":
            get_route = self._registered.get(("GET", full_path))
            if get_route is not None:
                get_route[0].methods.discard("HEAD")
        previous = self._registered.get(key)
        if previous is not None:
            index = self._app.routes.index(previous[0])
            self._app.routes[index] = route
            logger.debug("Replaced %s %s", *key)
        else:
            self._app.routes.append(route)
        self._registered[key] = (route, [unit.name for unit in chain])
        return route

    def get(self, path: str, *handlers: Any) -> Route:
        return self.add_route("get", path, *handlers)

    def post(self, path: str, *handlers: Any) -> Route:
        return self.add_route("post", path, *handlers)

    def put(self, path: str, *handlers: Any) -> Route:
        return self.add_route("put", path, *handlers)

    def delete(self, path: str, *handlers: Any) -> Route:
        return self.add_route("delete", path, *handlers)

    def patch(self, path: str, *handlers: Any) -> Route:
        return self.add_route("patch", path, *handlers)

    def head(self, path: str, *handlers: Any) -> Route:
        return self.add_route("head", path, *handlers)

    def trace(self, path: str, *handlers: Any) -> Route:
        return self.add_route("trace", path, *handlers)

    def registered_routes(self) -> list[tuple[str, str, list[str]]]:
        """Return ``(METHOD, path, middleware names)`` for every live route."""
        return [
            (method, path, list(names))
            for (method, path), (_, names) in self._registered.items()
        ]

    def routes(self) -> Dispatcher:
        """Return the ASGI dispatcher serving every registered route."""
        return self._dispatcher
