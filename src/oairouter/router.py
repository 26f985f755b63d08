"""Boot-and-registration orchestrator.

:class:`OAIRouter` is a :class:`~oairouter.routing.Router` whose routes come
from OpenAPI documents. Plugins are mounted first; :meth:`OAIRouter.routes`
then schedules the boot pipeline in the background and returns the ASGI
dispatcher straight away::

    router = OAIRouter(api_doc="./api/petstore.yaml", options={"prefix": "/api"})
    await router.mount(OperationContextPlugin)
    await router.mount(HandlerPlugin, {"package": "petstore.handlers"})
    router.on("ready", lambda: print("routes mounted"))
    app = router.routes()

Boot pipeline (runs at most once):

1. load the document source;
2. apply ``api_cooker`` to each loaded document (concurrently for lists);
3. mount one middleware chain per operation of ``api[0]``;
4. publish the explorer routes;
5. emit ``ready``.

Any failure is logged, emitted as ``error`` and ends the boot; routes that
were mounted before the failure stay mounted.

The dispatcher is live before boot finishes. Requests that arrive in that
window get the routing layer's 404, the same answer as any unmatched path.
Hosts that must not serve before boot can ``await router.wait_ready()``,
for example in their lifespan handler.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from oairouter.events import EventEmitter
from oairouter.exceptions import ConfigError, OAIRouterError
from oairouter.explorer.assets import ExplorerAssets, SwaggerUIAssets
from oairouter.explorer.publisher import register_api_explorer
from oairouter.loader import load_api_doc
from oairouter.models import (
    HTTP_METHODS,
    ApiCooker,
    NamedMiddleware,
    NormalizedDocument,
    PathPolicy,
    RouteRegistrationRequest,
    RouterOptions,
    identity_cooker,
)
from oairouter.paths import oai_to_route_path
from oairouter.plugins.base import RoutePlugin
from oairouter.plugins.registry import PluginRegistry
from oairouter.routing import Dispatcher, Router

Loader = Callable[[Any, logging.Logger], Awaitable[Union[NormalizedDocument, list]]]


def _coerce_options(options: Union[RouterOptions, Mapping[str, Any], None]) -> RouterOptions:
    if options is None:
        return RouterOptions()
    if isinstance(options, RouterOptions):
        return options
    if not isinstance(options, Mapping):
        raise ConfigError(f"options must be a mapping, got {type(options).__name__}")
    try:
        return RouterOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise ConfigError(f"Invalid router options: {exc}") from exc


class OAIRouter(Router, EventEmitter):
    """Mount OpenAPI operations as routes with plugin-resolved middleware.

    Args:
        api_doc: Document source understood by *loader*: a mapping, a file
            or directory path, a URL, or a list of those. When empty,
            :meth:`routes` returns a plain router and never boots.
        api_explorer_visible: Publish the explorer routes after mounting.
        api_cooker: Transform applied to every loaded document before use;
            may be a plain or an async function.
        options: Router options (prefix and plugin settings).
        logger: Sink for boot diagnostics. Defaults to the ``oairouter``
            logger.
        path_policy: ``"first"`` mounts only ``api[0]``'s paths;
            ``"merge"`` mounts every loaded document's paths.
        assets: Explorer asset provider. Defaults to
            :class:`~oairouter.explorer.assets.SwaggerUIAssets`.
        loader: Coroutine turning *api_doc* into one document or a list.

    Raises:
        ConfigError: If *api_cooker* is not callable or *options* or
            *path_policy* are invalid.
    """

    def __init__(
        self,
        api_doc: Any = None,
        api_explorer_visible: bool = True,
        api_cooker: ApiCooker = identity_cooker,
        options: Union[RouterOptions, Mapping[str, Any], None] = None,
        logger: Optional[logging.Logger] = None,
        path_policy: Union[PathPolicy, str] = PathPolicy.FIRST,
        assets: Optional[ExplorerAssets] = None,
        loader: Loader = load_api_doc,
    ) -> None:
        if not callable(api_cooker):
            raise ConfigError("api_cooker must be callable")
        try:
            policy = PathPolicy(path_policy)
        except ValueError:
            raise ConfigError(f"Unknown path policy: {path_policy!r}") from None

        Router.__init__(self, _coerce_options(options))
        EventEmitter.__init__(self)

        self.logger = logger or logging.getLogger("oairouter")
        self.api_doc = api_doc
        self.api_explorer_visible = api_explorer_visible
        self.api_cooker = api_cooker
        self.path_policy = policy
        self.assets: ExplorerAssets = assets if assets is not None else SwaggerUIAssets()
        self.loader = loader

        self.api: list[NormalizedDocument] = []
        self.plugin_registry = PluginRegistry(self.options)

        self.boot_task: Optional[asyncio.Task] = None
        self.boot_error: Optional[BaseException] = None
        self.ready = False
        self._boot_scheduled = False
        self._booted = False

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    async def mount(self, plugin: Union[type[RoutePlugin], RoutePlugin], args: Any = None) -> None:
        """Register a plugin. Await every mount before calling :meth:`routes`."""
        await self.plugin_registry.register(plugin, args)

    def routes(self) -> Dispatcher:
        """Schedule the boot pipeline (once) and return the dispatcher.

        Never waits for boot. Outside a running event loop the boot task is
        started by the dispatcher's first ASGI call instead.
        """
        dispatcher = super().routes()
        if not self.api_doc:
            return dispatcher

        if not self._boot_scheduled:
            self._boot_scheduled = True
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                dispatcher.defer(self._start_boot)
            else:
                self._start_boot()
        return dispatcher

    async def wait_ready(self) -> None:
        """Wait for the scheduled boot to finish; re-raise its error if it failed.

        Raises:
            OAIRouterError: If :meth:`routes` has not scheduled a boot.
        """
        if not self._boot_scheduled:
            raise OAIRouterError("Boot has not been scheduled; call routes() first")
        self._start_boot()
        await self.boot_task
        if self.boot_error is not None:
            raise self.boot_error

    # ------------------------------------------------------------------
    # Boot pipeline
    # ------------------------------------------------------------------

    def _start_boot(self) -> None:
        if self.boot_task is None:
            self.boot_task = asyncio.create_task(self.boot(), name="oairouter-boot")

    async def _cook(self, api: NormalizedDocument) -> NormalizedDocument:
        cooked = self.api_cooker(api)
        if inspect.isawaitable(cooked):
            cooked = await cooked
        return cooked

    async def boot(self) -> None:
        """Load, cook, register routes and explorer, then emit ``ready``.

        Errors are logged and emitted as ``error``; this coroutine itself
        does not raise them.

        Raises:
            OAIRouterError: If boot already ran on this instance.
        """
        if self._booted:
            raise OAIRouterError("Router has already booted")
        self._booted = True

        try:
            api = await self.loader(self.api_doc, self.logger)
            if isinstance(api, list):
                self.api = list(await asyncio.gather(*(self._cook(item) for item in api)))
            else:
                self.api.append(await self._cook(api))

            await self.register_routes()
            await self.register_api_explorer()
        except Exception as exc:
            self.boot_error = exc
            self.logger.error("router boot error: %s", exc, exc_info=exc)
            self.emit("error", exc)
            return

        self.ready = True
        self.logger.debug("router is ready...")
        self.emit("ready")

    def _path_sources(self) -> list[tuple[str, Mapping[str, Any]]]:
        documents = self.api[:1] if self.path_policy is PathPolicy.FIRST else self.api
        return [(doc.get("basePath") or "", doc.get("paths") or {}) for doc in documents]

    def _registration_requests(self) -> list[RouteRegistrationRequest]:
        requests = []
        for base_path, paths in self._path_sources():
            for path, path_item in paths.items():
                if not isinstance(path_item, Mapping):
                    self.logger.warning("Skipping path %s: path item is not an object", path)
                    continue
                endpoint = oai_to_route_path(base_path, path)
                for operation, operation_value in path_item.items():
                    if operation.lower() not in HTTP_METHODS:
                        continue
                    if not isinstance(operation_value, Mapping):
                        self.logger.warning(
                            "Skipping %s %s: operation is not an object",
                            operation.upper(),
                            endpoint,
                        )
                        continue
                    requests.append(
                        RouteRegistrationRequest(
                            endpoint=endpoint,
                            operation=operation.lower(),
                            operation_value=dict(operation_value),
                            options=self.options,
                        )
                    )
        return requests

    async def register_routes(self) -> None:
        """Mount one chain per operation of the documents chosen by the path policy.

        Chains are resolved concurrently and mounted only once every
        resolution has succeeded. If one fails, the others are cancelled and
        nothing from this step is mounted.
        """
        requests = self._registration_requests()
        tasks = [asyncio.create_task(self.plugin_registry.load(req)) for req in requests]
        try:
            chains = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        for request, middlewares in zip(requests, chains):
            self.register_route(request, middlewares)

    def register_route(
        self, request: RouteRegistrationRequest, middlewares: list[NamedMiddleware]
    ) -> None:
        """Mount the resolved chain for one operation."""
        if not middlewares:
            self.logger.warning(
                "No plugin produced middleware for %s %s, not mounted",
                request.operation.upper(),
                request.endpoint,
            )
            return

        self.logger.debug(
            "mount %s %s %s",
            request.operation.upper(),
            request.endpoint,
            " > ".join(m.name for m in middlewares),
        )
        self.add_route(request.operation, request.endpoint, *middlewares)

    async def register_api_explorer(self) -> None:
        """Publish the explorer routes unless the explorer is hidden."""
        if self.api_explorer_visible is False:
            return
        register_api_explorer(self, self.api, self.assets)
