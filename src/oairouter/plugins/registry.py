"""Plugin registry -- registration at mount time, resolution at route time.

:class:`PluginRegistry` accumulates plugins in registration order. During
boot the route registrar calls :meth:`PluginRegistry.load` once per
operation; every registered plugin whose
:meth:`~oairouter.plugins.base.RoutePlugin.applies_to` accepts the
operation contributes one :class:`~oairouter.models.NamedMiddleware`, and
the chain keeps registration order.

Plugins may also be discovered from the ``oairouter.plugins`` entry-point
group. Third-party packages declare them in their ``pyproject.toml``::

    [project.entry-points."oairouter.plugins"]
    my-plugin = "my_package.plugin:MyPlugin"
"""

from __future__ import annotations

import importlib.metadata
import inspect
import logging
from collections.abc import Iterable
from typing import Any, Union

from oairouter.exceptions import PluginError
from oairouter.models import NamedMiddleware, RouteRegistrationRequest, RouterOptions
from oairouter.plugins.base import RoutePlugin

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "oairouter.plugins"
"""The entry-point group name used for plugin discovery."""


class PluginRegistry:
    """Registers route plugins and resolves them into middleware chains.

    Args:
        options: Router options handed to every plugin's ``on_init`` and
            carried by every registration request.

    Example::

        registry = PluginRegistry(RouterOptions())
        await registry.register(HandlerPlugin)
        chain = await registry.load(request)
    """

    def __init__(self, options: RouterOptions | None = None) -> None:
        self.options = options or RouterOptions()
        self._plugins: dict[str, RoutePlugin] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register(
        self, plugin: Union[type[RoutePlugin], RoutePlugin], args: Any = None
    ) -> RoutePlugin:
        """Register a plugin class or instance.

        Classes are instantiated with no arguments. The plugin's
        ``on_init`` receives *args* and the registry options.

        Returns:
            The registered plugin instance.

        Raises:
            PluginError: If *plugin* is not a :class:`RoutePlugin`, its
                initialisation fails, or its name is already registered.
        """
        if inspect.isclass(plugin) and issubclass(plugin, RoutePlugin):
            try:
                instance = plugin()
            except Exception as exc:
                raise PluginError(f"Cannot instantiate plugin {plugin.__name__}: {exc}") from exc
        elif isinstance(plugin, RoutePlugin):
            instance = plugin
        else:
            raise PluginError(f"Not a RoutePlugin: {plugin!r}")

        name = instance.name
        if name in self._plugins:
            raise PluginError(f"Plugin '{name}' is already registered")

        try:
            instance.on_init(args, self.options)
        except PluginError:
            raise
        except Exception as exc:
            raise PluginError(f"Plugin '{name}' failed to initialise: {exc}") from exc

        self._plugins[name] = instance
        logger.info("Registered plugin '%s' v%s", name, instance.version)
        return instance

    def discover(
        self, enabled: Iterable[str] = (), disabled: Iterable[str] = ()
    ) -> list[str]:
        """Register plugins advertised under the ``oairouter.plugins`` entry points.

        When *enabled* is non-empty only those names are loaded; otherwise
        every discovered plugin not in *disabled* is loaded. Plugins that
        fail to load are logged and skipped. Discovered plugins are registered by
        ascending ``order`` class attribute, then by entry-point name.

        Returns:
            Names of the plugins that were registered.
        """
        enabled_set = set(enabled)
        disabled_set = set(disabled)
        loaded: list[str] = []

        candidates: list[tuple[int, str, Any]] = []
        for ep in importlib.metadata.entry_points().select(group=ENTRY_POINT_GROUP):
            if enabled_set and ep.name not in enabled_set:
                logger.debug("Plugin '%s' not in enabled list, skipping", ep.name)
                continue
            if ep.name in disabled_set:
                logger.debug("Plugin '%s' is disabled, skipping", ep.name)
                continue
            try:
                plugin_cls = ep.load()
            except Exception as exc:
                logger.warning("Failed to load plugin '%s': %s", ep.name, exc)
                continue
            candidates.append((getattr(plugin_cls, "order", 100), ep.name, plugin_cls))

        for _, ep_name, plugin_cls in sorted(candidates, key=lambda c: (c[0], c[1])):
            try:
                instance = plugin_cls()
                instance.on_init(None, self.options)
                if instance.name in self._plugins:
                    raise PluginError(f"Plugin '{instance.name}' is already registered")
                self._plugins[instance.name] = instance
                loaded.append(instance.name)
            except Exception as exc:
                logger.warning("Failed to load plugin '%s': %s", ep_name, exc)

        return loaded

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def load(self, request: RouteRegistrationRequest) -> list[NamedMiddleware]:
        """Resolve the middleware chain for one operation.

        Raises:
            PluginError: If a plugin fails to build its middleware or returns
                something that is not callable.
        """
        chain: list[NamedMiddleware] = []
        for name, plugin in self._plugins.items():
            if not plugin.applies_to(request):
                continue
            try:
                handler = await plugin.middleware(request, plugin.field_value(request))
            except PluginError:
                raise
            except Exception as exc:
                raise PluginError(
                    f"Plugin '{name}' failed for {request.operation.upper()} "
                    f"{request.endpoint}: {exc}"
                ) from exc
            if not callable(handler):
                raise PluginError(
                    f"Plugin '{name}' returned a non-callable middleware for "
                    f"{request.operation.upper()} {request.endpoint}"
                )
            chain.append(NamedMiddleware(name=name, handler=handler))
        return chain

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def get_plugin(self, name: str) -> RoutePlugin:
        try:
            return self._plugins[name]
        except KeyError:
            raise PluginError(f"Plugin '{name}' is not registered") from None

    def list_plugins(self) -> list[dict[str, str]]:
        return [
            {
                "name": plugin.name,
                "version": plugin.version,
                "description": plugin.description,
            }
            for plugin in self._plugins.values()
        ]

    def cleanup(self) -> None:
        """Call every plugin's ``cleanup`` and forget all registrations.

        Errors from individual plugins are logged so the others still run.
        """
        for name, plugin in self._plugins.items():
            try:
                plugin.cleanup()
            except Exception as exc:
                logger.warning("Error cleaning up plugin '%s': %s", name, exc)
        self._plugins.clear()
