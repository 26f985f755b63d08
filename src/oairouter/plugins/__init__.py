"""Plugin system for oairouter -- per-operation middleware resolution.

Plugins are registered on a router with :meth:`OAIRouter.mount` (or
discovered from the ``oairouter.plugins`` entry-point group) and, during
boot, each one contributes a middleware unit to every operation it applies
to.

Key classes:

* :class:`RoutePlugin` -- Abstract base class that all plugins extend.
* :class:`PluginRegistry` -- Registers plugins and resolves middleware
  chains in registration order.
* :class:`HandlerPlugin` -- Built-in ``x-oai-handler`` binding.
* :class:`OperationContextPlugin` -- Built-in ``request.state`` context.

Example::

    router = OAIRouter(api_doc="./api.yaml")
    await router.mount(OperationContextPlugin)
    await router.mount(HandlerPlugin, {"package": "petstore.handlers"})
    app = router.routes()
"""

from oairouter.plugins.base import RoutePlugin
from oairouter.plugins.context import OperationContextPlugin
from oairouter.plugins.handler import HandlerPlugin
from oairouter.plugins.registry import ENTRY_POINT_GROUP, PluginRegistry

__all__ = [
    "ENTRY_POINT_GROUP",
    "HandlerPlugin",
    "OperationContextPlugin",
    "PluginRegistry",
    "RoutePlugin",
]
