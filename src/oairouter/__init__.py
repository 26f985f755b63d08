"""oairouter -- mount OpenAPI documents as live ASGI routes.

An :class:`~oairouter.router.OAIRouter` loads one or more OpenAPI
documents, asks its mounted plugins for a middleware chain per operation,
and registers those chains on a Starlette router. A Swagger UI explorer
republishes the loaded documents.

Typical usage::

    from oairouter import OAIRouter
    from oairouter.plugins import HandlerPlugin

    router = OAIRouter(api_doc="./api/petstore.yaml")
    await router.mount(HandlerPlugin, {"package": "petstore.handlers"})
    app = router.routes()

Modules:
    router: The boot-and-registration orchestrator.
    routing: Method-keyed routing layer on Starlette.
    loader: Document loading, ``$ref`` resolution and normalization.
    plugins: Plugin base class, registry and built-in plugins.
    explorer: Swagger UI assets and document republishing.
    models: Pydantic options and registration data shapes.
    exceptions: Exception hierarchy with exit-code mapping.
    cli: The ``oairouter`` command line.
"""

__version__ = "0.3.0"

from oairouter.exceptions import (  # noqa: E402
    ConfigError,
    DocumentLoadError,
    OAIRouterError,
    PluginError,
    RouteDefinitionError,
)
from oairouter.models import NamedMiddleware, RouteRegistrationRequest, RouterOptions  # noqa: E402
from oairouter.router import OAIRouter  # noqa: E402

__all__ = [
    "ConfigError",
    "DocumentLoadError",
    "NamedMiddleware",
    "OAIRouter",
    "OAIRouterError",
    "PluginError",
    "RouteDefinitionError",
    "RouteRegistrationRequest",
    "RouterOptions",
    "__version__",
]
