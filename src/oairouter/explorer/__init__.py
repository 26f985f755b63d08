"""API explorer -- Swagger UI assets and document republishing."""

from oairouter.explorer.assets import ExplorerAssets, StaticAssets, SwaggerUIAssets
from oairouter.explorer.publisher import explorer_config, register_api_explorer

__all__ = [
    "ExplorerAssets",
    "StaticAssets",
    "SwaggerUIAssets",
    "explorer_config",
    "register_api_explorer",
]
