"""Republish loaded API documents and the Swagger UI explorer as GET routes.

Routes added by :func:`register_api_explorer` (relative to the router
prefix):

=================================== ==========================================
``/api-explorer``                    HTML index page (``text/html``)
``/swagger-ui.css``                  stylesheet (``text/css``)
``/swagger-ui-bundle.js``            Swagger UI bundle (``application/javascript``)
``/swagger-ui-standalone-preset.js`` standalone preset (``application/javascript``)
``/<title>.json``                    one per loaded document, the document itself
``/api-explorer-config.json``        Swagger UI config listing every document
=================================== ==========================================

Two documents with the same title map to the same ``/<title>.json`` path;
the routing layer replaces the earlier route, so the later document wins.
Titles containing ``/``, ``{`` or ``}`` cannot be published as a literal
path and are rejected before any explorer route is mounted.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from oairouter.exceptions import RouteDefinitionError
from oairouter.explorer.assets import ExplorerAssets
from oairouter.paths import url_join
from oairouter.routing import Router

logger = logging.getLogger(__name__)

EXPLORER_PATH = "/api-explorer"
CONFIG_PATH = "/api-explorer-config.json"

STATIC_ROUTES: tuple[tuple[str, str, str], ...] = (
    (EXPLORER_PATH, "index", "text/html"),
    ("/swagger-ui.css", "ui_css", "text/css"),
    ("/swagger-ui-bundle.js", "bundle_js", "application/javascript"),
    ("/swagger-ui-standalone-preset.js", "preset_js", "application/javascript"),
)

_UNSAFE_TITLE = re.compile(r"[/{}]")


def document_path(api: dict[str, Any]) -> str:
    """Return the ``/<title>.json`` path a document is published under.

    Raises:
        RouteDefinitionError: If the title contains ``/``, ``{`` or ``}``.
    """
    title = str(api["info"]["title"])
    if _UNSAFE_TITLE.search(title):
        raise RouteDefinitionError(f"Document title {title!r} cannot be published as a path")
    return f"/{title}.json"


def explorer_config(api: list[dict[str, Any]], prefix: str = "") -> dict[str, Any]:
    """Build the Swagger UI configuration served at ``/api-explorer-config.json``."""
    return {
        "urls": [
            {
                "name": item["info"]["title"],
                "url": url_join(prefix, f"{item['info']['title']}.json"),
            }
            for item in api
        ],
        "displayOperationId": True,
        "displayRequestDuration": True,
        "showExtensions": True,
        "defaultModelsExpandDepth": 0,
    }


def _static_endpoint(assets: ExplorerAssets, attr: str, media_type: str):  # noqa: ANN202
    async def endpoint(request: Request) -> Response:
        content = await run_in_threadpool(getattr, assets, attr)
        return Response(content, media_type=media_type)

    endpoint.__name__ = f"explorer_{attr}"
    return endpoint


def _document_endpoint(api: dict[str, Any]):  # noqa: ANN202
    async def endpoint(request: Request) -> Response:
        return JSONResponse(api)

    endpoint.__name__ = "explorer_document"
    return endpoint


def register_api_explorer(
    router: Router,
    api: list[dict[str, Any]],
    assets: ExplorerAssets,
) -> None:
    """Mount the explorer routes for *api* on *router*."""
    prefix = router.options.prefix
    documents = [(document_path(item), item) for item in api]
    logger.debug("apiExplorer: %s", url_join(prefix, EXPLORER_PATH))

    for path, attr, media_type in STATIC_ROUTES:
        router.get(path, _static_endpoint(assets, attr, media_type))

    for path, item in documents:
        router.get(path, _document_endpoint(item))

    async def explorer_config_endpoint(request: Request) -> Response:
        return JSONResponse(explorer_config(api, prefix))

    router.get(CONFIG_PATH, explorer_config_endpoint)
