"""Bring a parsed API document into the shape the router relies on.

After normalization every document has ``info.title``, ``basePath`` and
``paths``. Swagger 2.0 documents carry ``basePath`` themselves; for
OpenAPI 3.x the path component of the first ``servers`` URL is used.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

from oairouter.loader.resolver import resolve_refs

DEFAULT_TITLE = "api"


def _base_path_from_servers(document: dict[str, Any]) -> str:
    servers = document.get("servers")
    if not isinstance(servers, list) or not servers:
        return ""
    first = servers[0]
    url = first.get("url", "") if isinstance(first, dict) else ""
    path = urlparse(str(url)).path
    # Server variables such as "/{version}" cannot be resolved statically.
    if "{" in path:
        return ""
    return path.rstrip("/")


def normalize_document(
    document: dict[str, Any], origin: str, logger: logging.Logger
) -> dict[str, Any]:
    """Resolve references and fill in ``info.title``, ``basePath`` and ``paths``.

    Args:
        document: The parsed document.
        origin: Where it came from, used in log messages only.
        logger: Sink for warnings about incomplete documents.

    Returns:
        A new normalized document.
    """
    if "swagger" not in document and "openapi" not in document:
        logger.warning("Document from %s declares no swagger/openapi version", origin)

    normalized = resolve_refs(document)

    info = normalized.get("info")
    if not isinstance(info, dict):
        info = {}
        normalized["info"] = info
    if not info.get("title"):
        logger.warning("Document from %s has no info.title, using '%s'", origin, DEFAULT_TITLE)
        info["title"] = DEFAULT_TITLE
    info["title"] = str(info["title"])

    if not isinstance(normalized.get("paths"), dict):
        normalized["paths"] = {}

    base_path = normalized.get("basePath")
    if not isinstance(base_path, str):
        normalized["basePath"] = _base_path_from_servers(normalized)

    return normalized
