"""Load API documents from mappings, files, directories or URLs.

:func:`load_api_doc` is the loader the router awaits at the start of its
boot pipeline. What it returns depends on the shape of the source:

* a ``dict`` -- one document;
* a ``list``/``tuple`` of sources -- one document per item, in order;
* a directory path -- one document per ``*.json``/``*.yaml``/``*.yml``
  file, sorted by file name;
* an ``http(s)://`` URL or a file path -- one document.

JSON and YAML are both accepted; the format is guessed from the file
suffix or response content type and otherwise detected from the content.
Every document goes through :func:`~oairouter.loader.normalize.normalize_document`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Union

import httpx
import yaml

from oairouter.exceptions import DocumentLoadError
from oairouter.loader.normalize import normalize_document

DOCUMENT_SUFFIXES = (".json", ".yaml", ".yml")

ApiDocSource = Union[str, Path, dict[str, Any], list[Any], tuple[Any, ...]]

logger = logging.getLogger(__name__)


async def load_api_doc(
    source: ApiDocSource, log: logging.Logger | None = None
) -> dict[str, Any] | list[dict[str, Any]]:
    """Load and normalize the document(s) described by *source*.

    Args:
        source: A document mapping, a path, a URL, or a list of those.
        log: Logger for load diagnostics. Defaults to this module's logger.

    Returns:
        A single normalized document, or a list of them for list and
        directory sources.

    Raises:
        DocumentLoadError: If any document cannot be read or parsed.
    """
    log = log or logger

    if isinstance(source, (list, tuple)):
        if not source:
            raise DocumentLoadError("Empty list of API document sources")
        return [await _load_single(item, log) for item in source]

    if isinstance(source, (str, Path)) and not _is_url(str(source)):
        path = Path(source)
        if path.is_dir():
            return await _load_directory(path, log)

    return await _load_single(source, log)


async def _load_single(source: Any, log: logging.Logger) -> dict[str, Any]:
    if isinstance(source, dict):
        return normalize_document(source, "<mapping>", log)
    if not isinstance(source, (str, Path)):
        raise DocumentLoadError(
            f"Unsupported API document source: {type(source).__name__}"
        )

    origin = str(source)
    if _is_url(origin):
        document = await _load_from_url(origin)
    else:
        document = await _load_from_file(Path(source))
    log.debug("Loaded API document from %s", origin)
    return normalize_document(document, origin, log)


async def _load_directory(directory: Path, log: logging.Logger) -> list[dict[str, Any]]:
    files = sorted(
        p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in DOCUMENT_SUFFIXES
    )
    if not files:
        raise DocumentLoadError(f"No API documents found in directory: {directory}")
    log.debug("Loading %d API documents from %s", len(files), directory)
    return [await _load_single(path, log) for path in files]


async def _load_from_url(url: str) -> dict[str, Any]:
    try:
        async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentLoadError(
            f"HTTP {exc.response.status_code} fetching API document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DocumentLoadError(f"Failed to fetch API document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    return parse_content(response.text, hint=hint, origin=url)


async def _load_from_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise DocumentLoadError(f"API document not found: {path}")
    try:
        content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read API document {path}: {exc}") from exc

    suffix = path.suffix.lower()
    hint = "json" if suffix == ".json" else "yaml" if suffix in (".yaml", ".yml") else ""
    return parse_content(content, hint=hint, origin=str(path))


def parse_content(content: str, hint: str = "", origin: str = "<string>") -> dict[str, Any]:
    """Parse *content* as JSON or YAML into a mapping.

    JSON is tried first unless *hint* is ``"yaml"``; a ``"json"`` hint
    disables the YAML fallback.

    Raises:
        DocumentLoadError: If the content is empty, unparseable, or not a
            mapping at the top level.
    """
    if not content.strip():
        raise DocumentLoadError(f"API document is empty: {origin}")

    if hint != "yaml":
        try:
            return _expect_mapping(json.loads(content), origin)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise DocumentLoadError(f"Invalid JSON in {origin}: {exc}") from exc

    try:
        return _expect_mapping(yaml.safe_load(content), origin)
    except yaml.YAMLError as exc:
        raise DocumentLoadError(f"Failed to parse {origin} as JSON or YAML: {exc}") from exc


def _expect_mapping(value: Any, origin: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        kind = type(value).__name__ if value is not None else "empty document"
        raise DocumentLoadError(f"API document {origin} must be an object (got {kind})")
    return value


def _is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))
