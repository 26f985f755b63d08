"""URL joining and OpenAPI-to-Starlette path template conversion.

OpenAPI writes path parameters as ``{name}`` where *name* may be any
string. Starlette uses the same brace syntax but only recognises
identifier-like names (``[a-zA-Z_][a-zA-Z0-9_]*``); anything else would be
matched literally. :func:`oai_to_route_path` therefore rewrites every
parameter into a valid Starlette token and rejects malformed templates:

* ``{pet-id}`` becomes ``{pet_id}`` (non-word characters -> ``_``).
* ``{1st}`` becomes ``{_1st}``.
* ``{}``, nested braces and unbalanced braces raise
  :class:`~oairouter.exceptions.RouteDefinitionError`.
"""

from __future__ import annotations

import re

from oairouter.exceptions import RouteDefinitionError

_NON_WORD = re.compile(r"\W")


def url_join(*parts: str | None) -> str:
    """Join URL path fragments with exactly one ``/`` between them.

    Empty and ``None`` fragments are skipped. The result always starts
    with ``/`` and never ends with one, except for the root path itself.

    Example::

        url_join("/v1/", "/items")   # "/v1/items"
        url_join("", "petstore.json")  # "/petstore.json"
        url_join(None, "")           # "/"
    """
    segments: list[str] = []
    for part in parts:
        if not part:
            continue
        stripped = part.strip("/")
        if stripped:
            segments.append(stripped)
    return "/" + "/".join(segments)


def _route_param(name: str, template: str) -> str:
    if not name:
        raise RouteDefinitionError(f"Empty path parameter in '{template}'")
    safe = _NON_WORD.sub("_", name)
    if safe[0].isdigit():
        safe = "_" + safe
    return "{" + safe + "}"


def oai_to_route_path(base_path: str | None, path: str) -> str:
    """Join *base_path* and an OpenAPI *path* into a Starlette route path.

    Args:
        base_path: The document's ``basePath`` (may be empty).
        path: A key of the document's ``paths`` object, e.g.
            ``"/items/{id}"``.

    Returns:
        The route path, e.g. ``"/v1/items/{id}"``.

    Raises:
        RouteDefinitionError: If the joined template has empty, nested or
            unbalanced braces.
    """
    template = url_join(base_path, path)
    out: list[str] = []
    param_start: int | None = None

    for index, char in enumerate(template):
        if char == "{":
            if param_start is not None:
                raise RouteDefinitionError(
                    f"Nested '{{' at position {index} in '{template}'"
                )
            param_start = index
        elif char == "}":
            if param_start is None:
                raise RouteDefinitionError(
                    f"Unmatched '}}' at position {index} in '{template}'"
                )
            out.append(_route_param(template[param_start + 1 : index], template))
            param_start = None
        elif param_start is None:
            out.append(char)

    if param_start is not None:
        raise RouteDefinitionError(
            f"Unmatched '{{' at position {param_start} in '{template}'"
        )
    return "".join(out)
