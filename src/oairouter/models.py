"""Shared data shapes for oairouter.

Every other module imports from here rather than defining its own types.
The contents fall into two groups:

**Configuration** -- :class:`RouterOptions`, a Pydantic model that accepts
plugin-defined extra keys, and :class:`PathPolicy`.

**Registration** -- the values that flow between the route registrar, the
plugin registry and the routing layer: :class:`RouteRegistrationRequest`,
:class:`NamedMiddleware`, and the handler type aliases.
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from starlette.requests import Request
from starlette.responses import Response


HTTP_METHODS: tuple[str, ...] = (
    "get",
    "put",
    "post",
    "delete",
    "options",
    "head",
    "patch",
    "trace",
)
"""Path item keys that denote operations. Every other key is ignored."""

NormalizedDocument = dict[str, Any]

CallNext = Callable[[], Awaitable[Optional[Response]]]
Handler = Callable[[Request, CallNext], Awaitable[Optional[Response]]]
Endpoint = Callable[[Request], Awaitable[Response]]

ApiCooker = Callable[
    [NormalizedDocument],
    Union[NormalizedDocument, Awaitable[NormalizedDocument]],
]


def identity_cooker(api: NormalizedDocument) -> NormalizedDocument:
    """Default document cooker: return the document untouched."""
    return api


class PathPolicy(str, enum.Enum):
    """Which loaded documents the route registrar reads paths from.

    ``FIRST`` only mounts the paths of ``api[0]`` even when several
    documents were loaded; the remaining documents are still published by
    the explorer. ``MERGE`` mounts every document's paths under its own
    ``basePath``.
    """

    FIRST = "first"
    MERGE = "merge"


class RouterOptions(BaseModel):
    """Options shared by the routing layer, the explorer and every plugin.

    ``prefix`` is prepended to every registered path and to the document
    URLs listed by ``/api-explorer-config.json``. Plugins may read their own
    settings from extra keys, which are preserved in ``model_extra``.

    Example::

        RouterOptions(prefix="/api", controller_dir="./controllers")
    """

    model_config = ConfigDict(extra="allow")

    prefix: str = Field(
        default="", description="Path prefix applied to every mounted route"
    )

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a declared field or an extra plugin option by name."""
        if key in type(self).model_fields:
            return getattr(self, key)
        return (self.model_extra or {}).get(key, default)


@dataclass(frozen=True)
class RouteRegistrationRequest:
    """Everything a plugin needs to build middleware for one operation.

    Attributes:
        endpoint: The routing-layer path, already joined with ``basePath``
            and rewritten into Starlette's parameter syntax.
        operation: Lower-case HTTP verb (e.g. ``"get"``).
        operation_value: The raw OpenAPI operation object.
        options: The router-wide options.
    """

    endpoint: str
    operation: str
    operation_value: dict[str, Any]
    options: RouterOptions = field(default_factory=RouterOptions)


@dataclass(frozen=True)
class NamedMiddleware:
    """A middleware unit carrying the name used in mount diagnostics."""

    name: str
    handler: Handler
