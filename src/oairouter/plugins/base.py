"""Abstract base class for route plugins.

A plugin turns one OpenAPI operation into one middleware unit. Every
plugin must subclass :class:`RoutePlugin`, implement the :attr:`name`
property and the :meth:`middleware` coroutine; the remaining hooks have
no-op defaults.

A plugin is consulted for an operation when its :attr:`field` is present in
the operation object (``field = None`` means every operation). The value of
that field is handed to :meth:`middleware`.

Example:
    Plugin that tags every response with the operation id::

        class OperationIdHeader(RoutePlugin):
            @property
            def name(self) -> str:
                return "operation-id-header"

            field = "operationId"

            async def middleware(self, request, field_value):
                async def handler(http_request, call_next):
                    response = await call_next()
                    if response is not None:
                        response.headers["X-Operation-Id"] = field_value
                    return response

                return handler
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Union

from oairouter.models import Handler, RouteRegistrationRequest, RouterOptions


class RoutePlugin(ABC):
    """Base class for all plugins mounted with :meth:`OAIRouter.mount`.

    The plugin lifecycle is:

    1. Instantiation -- the registry calls the no-arg constructor when a
       class is mounted, or uses the instance as given.
    2. :meth:`on_init` -- called once with the mount arguments and the
       router options.
    3. :meth:`middleware` -- called once per matching operation during boot.
    4. :meth:`cleanup` -- called when the registry is cleaned up.
    """

    field: Optional[Union[str, list[str]]] = None
    """Operation key(s) that activate this plugin; ``None`` matches all."""

    order: int = 100
    """Position among entry-point plugins loaded by ``discover`` (lower first)."""

    def __init__(self) -> None:
        self.args: Any = None
        self.options: RouterOptions = RouterOptions()

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique plugin name, used in mount diagnostics."""
        ...

    @property
    def version(self) -> str:
        return "0.1.0"

    @property
    def description(self) -> str:
        return ""

    def on_init(self, args: Any, options: RouterOptions) -> None:
        """Store the mount arguments and router options.

        Override to validate *args* or prepare shared state; call
        ``super().on_init`` to keep :attr:`args` and :attr:`options` set.
        """
        self.args = args
        self.options = options

    def _fields(self) -> list[str]:
        if self.field is None:
            return []
        if isinstance(self.field, str):
            return [self.field]
        return list(self.field)

    def applies_to(self, request: RouteRegistrationRequest) -> bool:
        """Whether this plugin contributes middleware for *request*."""
        fields = self._fields()
        if not fields:
            return True
        return any(f in request.operation_value for f in fields)

    def field_value(self, request: RouteRegistrationRequest) -> Any:
        """Value of the first configured field present in the operation."""
        for f in self._fields():
            if f in request.operation_value:
                return request.operation_value[f]
        return None

    @abstractmethod
    async def middleware(self, request: RouteRegistrationRequest, field_value: Any) -> Handler:
        """Build the middleware handler for one operation.

        Args:
            request: The operation being registered.
            field_value: The value of :attr:`field` in the operation, or
                ``None`` when the plugin matches every operation.

        Returns:
            An async ``handler(http_request, call_next)``.
        """
        ...

    def cleanup(self) -> None:
        """Release resources acquired in :meth:`on_init`."""
