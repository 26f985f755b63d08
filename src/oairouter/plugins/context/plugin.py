"""Expose the matched operation on ``request.state``.

Mount this plugin first so every later middleware can read:

* ``request.state.operation`` -- the OpenAPI operation object;
* ``request.state.operation_id`` -- its ``operationId`` (or ``None``);
* ``request.state.endpoint`` -- the route path the operation is mounted at.
"""

from __future__ import annotations

from typing import Any

from oairouter.models import Handler, RouteRegistrationRequest
from oairouter.plugins.base import RoutePlugin


class OperationContextPlugin(RoutePlugin):
    """Attach operation metadata to every request, then continue the chain."""

    order = 10

    @property
    def name(self) -> str:
        return "operation-context"

    @property
    def description(self) -> str:
        return "Store the matched OpenAPI operation on request.state"

    async def middleware(self, request: RouteRegistrationRequest, field_value: Any) -> Handler:
        operation = request.operation_value
        endpoint = request.endpoint

        async def operation_context(http_request, call_next):  # noqa: ANN001, ANN202
            http_request.state.operation = operation
            http_request.state.operation_id = operation.get("operationId")
            http_request.state.endpoint = endpoint
            return await call_next()

        return operation_context
