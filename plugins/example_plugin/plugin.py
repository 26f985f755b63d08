"""Example plugin that logs every matched request to stderr."""

from __future__ import annotations

import sys
import time
from typing import Any

from oairouter.models import Handler, RouteRegistrationRequest, RouterOptions
from oairouter.plugins.base import RoutePlugin


class ExamplePlugin(RoutePlugin):
    """Logs method, endpoint, status and duration of each request."""

    order = 20

    def __init__(self) -> None:
        super().__init__()
        self._initialized = False

    @property
    def name(self) -> str:
        return "example"

    @property
    def version(self) -> str:
        return "0.1.0"

    @property
    def description(self) -> str:
        return "Example plugin that logs request/response info"

    def on_init(self, args: Any, options: RouterOptions) -> None:
        super().on_init(args, options)
        self._initialized = True

    async def middleware(self, request: RouteRegistrationRequest, field_value: Any) -> Handler:
        label = f"{request.operation.upper()} {request.endpoint}"

        async def log_request(http_request, call_next):  # noqa: ANN001, ANN202
            started = time.perf_counter()
            response = await call_next()
            status = response.status_code if response is not None else 404
            elapsed = (time.perf_counter() - started) * 1000
            print(f"[example] {label} -> {status} ({elapsed:.1f} ms)", file=sys.stderr)
            return response

        return log_request

    def cleanup(self) -> None:
        self._initialized = False
