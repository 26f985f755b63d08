"""Bind OpenAPI operations to Python callables named in the document.

An operation opts in with the ``x-oai-handler`` field::

    paths:
      /pets/{pet_id}:
        get:
          operationId: getPet
          x-oai-handler: "petstore.handlers:get_pet"

The reference is ``"module:attribute"`` (or ``"module.attribute"``). When
the plugin is mounted with ``args={"package": "petstore.handlers"}``, a bare
attribute name such as ``"get_pet"`` is looked up in that package.

The callable follows the routing layer's convention: ``fn(request)`` is a
terminal endpoint, ``fn(request, call_next)`` is a middleware.
"""

from __future__ import annotations

import importlib
from typing import Any, Callable

from oairouter.exceptions import PluginError
from oairouter.models import Handler, RouteRegistrationRequest
from oairouter.plugins.base import RoutePlugin
from oairouter.routing import as_middleware


class HandlerPlugin(RoutePlugin):
    """Resolve ``x-oai-handler`` references into route handlers."""

    field = "x-oai-handler"
    order = 1000

    @property
    def name(self) -> str:
        return "handler"

    @property
    def description(self) -> str:
        return "Serve operations with the callable named by x-oai-handler"

    def _package(self) -> str | None:
        if isinstance(self.args, dict):
            return self.args.get("package")
        if isinstance(self.args, str):
            return self.args
        return None

    def resolve(self, reference: str) -> Callable[..., Any]:
        """Import the callable named by *reference*.

        Raises:
            PluginError: If the module or attribute cannot be found, or the
                attribute is not callable.
        """
        if not isinstance(reference, str) or not reference.strip():
            raise PluginError(f"Invalid x-oai-handler reference: {reference!r}")

        if ":" in reference:
            module_name, _, attr = reference.partition(":")
        elif "." in reference:
            module_name, _, attr = reference.rpartition(".")
        else:
            module_name, attr = self._package() or "", reference

        if not module_name:
            raise PluginError(
                f"x-oai-handler '{reference}' has no module and no package was configured"
            )

        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise PluginError(f"Cannot import handler module '{module_name}': {exc}") from exc

        target: Any = module
        for part in attr.split("."):
            try:
                target = getattr(target, part)
            except AttributeError:
                raise PluginError(
                    f"Handler '{attr}' not found in module '{module_name}'"
                ) from None

        if not callable(target):
            raise PluginError(f"Handler '{reference}' is not callable")
        return target

    async def middleware(self, request: RouteRegistrationRequest, field_value: Any) -> Handler:
        return as_middleware(self.resolve(field_value)).handler
