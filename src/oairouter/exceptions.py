"""Exception hierarchy for oairouter.

All exceptions inherit from :class:`OAIRouterError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`oairouter.exit_codes`.
Construction errors are raised straight to the caller; errors raised during
the boot pipeline are caught by :class:`~oairouter.router.OAIRouter`, logged
and re-emitted as an ``error`` lifecycle signal.

Subclass hierarchy::

    OAIRouterError (exit 1)
    +-- ConfigError           (exit 2)
    +-- DocumentLoadError     (exit 7)
    +-- RouteDefinitionError  (exit 8)
    +-- PluginError           (exit 10)
"""

from oairouter.exit_codes import (
    EXIT_DOCUMENT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PLUGIN_ERROR,
    EXIT_ROUTE_ERROR,
)


class OAIRouterError(Exception):
    """Base exception for all oairouter errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(OAIRouterError):
    """Raised for invalid router construction arguments or options."""

    exit_code = EXIT_INVALID_USAGE


class DocumentLoadError(OAIRouterError):
    """Raised when an API document cannot be read, fetched or parsed."""

    exit_code = EXIT_DOCUMENT_ERROR


class RouteDefinitionError(OAIRouterError):
    """Raised when a path template or document title cannot become a route path."""

    exit_code = EXIT_ROUTE_ERROR


class PluginError(OAIRouterError):
    """Raised when a plugin fails to register or to build its middleware."""

    exit_code = EXIT_PLUGIN_ERROR
