"""Numeric process exit codes used by the ``oairouter`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~oairouter.exceptions.OAIRouterError` subclass, so
shell wrappers can tell a bad document from a broken plugin without parsing
stderr.
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The router was configured with invalid arguments or options."""

EXIT_DOCUMENT_ERROR = 7
"""The API document could not be loaded or parsed."""

EXIT_ROUTE_ERROR = 8
"""A path template could not be turned into a route."""

EXIT_PLUGIN_ERROR = 10
"""A plugin failed to register or to produce its middleware."""
