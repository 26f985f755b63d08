"""Handler plugin -- bind operations to Python callables.

Implements the ``x-oai-handler`` operation field, whose value names the
callable that serves the operation (``"package.module:function"``).

See Also:
    :class:`~oairouter.plugins.handler.plugin.HandlerPlugin`
"""

from oairouter.plugins.handler.plugin import HandlerPlugin

__all__ = ["HandlerPlugin"]
