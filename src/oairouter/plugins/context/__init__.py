"""Operation context plugin.

Exposes the matched OpenAPI operation on ``request.state`` so later
middleware and handlers can read it.

See Also:
    :class:`~oairouter.plugins.context.plugin.OperationContextPlugin`
"""

from oairouter.plugins.context.plugin import OperationContextPlugin

__all__ = ["OperationContextPlugin"]
