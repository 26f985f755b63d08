"""Inline internal ``$ref`` pointers of an API document.

Handlers and plugins receive operation objects with every
``{"$ref": "#/..."}`` replaced by its target, so they never have to walk
back to the document root. Only internal references are supported;
anything else raises :class:`~oairouter.exceptions.DocumentLoadError`.
A reference that points back into its own resolution stack is left as the
original ``$ref`` dict at the cycle point.
"""

from __future__ import annotations

import copy
from typing import Any

from oairouter.exceptions import DocumentLoadError


def resolve_refs(document: dict[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *document* with internal ``$ref`` pointers inlined.

    Raises:
        DocumentLoadError: On external references or pointers to missing
            locations.
    """
    root = copy.deepcopy(document)
    return _inline(root, root, frozenset())


def lookup_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Follow a ``#/a/b/0`` JSON pointer (RFC 6901 escaping) inside *root*."""
    if not ref.startswith("#/"):
        raise DocumentLoadError(f"Only internal $ref pointers are supported: {ref}")

    node: Any = root
    for token in ref[2:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise DocumentLoadError(f"Cannot resolve $ref '{ref}': '{token}' not found")
    return node


def _inline(node: Any, root: dict[str, Any], stack: frozenset[str]) -> Any:
    if isinstance(node, list):
        return [_inline(item, root, stack) for item in node]
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if isinstance(ref, str):
        if ref in stack:
            return node
        return _inline(lookup_pointer(ref, root), root, stack | {ref})
    return {key: _inline(value, root, stack) for key, value in node.items()}
