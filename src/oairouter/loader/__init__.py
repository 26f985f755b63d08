"""API document loading -- read, resolve ``$ref`` pointers, normalize.

Typical usage::

    from oairouter.loader import load_api_doc

    api = await load_api_doc("./api/petstore.yaml")
    apis = await load_api_doc("./api/")  # one document per file

Sub-modules:

* :mod:`~oairouter.loader.source` -- I/O (mapping, file, directory, URL)
  and JSON/YAML detection.
* :mod:`~oairouter.loader.resolver` -- internal ``$ref`` inlining.
* :mod:`~oairouter.loader.normalize` -- ``info.title``, ``basePath`` and
  ``paths`` defaults.
"""

from oairouter.loader.normalize import normalize_document
from oairouter.loader.resolver import resolve_refs
from oairouter.loader.source import load_api_doc, parse_content

__all__ = ["load_api_doc", "parse_content", "normalize_document", "resolve_refs"]
