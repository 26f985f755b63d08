"""Shared test fixtures for oairouter.

Provides API document fixtures, a stub loader, in-memory explorer assets
and resets of the global output and logging state. These fixtures are
discovered by pytest and available to all test modules without imports.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import pytest

from oairouter.explorer.assets import StaticAssets
from oairouter.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the ``oairouter`` logger.

    The CLI installs an OutputManager and a RichHandler bound to the
    streams of the CliRunner invocation; both go stale once the test ends.
    The handler also stops propagation, which would hide records from
    ``caplog`` in later tests.
    """
    yield
    reset_output()
    package_logger = logging.getLogger("oairouter")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


def make_document(title: str, paths: dict[str, Any], base_path: str = "") -> dict[str, Any]:
    return {
        "swagger": "2.0",
        "info": {"title": title, "version": "1.0.0"},
        "basePath": base_path,
        "paths": paths,
    }


@pytest.fixture
def items_doc() -> dict[str, Any]:
    """A normalized document with one collection and one item path."""
    return make_document(
        "Items",
        {
            "/items": {
                "get": {"operationId": "listItems"},
                "post": {"operationId": "createItem"},
            },
            "/items/{id}": {
                "parameters": [{"name": "id", "in": "path"}],
                "get": {"operationId": "getItem"},
            },
        },
        base_path="/v1",
    )


@pytest.fixture
def stub_loader():
    """Build a loader coroutine that returns a deep copy of *result*.

    The returned loader records its calls in ``loader.calls``.
    """

    def factory(result: Any):  # noqa: ANN202
        async def loader(source: Any, logger: logging.Logger) -> Any:
            loader.calls.append(source)
            if isinstance(result, BaseException):
                raise result
            return copy.deepcopy(result)

        loader.calls = []
        return loader

    return factory


@pytest.fixture
def assets() -> StaticAssets:
    """In-memory explorer assets."""
    return StaticAssets(
        index="<html>explorer</html>",
        ui_css="body{}",
        bundle_js="var bundle;",
        preset_js="var preset;",
    )


@pytest.fixture
def document_factory():
    """Return :func:`make_document` for tests that build several documents."""
    return make_document
