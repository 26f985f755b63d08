"""Static content served by the API explorer.

:class:`ExplorerAssets` is the provider contract: four attributes holding
the HTML index page, the Swagger UI stylesheet and its two JavaScript
bundles. :class:`SwaggerUIAssets` is the default provider; it reads the
stylesheet and bundles from the ``swagger-ui-bundle`` distribution and the
index page from this package's ``templates/index.html``. Each file is read
on first access and cached.
"""

from __future__ import annotations

from functools import cached_property
from importlib import resources
from pathlib import Path
from typing import Protocol, Union

from swagger_ui_bundle import swagger_ui_path

AssetContent = Union[str, bytes]


class ExplorerAssets(Protocol):
    index: AssetContent
    ui_css: AssetContent
    bundle_js: AssetContent
    preset_js: AssetContent


class SwaggerUIAssets:
    """Default asset provider backed by the ``swagger-ui-bundle`` package.

    Args:
        ui_dir: Directory holding ``swagger-ui.css``,
            ``swagger-ui-bundle.js`` and ``swagger-ui-standalone-preset.js``.
            Defaults to the directory shipped by ``swagger-ui-bundle``.
    """

    def __init__(self, ui_dir: Union[str, Path, None] = None) -> None:
        self.ui_dir = Path(ui_dir) if ui_dir is not None else Path(swagger_ui_path)

    def _read(self, filename: str) -> str:
        return (self.ui_dir / filename).read_text(encoding="utf-8")

    @cached_property
    def index(self) -> str:
        return (
            resources.files("oairouter.explorer")
            .joinpath("templates").joinpath("index.html")
            .read_text(encoding="utf-8")
        )

    @cached_property
    def ui_css(self) -> str:
        return self._read("swagger-ui.css")

    @cached_property
    def bundle_js(self) -> str:
        return self._read("swagger-ui-bundle.js")

    @cached_property
    def preset_js(self) -> str:
        return self._read("swagger-ui-standalone-preset.js")


class StaticAssets:
    """In-memory provider, handy for tests and for hosts bundling their own UI."""

    def __init__(
        self,
        index: AssetContent = "",
        ui_css: AssetContent = "",
        bundle_js: AssetContent = "",
        preset_js: AssetContent = "",
    ) -> None:
        self.index = index
        self.ui_css = ui_css
        self.bundle_js = bundle_js
        self.preset_js = preset_js
