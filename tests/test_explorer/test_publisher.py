"""Tests for oairouter.explorer -- asset providers and route publication."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from oairouter.exceptions import RouteDefinitionError
from oairouter.explorer.assets import StaticAssets, SwaggerUIAssets
from oairouter.explorer.publisher import (
    CONFIG_PATH,
    EXPLORER_PATH,
    document_path,
    explorer_config,
    register_api_explorer,
)
from oairouter.models import RouterOptions
from oairouter.routing import Router


def client_for(router: Router) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=router.routes()), base_url="http://testserver"
    )


# ---------------------------------------------------------------------------
# explorer_config / document_path
# ---------------------------------------------------------------------------


class TestExplorerConfig:
    def test_lists_documents_in_order(self, document_factory) -> None:
        api = [document_factory("Pets", {}), document_factory("Stores", {})]
        config = explorer_config(api)
        assert config["urls"] == [
            {"name": "Pets", "url": "/Pets.json"},
            {"name": "Stores", "url": "/Stores.json"},
        ]

    def test_prefix_applied_to_urls(self, document_factory) -> None:
        config = explorer_config([document_factory("Pets", {})], "/api/")
        assert config["urls"] == [{"name": "Pets", "url": "/api/Pets.json"}]

    def test_display_flags(self) -> None:
        config = explorer_config([])
        assert config["urls"] == []
        assert config["displayOperationId"] is True
        assert config["displayRequestDuration"] is True
        assert config["showExtensions"] is True
        assert config["defaultModelsExpandDepth"] == 0

    def test_document_path(self, document_factory) -> None:
        assert document_path(document_factory("Petstore", {})) == "/Petstore.json"

    @pytest.mark.parametrize("title", ["Pets/v2", "Pets {beta}", "{id}"])
    def test_document_path_rejects_unsafe_titles(self, document_factory, title: str) -> None:
        with pytest.raises(RouteDefinitionError, match="cannot be published"):
            document_path(document_factory(title, {}))


# ---------------------------------------------------------------------------
# register_api_explorer
# ---------------------------------------------------------------------------


class TestRegisterApiExplorer:
    def test_registers_expected_routes(self, document_factory, assets) -> None:
        router = Router()
        register_api_explorer(router, [document_factory("Pets", {})], assets)

        paths = [path for method, path, _ in router.registered_routes() if method == "GET"]
        assert paths == [
            EXPLORER_PATH,
            "/swagger-ui.css",
            "/swagger-ui-bundle.js",
            "/swagger-ui-standalone-preset.js",
            "/Pets.json",
            CONFIG_PATH,
        ]

    def test_unsafe_title_mounts_nothing(self, document_factory, assets) -> None:
        router = Router()
        api = [document_factory("Pets", {}), document_factory("Pets/{v2}", {})]
        with pytest.raises(RouteDefinitionError):
            register_api_explorer(router, api, assets)
        assert router.registered_routes() == []

    @pytest.mark.asyncio
    async def test_serves_assets_with_media_types(self, document_factory, assets) -> None:
        router = Router(RouterOptions(prefix="/docs"))
        register_api_explorer(router, [document_factory("Pets", {})], assets)

        async with client_for(router) as client:
            index = await client.get("/docs/api-explorer")
            css = await client.get("/docs/swagger-ui.css")
            bundle = await client.get("/docs/swagger-ui-bundle.js")
            config = await client.get("/docs/api-explorer-config.json")

        assert index.headers["content-type"].startswith("text/html")
        assert css.text == "body{}"
        assert css.headers["content-type"].startswith("text/css")
        assert bundle.text == "var bundle;"
        assert bundle.headers["content-type"].startswith("application/javascript")
        assert config.json()["urls"] == [{"name": "Pets", "url": "/docs/Pets.json"}]

    @pytest.mark.asyncio
    async def test_bytes_assets_are_served(self, document_factory) -> None:
        router = Router()
        register_api_explorer(
            router,
            [],
            StaticAssets(index=b"<html></html>", ui_css=b"", bundle_js=b"", preset_js=b""),
        )
        async with client_for(router) as client:
            response = await client.get("/api-explorer")
        assert response.content == b"<html></html>"


# ---------------------------------------------------------------------------
# SwaggerUIAssets
# ---------------------------------------------------------------------------


class TestSwaggerUIAssets:
    def test_reads_from_ui_dir(self, tmp_path: Path) -> None:
        (tmp_path / "swagger-ui.css").write_text("css", encoding="utf-8")
        (tmp_path / "swagger-ui-bundle.js").write_text("bundle", encoding="utf-8")
        (tmp_path / "swagger-ui-standalone-preset.js").write_text("preset", encoding="utf-8")

        assets = SwaggerUIAssets(tmp_path)

        assert assets.ui_css == "css"
        assert assets.bundle_js == "bundle"
        assert assets.preset_js == "preset"

    def test_content_is_cached(self, tmp_path: Path) -> None:
        css = tmp_path / "swagger-ui.css"
        css.write_text("first", encoding="utf-8")
        assets = SwaggerUIAssets(tmp_path)

        assert assets.ui_css == "first"
        css.write_text("second", encoding="utf-8")
        assert assets.ui_css == "first"

    def test_index_template_points_at_config(self) -> None:
        index = SwaggerUIAssets().index
        assert "./api-explorer-config.json" in index
        assert "./swagger-ui-bundle.js" in index

    def test_default_dir_ships_bundles(self) -> None:
        assets = SwaggerUIAssets()
        assert (assets.ui_dir / "swagger-ui-bundle.js").is_file()
