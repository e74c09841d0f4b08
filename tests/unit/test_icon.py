"""Unit tests for the icon service."""

import httpx
import pytest

from webber.core.config import NetworkConfig
from webber.core.exceptions import IconFetchError
from webber.services.icon import BUNDLED_ICON, IconService, bundled_icon_bytes, resolve_icon_source


class TestResolveIconSource:
    """Tests for the remote/bundled decision."""

    def test_png_url_is_remote(self):
        source = resolve_icon_source("https://cdn.example.com/static/logo.png")
        assert source.kind == "remote"
        assert source.extension == "png"
        assert source.filename == "icon.png"
        assert source.url == "https://cdn.example.com/static/logo.png"

    def test_extension_is_taken_verbatim(self):
        assert resolve_icon_source("https://example.com/favicon.ICO").filename == "icon.ICO"
        assert resolve_icon_source("https://example.com/a.b/icon.tar.webp").extension == "webp"

    def test_query_string_is_ignored(self):
        source = resolve_icon_source("https://example.com/logo.svg?v=2#frag")
        assert source.extension == "svg"

    @pytest.mark.parametrize(
        "icon_url",
        [
            "https://example.com/icon",
            "https://example.com/",
            "https://example.com",
            "https://example.com/static.d/icon",
            "https://example.com/icon.",
            "not a url",
            "logo.png",
            "",
            "http://[::1/icon.png",
            "C:\\icons\\logo.png",
            "mailto:someone@example.png",
            "urn:isbn:logo.png",
            "data:image/png,x.png",
        ],
    )
    def test_fallback_to_bundled(self, icon_url):
        source = resolve_icon_source(icon_url)
        assert source == BUNDLED_ICON
        assert source.is_fallback
        assert source.filename == "icon.svg"


@pytest.mark.asyncio
class TestIconService:
    """Tests for staging icons."""

    async def test_stage_remote_icon(self, staging, icon_transport, png_bytes):
        await staging.reset()
        service = IconService(NetworkConfig(), transport=icon_transport)

        source = resolve_icon_source("https://cdn.example.com/logo.png")
        filename = await service.stage_icon(source, staging)

        assert filename == "icon.png"
        assert (staging.data_dir / "icon.png").read_bytes() == png_bytes
        assert len(icon_transport.requests) == 1
        assert str(icon_transport.requests[0].url) == "https://cdn.example.com/logo.png"

    async def test_stage_bundled_icon(self, staging, icon_transport):
        await staging.reset()
        service = IconService(NetworkConfig(), transport=icon_transport)

        filename = await service.stage_icon(resolve_icon_source("https://example.com/icon"), staging)

        assert filename == "icon.svg"
        data = (staging.data_dir / "icon.svg").read_bytes()
        assert data == bundled_icon_bytes()
        assert b"<svg" in data
        assert icon_transport.requests == []

    async def test_http_error_status_is_fatal(self, staging, icon_transport):
        await staging.reset()
        service = IconService(NetworkConfig(), transport=icon_transport)
        source = resolve_icon_source("https://cdn.example.com/missing.jpg")

        with pytest.raises(IconFetchError) as exc_info:
            await service.stage_icon(source, staging)

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == "https://cdn.example.com/missing.jpg"
        assert exc_info.value.service_name == "icon"
        assert not (staging.data_dir / "icon.jpg").exists()
        assert not (staging.data_dir / "icon.svg").exists()

    async def test_connection_error_is_fatal(self, staging, failing_transport):
        await staging.reset()
        service = IconService(NetworkConfig(), transport=failing_transport)

        with pytest.raises(IconFetchError) as exc_info:
            await service.fetch("https://cdn.example.com/logo.png")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    async def test_redirect_is_followed(self, staging, png_bytes):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old.png":
                return httpx.Response(301, headers={"location": "https://cdn.example.com/new.png"})
            return httpx.Response(200, content=png_bytes)

        service = IconService(NetworkConfig(), transport=httpx.MockTransport(handler))
        assert await service.fetch("https://cdn.example.com/old.png") == png_bytes
