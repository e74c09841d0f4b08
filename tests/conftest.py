"""Test configuration for Webber."""

import tempfile
from pathlib import Path

import httpx
import pytest

from webber.core.config import Config
from webber.models.package import PackageRequest
from webber.storage import StagingArea

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x01" * 13


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_dir):
    """Configuration isolated from the environment, staging under temp_dir."""
    return Config(staging={"root": temp_dir / "click-build"})


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def sample_request():
    """A request whose icon URL points at a PNG."""
    return PackageRequest(
        url="https://Example.COM/path",
        name="Example",
        theme_color="#3366ff",
        icon_url="https://cdn.example.com/static/logo.png",
        url_patterns="https?://example.com/*",
    )


@pytest.fixture
def icon_transport(png_bytes):
    """Mock transport serving ``png_bytes`` for .png paths and 404 otherwise.

    Every request seen is appended to ``transport.requests``.
    """
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith(".png"):
            return httpx.Response(200, content=png_bytes, headers={"content-type": "image/png"})
        return httpx.Response(404)

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport


@pytest.fixture
def failing_transport():
    """Mock transport whose every request fails to connect."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)


@pytest.fixture
def staging(temp_dir):
    """Create a staging area for testing.

    Returns:
        StagingArea: A staging area rooted below the temporary directory.
            It is not reset; tests call ``reset()`` as needed.
    """
    return StagingArea(temp_dir / "stage")
