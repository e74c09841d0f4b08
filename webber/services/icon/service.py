"""
Icon Service.

Decides where the package icon comes from and stages it into the data tree.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

import httpx

from ...core.config import NetworkConfig, get_config
from ...core.exceptions import IconFetchError, StagingError
from ...core.logging import get_logger
from ...models.package import IconSource
from ...storage.staging import DATA_DIR, StagingArea

logger = get_logger(__name__)

BUNDLED_ICON_PATH = Path(__file__).resolve().parents[2] / "assets" / "icon.svg"
BUNDLED_ICON = IconSource(kind="bundled", extension="svg")


def resolve_icon_source(icon_url: str) -> IconSource:
    """Choose between downloading the icon and using the bundled one.

    The icon is downloaded when ``icon_url`` parses as an absolute URL with a
    host and a ``/``-rooted path whose last segment carries a ``.<ext>``
    suffix; the suffix becomes the staged file extension unchanged. Anything
    else, including URLs without path segments such as ``mailto:`` or
    ``C:\\icons\\logo.png``, selects the bundled SVG.
    Never raises.

    Args:
        icon_url: Icon location from the package request.

    Returns:
        IconSource tagged ``remote`` or ``bundled``.
    """
    try:
        parts = urlsplit(icon_url)
    except ValueError:
        return BUNDLED_ICON

    # Only hierarchical URLs have path segments to take an extension from.
    if not parts.scheme or not parts.netloc or not parts.path.startswith("/"):
        return BUNDLED_ICON

    last_segment = parts.path.rsplit("/", 1)[-1]
    _, dot, extension = last_segment.rpartition(".")
    if not dot or not extension:
        return BUNDLED_ICON

    return IconSource(kind="remote", extension=extension, url=icon_url)


def bundled_icon_bytes() -> bytes:
    """Read the default SVG shipped with the package."""
    try:
        return BUNDLED_ICON_PATH.read_bytes()
    except OSError as e:
        raise StagingError(
            message=f"Bundled icon unavailable: {e.strerror or e}",
            operation="read_bundled_icon",
            path=str(BUNDLED_ICON_PATH),
            cause=e,
        )


class IconService:
    """Service for acquiring the package icon.

    A remote icon that fails to download is fatal: there is no retry and
    no fallback to the bundled icon once a download URL was chosen.
    """

    def __init__(
        self,
        config: NetworkConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the icon service.

        Args:
            config: Network configuration. Uses global config if not provided.
            transport: Optional httpx transport, used by tests to stub the network.
        """
        self.config = config or get_config().network
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.icon_timeout_seconds,
            follow_redirects=self.config.follow_redirects,
            headers={"User-Agent": self.config.user_agent},
            transport=self._transport,
        )

    async def fetch(self, url: str) -> bytes:
        """Download icon bytes.

        Args:
            url: Absolute icon URL.

        Returns:
            Response body, unvalidated.

        Raises:
            IconFetchError: On connection failure or a non-success status.
        """
        logger.info("Downloading icon", url=url)
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.content
        except httpx.HTTPStatusError as e:
            raise IconFetchError(
                message=f"Icon download failed with status {e.response.status_code}",
                operation="fetch",
                url=url,
                status_code=e.response.status_code,
                cause=e,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise IconFetchError(
                message=f"Icon download failed: {e}",
                operation="fetch",
                url=url,
                cause=e,
            )

        logger.info("Icon downloaded", url=url, size_bytes=len(data))
        return data

    async def stage_icon(self, source: IconSource, staging: StagingArea) -> str:
        """Write the icon into the staging data tree.

        Args:
            source: Result of :func:`resolve_icon_source`.
            staging: Staging area of the current build.

        Returns:
            The staged icon file name, for the desktop entry.
        """
        if source.kind == "remote" and source.url:
            data = await self.fetch(source.url)
        else:
            logger.info("Using bundled icon")
            data = bundled_icon_bytes()

        await staging.write_bytes(Path(DATA_DIR) / source.filename, data)
        return source.filename
