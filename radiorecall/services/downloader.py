"""Segment downloader.

Fetches one segment over a shared ``httpx.AsyncClient`` and returns its
content type with the raw bytes.  No retries: a failed segment is skipped
by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog

from radiorecall.utils.errors import DownloadError

logger = structlog.get_logger(logger_name=__name__)


@dataclass(frozen=True)
class DownloadedAudio:
    """Body of a successful segment download."""

    content_type: str
    data: bytes


class SegmentDownloader:
    """Thin wrapper over ``httpx.AsyncClient.get`` with recorder error semantics."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._client = http_client

    async def fetch(self, url: str) -> DownloadedAudio:
        """Download *url*.

        Raises
        ------
        DownloadError
            On a non-success status, a transport failure, or a response
            without a ``Content-Type`` header.
        """
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DownloadError(
                message=f"HTTP {exc.response.status_code} fetching {url}",
                provider_name="http",
            ) from exc
        except httpx.HTTPError as exc:
            raise DownloadError(
                message=f"HTTP error fetching {url}: {exc}",
                provider_name="http",
            ) from exc

        content_type = response.headers.get("content-type")
        if not content_type:
            raise DownloadError(
                message=f"Failed to get content type for {url}",
                provider_name="http",
            )

        data = response.content
        logger.debug("segment_downloaded", url=url, size=len(data), content_type=content_type)
        return DownloadedAudio(content_type=content_type, data=data)
