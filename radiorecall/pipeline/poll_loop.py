"""Poll loop driving the recorder.

One cycle:
    1. GET the stream manifest (anything but 200 is fatal).
    2. Drop segments the watermark filter has already accepted.
    3. Decode and classify the rest; drop those without usable metadata.
    4. Hand the candidates to the dedup engine, strictly one at a time.
    5. Sleep half the manifest's target duration.

The loop runs until a fatal error propagates: :class:`ManifestError` from
the fetch, or anything unexpected.  Per-segment failures are contained by
the dedup engine.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import httpx
import structlog

from radiorecall.config.settings import MPEGURL_CONTENT_TYPE
from radiorecall.models.pipeline import CycleReport, IngestOutcome
from radiorecall.models.segment import MediaPlaylist, SegmentDownloadInfo
from radiorecall.services.classifier import build_download_info
from radiorecall.services.dedup_engine import DedupDecisionEngine
from radiorecall.services.manifest_parser import parse_media_playlist
from radiorecall.services.segment_filter import SegmentNumberFilter
from radiorecall.utils.errors import ManifestError

logger = structlog.get_logger(logger_name=__name__)


class PollLoop:
    """Fetches the manifest periodically and feeds new segments to the engine.

    The watermark filter is owned by the loop instance; pass one in to
    resume from a known sequence number.
    """

    def __init__(
        self,
        stream_url: str,
        http_client: httpx.AsyncClient,
        engine: DedupDecisionEngine,
        segment_filter: SegmentNumberFilter | None = None,
        manifest_content_type: str = MPEGURL_CONTENT_TYPE,
        fallback_poll_interval: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._stream_url = stream_url
        self._client = http_client
        self._engine = engine
        self._filter = segment_filter or SegmentNumberFilter()
        self._content_type = manifest_content_type
        self._fallback_interval = fallback_poll_interval
        self._sleep = sleep

    @property
    def segment_filter(self) -> SegmentNumberFilter:
        return self._filter

    async def run(self, max_cycles: int | None = None) -> None:
        """Poll forever, or for *max_cycles* cycles when given."""
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            report = await self.run_cycle()
            cycles += 1
            await self._sleep(report.poll_interval)

    async def run_cycle(self) -> CycleReport:
        """Run one fetch/filter/classify/ingest cycle and return its counters."""
        playlist = await self._fetch_manifest()
        if playlist is None:
            return CycleReport(poll_interval=self._fallback_interval)

        accepted = [s for s in playlist.segments if self._filter.need_download(s)]

        candidates: list[SegmentDownloadInfo] = []
        for segment in accepted:
            info = build_download_info(segment)
            if info is not None:
                candidates.append(info)

        outcomes = await self._engine.process_batch(candidates)

        report = CycleReport(
            listed=len(playlist.segments),
            accepted=len(accepted),
            candidates=len(candidates),
            inserted=outcomes[IngestOutcome.INSERTED],
            matched=outcomes[IngestOutcome.MATCHED],
            failed=outcomes[IngestOutcome.FAILED],
            poll_interval=playlist.poll_interval,
        )
        logger.info("poll_cycle_done", watermark=self._filter.watermark, **report.model_dump())
        return report

    async def _fetch_manifest(self) -> MediaPlaylist | None:
        logger.debug("manifest_fetch", url=self._stream_url)
        try:
            response = await self._client.get(self._stream_url)
        except httpx.HTTPError as exc:
            raise ManifestError(
                message=f"Failed to get playlist: {exc}",
                provider_name="http",
            ) from exc

        if response.status_code != httpx.codes.OK:
            body = response.text
            logger.error("manifest_fetch_failed", status=response.status_code, body=body)
            raise ManifestError(
                message=f"Failed to get playlist {body}",
                provider_name="http",
                status_code=response.status_code,
                body=body,
            )

        content_type = response.headers.get("content-type")
        if content_type != self._content_type:
            logger.warning(
                "manifest_unexpected_content_type",
                content_type=content_type,
                expected=self._content_type,
            )
            return None

        return parse_media_playlist(response.text, base_url=str(response.url))
