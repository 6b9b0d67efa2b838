"""Per-segment dedup decision: download, ask the fingerprint service, persist.

The fingerprint service is the authority on whether audio is already
known.  For each candidate segment:

    download ──► probe tags (log only) ──► query fingerprints
                                             │
                     ┌───────── no matches ──┴── matches ─────────┐
                     ▼                                            ▼
        new id; register with service;             one MatchRecord per match
        store AudioRecord + MetadataRecord         (no new audio is stored)

Every per-segment failure is logged and reported as ``FAILED``; nothing
raised here ever reaches the poll loop.  Side effects that already
happened are not rolled back (the three stores and the fingerprint
service are independent).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from uuid import UUID, uuid4

import structlog

from radiorecall.interfaces.audio_store import IAudioStore
from radiorecall.interfaces.fingerprint_provider import IFingerprintProvider
from radiorecall.interfaces.match_store import IMatchStore
from radiorecall.interfaces.metadata_store import IMetadataStore
from radiorecall.models.pipeline import IngestOutcome
from radiorecall.models.records import AudioFormat, AudioRecord, FingerprintMatch
from radiorecall.models.segment import SegmentDownloadInfo
from radiorecall.services.downloader import DownloadedAudio, SegmentDownloader
from radiorecall.services.tag_probe import log_tags
from radiorecall.utils.errors import DownloadError, FingerprintError, StorageError

logger = structlog.get_logger(logger_name=__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)  # noqa: UP017


class DedupDecisionEngine:
    """Runs the download → fingerprint → persist workflow for one segment at a time."""

    def __init__(
        self,
        downloader: SegmentDownloader,
        fingerprint: IFingerprintProvider,
        audio_store: IAudioStore,
        metadata_store: IMetadataStore,
        match_store: IMatchStore,
        id_factory: Callable[[], UUID] = uuid4,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._downloader = downloader
        self._fingerprint = fingerprint
        self._audio_store = audio_store
        self._metadata_store = metadata_store
        self._match_store = match_store
        self._id_factory = id_factory
        self._clock = clock

    async def process_batch(self, infos: Iterable[SegmentDownloadInfo]) -> Counter[IngestOutcome]:
        """Process *infos* one after another in ascending segment order."""
        outcomes: Counter[IngestOutcome] = Counter()
        for info in sorted(infos, key=lambda i: i.number):
            outcomes[await self.process(info)] += 1
        return outcomes

    async def process(self, info: SegmentDownloadInfo) -> IngestOutcome:
        with structlog.contextvars.bound_contextvars(segment=info.number):
            try:
                return await self._process(info)
            except Exception as exc:
                logger.error(
                    "segment_processing_failed",
                    url=info.url,
                    error=str(exc),
                    error_type=type(exc).__name__,
                    exc_info=True,
                )
                return IngestOutcome.FAILED

    async def _process(self, info: SegmentDownloadInfo) -> IngestOutcome:
        try:
            audio = await self._downloader.fetch(info.url)
        except DownloadError as exc:
            logger.error("segment_download_failed", url=info.url, error=str(exc))
            return IngestOutcome.FAILED

        log_tags(audio.data, info.url_filename)

        label = info.label(self._clock())
        try:
            matches = await self._fingerprint.query(label, audio.data)
        except FingerprintError as exc:
            logger.error("fingerprint_query_failed", label=label, error=str(exc))
            return IngestOutcome.FAILED

        if not matches:
            return await self._insert_new(info, audio, label)
        return await self._log_matches(info, matches)

    async def _insert_new(
        self,
        info: SegmentDownloadInfo,
        audio: DownloadedAudio,
        label: str,
    ) -> IngestOutcome:
        audio_id = self._id_factory()
        logger.info(
            "audio_insert_new",
            id=str(audio_id),
            kind=info.kind.value,
            artist=info.artist,
            title=info.title,
        )

        try:
            await self._fingerprint.insert(info.to_track_info(audio_id), label, audio.data)
        except FingerprintError as exc:
            logger.error("fingerprint_insert_failed", id=str(audio_id), error=str(exc))
            return IngestOutcome.FAILED

        try:
            await self._audio_store.insert(
                AudioRecord(
                    id=audio_id,
                    format=AudioFormat.from_content_type(audio.content_type),
                    data=audio.data,
                )
            )
        except StorageError as exc:
            logger.error("audio_insert_failed", id=str(audio_id), error=str(exc))
            return IngestOutcome.FAILED

        try:
            await self._metadata_store.insert(info.to_metadata(audio_id, self._clock()))
        except StorageError as exc:
            # The audio row stays behind without metadata.
            logger.error("metadata_insert_failed", id=str(audio_id), error=str(exc))
            return IngestOutcome.FAILED

        return IngestOutcome.INSERTED

    async def _log_matches(
        self,
        info: SegmentDownloadInfo,
        matches: list[FingerprintMatch],
    ) -> IngestOutcome:
        outcome = IngestOutcome.MATCHED
        for match in matches:
            logger.info(
                "audio_matched",
                artist=info.artist,
                title=info.title,
                matched_id=str(match.id),
                matched_artist=match.artist or "",
                matched_title=match.title or "",
                score=match.score,
            )
            await self._log_known_metadata(match.id)

            try:
                await self._match_store.append(match.to_match_record(self._clock()))
            except StorageError as exc:
                logger.error("match_append_failed", matched_id=str(match.id), error=str(exc))
                outcome = IngestOutcome.FAILED
        return outcome

    async def _log_known_metadata(self, audio_id: UUID) -> None:
        """Diagnostic lookup of the matched audio's local metadata; absence is fine."""
        try:
            known = await self._metadata_store.get(audio_id)
        except StorageError as exc:
            logger.debug("metadata_lookup_failed", matched_id=str(audio_id), error=str(exc))
            return
        if known is None:
            logger.info("matched_audio_not_stored_locally", matched_id=str(audio_id))
        else:
            logger.info(
                "matched_audio_known",
                matched_id=str(audio_id),
                kind=known.kind.value,
                artist=known.artist,
                title=known.title,
                created_at=known.created_at.isoformat(),
            )
