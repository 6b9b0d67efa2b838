"""Playlist and segment models.

A ``MediaPlaylist`` is one decoded fetch of the stream manifest.  Its
``Segment`` entries live for a single poll cycle; the ones that survive
filtering and classification become ``SegmentDownloadInfo`` candidates for
the dedup engine.
"""

from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import urlsplit
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from radiorecall.models.metadata import ContentKind
from radiorecall.models.records import MetadataRecord, TrackInfo


class Segment(BaseModel):
    """One media segment as listed by the manifest."""

    model_config = ConfigDict(frozen=True)

    # Media sequence number; strictly increasing across fetches, gaps allowed.
    number: int = Field(ge=0)
    # EXTINF duration in seconds.
    duration: float = Field(default=0.0, ge=0.0)
    # Free text after the comma of the EXTINF tag, if any.
    title: str | None = None
    # Absolute URI (resolved against the manifest URL by the parser).
    uri: str


class MediaPlaylist(BaseModel):
    """A decoded HLS media playlist."""

    model_config = ConfigDict(frozen=True)

    target_duration: float = Field(ge=0.0)
    media_sequence: int = 0
    segments: list[Segment] = Field(default_factory=list)

    @property
    def poll_interval(self) -> float:
        """Seconds to wait before the next fetch: half the target duration."""
        return self.target_duration / 2


class SegmentDownloadInfo(BaseModel):
    """A classified segment queued for download and deduplication."""

    model_config = ConfigDict(frozen=True)

    number: int
    url: str
    artist: str
    title: str
    kind: ContentKind

    @property
    def url_filename(self) -> str:
        """Last path component of the segment URL, ``unknown`` when empty."""
        path = urlsplit(self.url).path
        return path.rsplit("/", 1)[-1] or "unknown"

    def label(self, now: datetime | None = None) -> str:
        """Human-readable correlation string sent to the fingerprint service.

        Never used as a storage key.
        """
        now = now or datetime.now(tz=timezone.utc)  # noqa: UP017
        return (
            f"{now:%Y-%m-%d_%H-%M-%S}_{self.kind}_{self.artist}_{self.title}"
            f".{self.url_filename}"
        )

    def to_track_info(self, audio_id: UUID) -> TrackInfo:
        return TrackInfo(id=audio_id, artist=self.artist, title=self.title)

    def to_metadata(self, audio_id: UUID, now: datetime | None = None) -> MetadataRecord:
        return MetadataRecord(
            id=audio_id,
            created_at=now or datetime.now(tz=timezone.utc),  # noqa: UP017
            kind=self.kind,
            artist=self.artist,
            title=self.title,
        )
