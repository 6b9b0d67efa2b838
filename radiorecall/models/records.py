"""Persisted record models and fingerprint service payloads.

``AudioRecord`` and ``MetadataRecord`` are written once per newly discovered
audio and never mutated.  ``MatchRecord`` rows form an append-only play
history: one row per recognition, never deduplicated.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from radiorecall.models.metadata import ContentKind


class AudioFormat(str, Enum):  # noqa: UP042  StrEnum requires Python 3.11+
    """Storage tag for the encoding of an audio blob."""

    AAC = "aac"
    MP3 = "mp3"
    MPEG_TS = "mpegts"
    MP4 = "mp4"
    UNKNOWN = "unknown"

    @classmethod
    def from_content_type(cls, content_type: str) -> AudioFormat:
        """Map an HTTP content type (parameters ignored) to a format tag."""
        mime = content_type.split(";", 1)[0].strip().lower()
        return _CONTENT_TYPE_FORMATS.get(mime, cls.UNKNOWN)


_CONTENT_TYPE_FORMATS = {
    "audio/aac": AudioFormat.AAC,
    "audio/aacp": AudioFormat.AAC,
    "audio/x-aac": AudioFormat.AAC,
    "audio/mpeg": AudioFormat.MP3,
    "audio/mp3": AudioFormat.MP3,
    "video/mp2t": AudioFormat.MPEG_TS,
    "audio/mp2t": AudioFormat.MPEG_TS,
    "audio/mp4": AudioFormat.MP4,
    "video/mp4": AudioFormat.MP4,
}


class AudioRecord(BaseModel):
    """Raw bytes of one newly discovered piece of audio."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    format: AudioFormat
    data: bytes


class MetadataRecord(BaseModel):
    """Descriptive metadata stored 1:1 with an ``AudioRecord``."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    created_at: datetime
    kind: ContentKind
    artist: str
    title: str


class MatchRecord(BaseModel):
    """One recognition of already-known audio."""

    model_config = ConfigDict(frozen=True)

    # References an AudioRecord id; not enforced.
    id: UUID
    matched_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )
    score: float


class TrackInfo(BaseModel):
    """Track description registered with the fingerprint service."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    artist: str
    title: str


class FingerprintMatch(BaseModel):
    """One entry of a fingerprint query result."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    artist: str | None = None
    title: str | None = None
    score: float = 0.0

    def to_match_record(self, now: datetime | None = None) -> MatchRecord:
        return MatchRecord(
            id=self.id,
            matched_at=now or datetime.now(tz=timezone.utc),  # noqa: UP017
            score=self.score,
        )
