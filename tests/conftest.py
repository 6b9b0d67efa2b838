"""Shared pytest fixtures for the radioRecall test suite.

In-memory fakes implement the provider interfaces so the dedup engine and
the poll loop can run without a network or SQLite files.
"""

from __future__ import annotations

from collections.abc import Callable
from uuid import UUID

import pytest

from radiorecall.interfaces.audio_store import IAudioStore
from radiorecall.interfaces.fingerprint_provider import IFingerprintProvider
from radiorecall.interfaces.match_store import IMatchStore
from radiorecall.interfaces.metadata_store import IMetadataStore
from radiorecall.models.records import (
    AudioRecord,
    FingerprintMatch,
    MatchRecord,
    MetadataRecord,
    TrackInfo,
)
from radiorecall.services.downloader import DownloadedAudio
from radiorecall.utils.errors import DuplicateRecordError, RecordNotFoundError

STREAM_URL = "http://radio.test/live/stream.m3u8"


# ---------------------------------------------------------------------------
# Segment title builder
# ---------------------------------------------------------------------------


def build_title(
    title: str = "Blue Monday",
    artist: str = "New Order",
    song_spot: str = "M",
    media_base_id: int = 0,
    itunes_track_id: int = 0,
    amg_track_id: int = 0,
    amg_artist_id: int = 0,
    ta_id: int = 0,
    tp_id: int = 0,
    cartcut_id: int = 0,
    artwork: str = "null",
    length: str = "00:00:00",
    uns_id: int = -1,
    instance: str = "-1",
    offset: int | None = None,
) -> str:
    """Render an EXTINF title in the broadcaster's metadata format."""
    prefix = f"offset={offset}," if offset is not None else ""
    return (
        f'{prefix}title="{title}",artist="{artist}",'
        f'url="song_spot=\\"{song_spot}\\" '
        f'MediaBaseId=\\"{media_base_id}\\" '
        f'itunesTrackId=\\"{itunes_track_id}\\" '
        f'amgTrackId=\\"{amg_track_id}\\" '
        f'amgArtistId=\\"{amg_artist_id}\\" '
        f'TAID=\\"{ta_id}\\" '
        f'TPID=\\"{tp_id}\\" '
        f'cartcutId=\\"{cartcut_id}\\" '
        f'amgArtworkURL=\\"{artwork}\\" '
        f'length=\\"{length}\\" '
        f'unsID=\\"{uns_id}\\" '
        f'spotInstanceId=\\"{instance}\\""'
    )


MUSIC_TITLE = build_title(song_spot="M", media_base_id=1234567, tp_id=42, length="00:03:41")
TALK_TITLE = build_title(title="Morning Show", artist="Studio", song_spot="T")
AD_TITLE = build_title(
    title="Spot",
    artist="Sponsor",
    song_spot="F",
    amg_track_id=-1,
    length="00:00:30",
    instance="688d6785-f34c-35a8-3255-1a9dd167fbd2",
)


@pytest.fixture
def make_title() -> Callable[..., str]:
    return build_title


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeFingerprintProvider(IFingerprintProvider):
    """Matches audio by byte equality; scripted results take precedence."""

    def __init__(self, scripted: list[list[FingerprintMatch]] | None = None) -> None:
        self.scripted = list(scripted or [])
        self.tracks: list[tuple[TrackInfo, bytes]] = []
        self.queries: list[str] = []
        self.inserts: list[tuple[TrackInfo, str]] = []
        self.query_error: Exception | None = None
        self.insert_error: Exception | None = None

    async def query(self, label: str, data: bytes) -> list[FingerprintMatch]:
        self.queries.append(label)
        if self.query_error is not None:
            raise self.query_error
        if self.scripted:
            return self.scripted.pop(0)
        return [
            FingerprintMatch(id=track.id, artist=track.artist, title=track.title, score=1.0)
            for track, stored in self.tracks
            if stored == data
        ]

    async def insert(self, track: TrackInfo, label: str, data: bytes) -> None:
        if self.insert_error is not None:
            raise self.insert_error
        self.inserts.append((track, label))
        self.tracks.append((track, data))

    def get_provider_name(self) -> str:
        return "fake_fingerprint"


class InMemoryAudioStore(IAudioStore):
    def __init__(self) -> None:
        self.records: dict[UUID, AudioRecord] = {}
        self.insert_error: Exception | None = None

    async def initialize(self) -> None:
        return None

    async def insert(self, record: AudioRecord) -> None:
        if self.insert_error is not None:
            raise self.insert_error
        if record.id in self.records:
            raise DuplicateRecordError(f"Audio {record.id} already stored")
        self.records[record.id] = record

    async def get(self, audio_id: UUID) -> AudioRecord:
        try:
            return self.records[audio_id]
        except KeyError:
            raise RecordNotFoundError(f"No audio stored under {audio_id}") from None

    def get_provider_name(self) -> str:
        return "memory_audio"


class InMemoryMetadataStore(IMetadataStore):
    def __init__(self) -> None:
        self.records: dict[UUID, MetadataRecord] = {}
        self.insert_error: Exception | None = None

    async def initialize(self) -> None:
        return None

    async def insert(self, record: MetadataRecord) -> None:
        if self.insert_error is not None:
            raise self.insert_error
        if record.id in self.records:
            raise DuplicateRecordError(f"Metadata {record.id} already stored")
        self.records[record.id] = record

    async def get(self, audio_id: UUID) -> MetadataRecord | None:
        return self.records.get(audio_id)

    def get_provider_name(self) -> str:
        return "memory_metadata"


class InMemoryMatchStore(IMatchStore):
    def __init__(self) -> None:
        self.rows: list[MatchRecord] = []
        self.append_error: Exception | None = None

    async def initialize(self) -> None:
        return None

    async def append(self, record: MatchRecord) -> None:
        if self.append_error is not None:
            raise self.append_error
        self.rows.append(record)

    async def get_matches(self, audio_id: UUID) -> list[MatchRecord]:
        return [r for r in self.rows if r.id == audio_id]

    async def count(self) -> int:
        return len(self.rows)

    def get_provider_name(self) -> str:
        return "memory_matches"


class FakeDownloader:
    """Serves canned bodies by URL; unknown URLs raise the configured error."""

    def __init__(self, bodies: dict[str, DownloadedAudio] | None = None) -> None:
        self.bodies = dict(bodies or {})
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []

    async def fetch(self, url: str) -> DownloadedAudio:
        self.calls.append(url)
        if url in self.errors:
            raise self.errors[url]
        return self.bodies[url]


@pytest.fixture
def fingerprint() -> FakeFingerprintProvider:
    return FakeFingerprintProvider()


@pytest.fixture
def audio_store() -> InMemoryAudioStore:
    return InMemoryAudioStore()


@pytest.fixture
def metadata_store() -> InMemoryMetadataStore:
    return InMemoryMetadataStore()


@pytest.fixture
def match_store() -> InMemoryMatchStore:
    return InMemoryMatchStore()


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader()
