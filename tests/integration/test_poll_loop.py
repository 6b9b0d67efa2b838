"""Integration tests for the poll loop.

A single ``httpx.MockTransport`` plays the radio station (manifest plus
segment downloads).  The SQLite stores run on ``tmp_path``; the fingerprint
service is the byte-equality fake from ``conftest``.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from radiorecall.config.settings import MPEGURL_CONTENT_TYPE
from radiorecall.models.metadata import ContentKind
from radiorecall.models.records import AudioFormat
from radiorecall.pipeline.poll_loop import PollLoop
from radiorecall.providers.storage import SQLiteAudioStore, SQLiteMatchStore, SQLiteMetadataStore
from radiorecall.services.dedup_engine import DedupDecisionEngine
from radiorecall.services.downloader import SegmentDownloader
from radiorecall.utils.errors import ManifestError
from tests.conftest import AD_TITLE, MUSIC_TITLE, STREAM_URL, FakeFingerprintProvider


class FakeStation:
    """Serves a mutable media playlist and the segment bodies it lists."""

    def __init__(self) -> None:
        self.media_sequence = 5
        self.entries: list[tuple[str, str]] = []  # (title, filename)
        self.bodies: dict[str, bytes] = {}
        self.manifest_status = 200
        self.manifest_content_type = MPEGURL_CONTENT_TYPE
        self.segment_requests: list[str] = []

    def add(self, title: str, filename: str, body: bytes) -> None:
        self.entries.append((title, filename))
        self.bodies[filename] = body

    def playlist(self) -> str:
        lines = [
            "#EXTM3U",
            "#EXT-X-VERSION:3",
            "#EXT-X-TARGETDURATION:10",
            f"#EXT-X-MEDIA-SEQUENCE:{self.media_sequence}",
        ]
        for title, filename in self.entries:
            lines.append(f"#EXTINF:10.0,{title}")
            lines.append(filename)
        return "\n".join(lines) + "\n"

    def handler(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == STREAM_URL:
            if self.manifest_status != 200:
                return httpx.Response(self.manifest_status, content=b"upstream down")
            return httpx.Response(
                200,
                content=self.playlist().encode(),
                headers={"content-type": self.manifest_content_type},
            )
        filename = request.url.path.rsplit("/", 1)[-1]
        self.segment_requests.append(filename)
        if filename not in self.bodies:
            return httpx.Response(404, content=b"gone")
        return httpx.Response(200, content=self.bodies[filename], headers={"content-type": "audio/aac"})


class Harness:
    def __init__(self, tmp_path: Path) -> None:
        self.station = FakeStation()
        self.fingerprint = FakeFingerprintProvider()
        self.audio_store = SQLiteAudioStore(tmp_path / "audio.sqlite3")
        self.metadata_store = SQLiteMetadataStore(tmp_path / "metadata.sqlite3")
        self.match_store = SQLiteMatchStore(tmp_path / "matches.sqlite3")
        self.client = httpx.AsyncClient(transport=httpx.MockTransport(self.station.handler))
        self.sleeps: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            self.sleeps.append(seconds)

        self.loop = PollLoop(
            stream_url=STREAM_URL,
            http_client=self.client,
            engine=DedupDecisionEngine(
                downloader=SegmentDownloader(self.client),
                fingerprint=self.fingerprint,
                audio_store=self.audio_store,
                metadata_store=self.metadata_store,
                match_store=self.match_store,
            ),
            fallback_poll_interval=2.5,
            sleep=fake_sleep,
        )

    async def initialize(self) -> None:
        for store in (self.audio_store, self.metadata_store, self.match_store):
            await store.initialize()


@pytest_asyncio.fixture
async def harness(tmp_path):
    h = Harness(tmp_path)
    await h.initialize()
    yield h
    await h.client.aclose()


class TestPollLoop:
    @pytest.mark.asyncio
    async def test_new_then_repeat_then_unusable(self, harness):
        station = harness.station
        station.add(MUSIC_TITLE, "seg5.aac", b"blue-monday-bytes")

        # Cycle 1: unseen audio is stored.
        report = await harness.loop.run_cycle()
        assert (report.listed, report.accepted, report.inserted) == (1, 1, 1)
        assert len(harness.fingerprint.inserts) == 1
        stored_id = harness.fingerprint.inserts[0][0].id

        audio = await harness.audio_store.get(stored_id)
        assert audio.format is AudioFormat.AAC
        assert audio.data == b"blue-monday-bytes"
        meta = await harness.metadata_store.get(stored_id)
        assert meta.kind is ContentKind.MUSIC
        assert (meta.artist, meta.title) == ("New Order", "Blue Monday")

        # Cycle 2: #5 is re-listed and skipped; #6 repeats #5's audio.
        station.add(MUSIC_TITLE, "seg6.aac", b"blue-monday-bytes")
        report = await harness.loop.run_cycle()
        assert (report.listed, report.accepted, report.matched, report.inserted) == (2, 1, 1, 0)
        assert station.segment_requests == ["seg5.aac", "seg6.aac"]
        history = await harness.match_store.get_matches(stored_id)
        assert len(history) == 1
        assert history[0].score == pytest.approx(1.0)
        assert len(harness.fingerprint.inserts) == 1

        # Cycle 3: #7 has an undecodable title and no ad marker.
        station.add("some free text", "seg7.aac", b"other")
        report = await harness.loop.run_cycle()
        assert (report.accepted, report.candidates) == (1, 0)
        assert "seg7.aac" not in station.segment_requests
        assert harness.loop.segment_filter.watermark == 7

        # Cycle 4: a later playlist whose window no longer starts at 5.
        station.entries = station.entries[1:]
        station.media_sequence = 6
        report = await harness.loop.run_cycle()
        assert report.accepted == 0
        assert await harness.match_store.count() == 1

    @pytest.mark.asyncio
    async def test_ad_insertion_and_classified_ad_are_recorded(self, harness):
        harness.station.add("offset=0,adContext=''", "seg5.aac", b"ad-a")
        harness.station.add(AD_TITLE, "seg6.aac", b"ad-b")

        report = await harness.loop.run_cycle()

        assert report.inserted == 2
        tracks = [track for track, _label in harness.fingerprint.inserts]
        assert [(t.artist, t.title) for t in tracks] == [
            ("Advertisement", "Advertisement"),
            ("Sponsor", "Spot"),
        ]
        for track in tracks:
            meta = await harness.metadata_store.get(track.id)
            assert meta.kind is ContentKind.ADVERTISEMENT

    @pytest.mark.asyncio
    async def test_failed_download_does_not_stop_cycle(self, harness):
        harness.station.add(MUSIC_TITLE, "seg5.aac", b"a")
        harness.station.add(MUSIC_TITLE, "seg6.aac", b"b")
        del harness.station.bodies["seg5.aac"]

        report = await harness.loop.run_cycle()

        assert (report.failed, report.inserted) == (1, 1)
        # The failed number is consumed for good.
        assert harness.loop.segment_filter.watermark == 6

    @pytest.mark.asyncio
    async def test_sleeps_half_the_target_duration(self, harness):
        harness.station.add(MUSIC_TITLE, "seg5.aac", b"a")
        await harness.loop.run(max_cycles=2)
        assert harness.sleeps == [5.0, 5.0]

    @pytest.mark.asyncio
    async def test_non_success_manifest_is_fatal(self, harness):
        harness.station.manifest_status = 503
        with pytest.raises(ManifestError) as exc_info:
            await harness.loop.run(max_cycles=3)
        assert exc_info.value.status_code == 503
        assert exc_info.value.body == "upstream down"
        assert harness.sleeps == []

    @pytest.mark.asyncio
    async def test_unexpected_content_type_skips_cycle(self, harness):
        harness.station.add(MUSIC_TITLE, "seg5.aac", b"a")
        harness.station.manifest_content_type = "text/plain"

        report = await harness.loop.run_cycle()

        assert report.listed == 0
        assert report.poll_interval == 2.5
        assert harness.station.segment_requests == []
        assert harness.loop.segment_filter.watermark == 0

    @pytest.mark.asyncio
    async def test_unparsable_segment_uri_skips_only_that_segment(self, harness):
        harness.station.add(MUSIC_TITLE, "seg5.aac", b"a")
        harness.station.add(MUSIC_TITLE, "http://[bad/seg6.aac", b"b")

        report = await harness.loop.run_cycle()

        assert (report.listed, report.candidates, report.inserted) == (2, 1, 1)
        assert harness.station.segment_requests == ["seg5.aac"]
        assert harness.loop.segment_filter.watermark == 6
