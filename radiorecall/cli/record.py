"""Record a live HLS radio stream into the local dedup stores.

Usage::

    python -m radiorecall.cli https://example.com/live/stream.m3u8

Takes exactly one positional argument, the stream playlist URL.  Every
other knob comes from the environment / ``.env`` (see
``radiorecall/config/settings.py``).  The process runs until killed or
until a fatal error (playlist fetch failure, unusable store), in which
case it exits with status 1.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import httpx

from radiorecall.config.settings import Settings
from radiorecall.pipeline.poll_loop import PollLoop
from radiorecall.providers.fingerprint.emysound_provider import EmySoundFingerprintProvider
from radiorecall.providers.storage import SQLiteAudioStore, SQLiteMatchStore, SQLiteMetadataStore
from radiorecall.services.dedup_engine import DedupDecisionEngine
from radiorecall.services.downloader import SegmentDownloader
from radiorecall.utils.errors import ConfigurationError, ManifestError, RadioRecallError
from radiorecall.utils.logging import configure_logging, get_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="radiorecall",
        description="Record a live radio stream, keeping only audio not heard before.",
    )
    parser.add_argument("stream_url", help="Stream URL (m3u8 playlist)")
    return parser


def validate_stream_url(raw: str) -> str:
    """Return *raw* if it is an absolute http(s) URL, else raise ConfigurationError."""
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"Invalid stream URL {raw!r}: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Stream URL must be an absolute http(s) URL, got {raw!r}")
    return str(url)


async def record(stream_url: str, app_settings: Settings) -> None:
    """Wire the providers together and poll *stream_url* until a fatal error."""
    audio_store = SQLiteAudioStore(app_settings.audio_db_path)
    metadata_store = SQLiteMetadataStore(app_settings.metadata_db_path)
    match_store = SQLiteMatchStore(app_settings.matches_db_path)
    for store in (metadata_store, audio_store, match_store):
        await store.initialize()

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(app_settings.http_timeout),
        follow_redirects=True,
    ) as client:
        fingerprint = EmySoundFingerprintProvider(
            base_url=app_settings.emysound_base_url,
            username=app_settings.emysound_username,
            password=app_settings.emysound_password,
            min_coverage=app_settings.emysound_min_coverage,
            http_client=client,
        )
        engine = DedupDecisionEngine(
            downloader=SegmentDownloader(client),
            fingerprint=fingerprint,
            audio_store=audio_store,
            metadata_store=metadata_store,
            match_store=match_store,
        )
        loop = PollLoop(
            stream_url=stream_url,
            http_client=client,
            engine=engine,
            manifest_content_type=app_settings.manifest_content_type,
            fallback_poll_interval=app_settings.fallback_poll_interval,
        )
        await loop.run()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    args = _build_parser().parse_args(argv)
    app_settings = Settings()
    configure_logging(app_settings.log_level, json_output=app_settings.app_env == "production")
    logger = get_logger(__name__)

    try:
        stream_url = validate_stream_url(args.stream_url)
        logger.info("recorder_starting", stream_url=stream_url)
        asyncio.run(record(stream_url, app_settings))
    except ManifestError as exc:
        logger.error("recorder_stopped", error=str(exc), status=exc.status_code)
        return 1
    except RadioRecallError as exc:
        logger.error("recorder_stopped", error=str(exc))
        return 1
    except KeyboardInterrupt:
        logger.info("recorder_interrupted")
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
