"""Content classification of stream segments.

Two stages:

1. :func:`classify` — a pure rule evaluation over :class:`ParsedMetadata`.
   Rules are checked in order (music, talk, advertisement); the first that
   holds wins, otherwise the kind is ``UNKNOWN``.  The three positive rules
   are mutually exclusive: talk needs spot ``T`` where the others need
   ``M``/``F``, and an advertisement has every id that could make it music
   pinned to ``0``/``-1`` with no artwork.
2. :func:`build_download_info` — turns a listed segment into a download
   candidate.  Segments whose title does not decode are dropped unless the
   title carries the ad-insertion marker.
"""

from __future__ import annotations

from datetime import timedelta
from urllib.parse import urlsplit

import structlog

from radiorecall.models.metadata import ContentKind, ParsedMetadata
from radiorecall.models.segment import Segment, SegmentDownloadInfo
from radiorecall.services.metadata_parser import parse_metadata
from radiorecall.utils.errors import MetadataParseError

logger = structlog.get_logger(logger_name=__name__)

# Server-side ad insertion writes titles like ``offset=0,adContext=''``.
AD_CONTEXT_MARKER = "adContext="
AD_PLACEHOLDER = "Advertisement"

MIN_MUSIC_LENGTH = timedelta(seconds=90)


def is_music(meta: ParsedMetadata) -> bool:
    return (
        meta.song_spot in ("M", "F")
        and meta.length > MIN_MUSIC_LENGTH
        and (
            meta.media_base_id > 0
            or meta.itunes_track_id > 0
            or (meta.amg_artist_id > 0 and meta.amg_track_id > 0)
            or meta.tp_id > 0
            or meta.amg_artwork_url is not None
        )
    )


def is_talk(meta: ParsedMetadata) -> bool:
    return (
        meta.song_spot == "T"
        and meta.media_base_id == 0
        and meta.itunes_track_id == 0
        and meta.amg_artist_id == 0
        and meta.amg_track_id == 0
        and meta.ta_id == 0
        and meta.tp_id == 0
        and meta.amg_artwork_url is None
        and meta.spot_instance_id is None
        and meta.length == timedelta(0)
    )


def is_advertisement(meta: ParsedMetadata) -> bool:
    return (
        meta.song_spot == "F"
        and meta.media_base_id == 0
        and meta.itunes_track_id == 0
        and meta.amg_artist_id == 0
        and meta.amg_track_id == -1
        and meta.ta_id == 0
        and meta.tp_id == 0
        and meta.cartcut_id == 0
        and meta.amg_artwork_url is None
        and meta.spot_instance_id is not None
    )


def classify(meta: ParsedMetadata) -> ContentKind:
    """Return the suggested content kind of a decoded segment."""
    if is_music(meta):
        return ContentKind.MUSIC
    if is_talk(meta):
        return ContentKind.TALK
    if is_advertisement(meta):
        return ContentKind.ADVERTISEMENT
    return ContentKind.UNKNOWN


def build_download_info(segment: Segment) -> SegmentDownloadInfo | None:
    """Classify *segment* and return its download candidate, or ``None`` to drop it."""
    try:
        scheme = urlsplit(segment.uri).scheme
    except ValueError:
        scheme = ""
    if scheme not in ("http", "https"):
        logger.error("segment_invalid_url", segment=segment.number, uri=segment.uri)
        return None

    try:
        meta = parse_metadata(segment.title)
    except MetadataParseError as exc:
        return _fallback_download_info(segment, exc)

    kind = classify(meta)
    logger.debug("segment_metadata", segment=segment.number, metadata=meta.model_dump())
    logger.info(
        "segment_download",
        segment=segment.number,
        kind=kind.value,
        artist=meta.artist,
        title=meta.title,
    )
    if kind is ContentKind.UNKNOWN:
        logger.info("segment_unknown_title", segment=segment.number, raw_title=segment.title)

    return SegmentDownloadInfo(
        number=segment.number,
        url=segment.uri,
        artist=meta.artist,
        title=meta.title,
        kind=kind,
    )


def _fallback_download_info(
    segment: Segment,
    exc: MetadataParseError,
) -> SegmentDownloadInfo | None:
    if segment.title is None:
        # Normal at session start and when the station switches programmes.
        logger.info("segment_skipped_no_info", segment=segment.number, reason=str(exc))
        return None

    if AD_CONTEXT_MARKER in segment.title:
        logger.info("segment_download_ad_insertion", segment=segment.number, raw_title=segment.title)
        return SegmentDownloadInfo(
            number=segment.number,
            url=segment.uri,
            artist=AD_PLACEHOLDER,
            title=AD_PLACEHOLDER,
            kind=ContentKind.ADVERTISEMENT,
        )

    logger.debug("segment_skipped_unparsed_title", segment=segment.number, raw_title=segment.title)
    return None
