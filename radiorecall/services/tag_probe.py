"""Best-effort extraction of tags embedded in downloaded audio.

HLS audio segments often carry ID3 frames (stream timestamps, station
PRIV frames, sometimes title/artist).  They are logged for observability
only and never feed the data model.
"""

from __future__ import annotations

import io

import mutagen
import structlog

logger = structlog.get_logger(logger_name=__name__)

_MAX_VALUE_LENGTH = 120


def probe_tags(data: bytes, filename: str = "segment.aac") -> dict[str, str]:
    """Return the tags mutagen can read from *data*; empty when none or unreadable.

    *filename* only serves as a format hint for mutagen's type scoring.
    """
    buffer = io.BytesIO(data)
    buffer.name = filename
    try:
        audio = mutagen.File(buffer)
    except Exception as exc:
        # mutagen raises a variety of parser errors on truncated segments;
        # the probe is observability only.
        logger.debug("tag_probe_failed", error=str(exc), error_type=type(exc).__name__)
        return {}

    if audio is None or audio.tags is None:
        return {}

    tags: dict[str, str] = {}
    for key, value in audio.tags.items():
        tags[str(key)] = str(value)[:_MAX_VALUE_LENGTH]
    return tags


def log_tags(data: bytes, filename: str = "segment.aac") -> None:
    for key, value in probe_tags(data, filename).items():
        logger.info("segment_tag", key=key, value=value)
