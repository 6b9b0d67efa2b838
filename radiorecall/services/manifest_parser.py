"""Minimal HLS media-playlist decoder.

Decodes only what the poll loop consumes: the target duration, the media
sequence number of the first segment, and per segment its ``#EXTINF``
duration, free-text title and URI.  Other tags are ignored.
"""

from __future__ import annotations

from urllib.parse import urljoin

from radiorecall.models.segment import MediaPlaylist, Segment
from radiorecall.utils.errors import ManifestError

_HEADER = "#EXTM3U"
_TARGET_DURATION = "#EXT-X-TARGETDURATION:"
_MEDIA_SEQUENCE = "#EXT-X-MEDIA-SEQUENCE:"
_EXTINF = "#EXTINF:"


def parse_media_playlist(text: str, base_url: str = "") -> MediaPlaylist:
    """Decode *text* into a :class:`MediaPlaylist`.

    Segment numbers start at ``#EXT-X-MEDIA-SEQUENCE`` (default 0) and
    increase by one per segment.  Relative URIs are resolved against
    *base_url*.

    Raises
    ------
    ManifestError
        If the header or the target duration is missing, or a numeric tag
        does not parse.
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines or lines[0] != _HEADER:
        raise ManifestError("Playlist does not start with #EXTM3U", body=text[:200])

    target_duration: float | None = None
    media_sequence = 0
    pending: tuple[float, str | None] | None = None
    entries: list[tuple[float, str | None, str]] = []

    try:
        for line in lines[1:]:
            if line.startswith(_TARGET_DURATION):
                target_duration = float(line[len(_TARGET_DURATION):])
            elif line.startswith(_MEDIA_SEQUENCE):
                media_sequence = int(line[len(_MEDIA_SEQUENCE):])
            elif line.startswith(_EXTINF):
                duration, _, title = line[len(_EXTINF):].partition(",")
                pending = (float(duration), title or None)
            elif line.startswith("#"):
                continue
            elif pending is not None:
                entries.append((pending[0], pending[1], _resolve(base_url, line)))
                pending = None
    except ValueError as exc:
        raise ManifestError(f"Malformed playlist tag: {exc}", body=text[:200]) from exc

    if target_duration is None:
        raise ManifestError("Playlist has no #EXT-X-TARGETDURATION", body=text[:200])

    segments = [
        Segment(number=media_sequence + index, duration=duration, title=title, uri=uri)
        for index, (duration, title, uri) in enumerate(entries)
    ]
    return MediaPlaylist(
        target_duration=target_duration,
        media_sequence=media_sequence,
        segments=segments,
    )


def _resolve(base_url: str, uri: str) -> str:
    """Resolve *uri* against *base_url*; an unparsable URI is kept as listed."""
    try:
        return urljoin(base_url, uri)
    except ValueError:
        # The classifier drops segments whose URI is not http(s).
        return uri
