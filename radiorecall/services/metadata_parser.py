"""Decoder for the metadata blob embedded in segment titles.

The broadcaster puts a quoted title, a quoted artist and a ``url`` field of
backslash-escaped ``KEY=\\"VALUE\\"`` pairs into each ``#EXTINF`` line::

    title="Song",artist="Band",url="song_spot=\\"M\\" MediaBaseId=\\"123\\"
    itunesTrackId=\\"0\\" amgTrackId=\\"-1\\" amgArtistId=\\"0\\" TAID=\\"0\\"
    TPID=\\"456\\" cartcutId=\\"0\\" amgArtworkURL=\\"http://x/a.jpg\\"
    length=\\"00:03:41\\" unsID=\\"-1\\" spotInstanceId=\\"-1\\""

(one line in the manifest, optionally prefixed by ``offset=<n>,``).

Decoding is all-or-nothing: either the whole text matches and every
integer and the length parse, or :class:`MetadataParseError` is raised.
The two optional fields are simply left empty when their value is not a
URL / UUID.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from uuid import UUID

from pydantic import AnyUrl, TypeAdapter, ValidationError

from radiorecall.models.metadata import ParsedMetadata
from radiorecall.utils.errors import MetadataParseError

_METADATA_RE = re.compile(
    r'(?:offset=\d+,)?'
    r'title="(?P<title>.+?)",'
    r'artist="(?P<artist>.+?)",'
    r'url="song_spot=\\"(?P<song_spot>\w)\\" '
    r'MediaBaseId=\\"(?P<media_base_id>-?\d+)\\" '
    r'itunesTrackId=\\"(?P<itunes_track_id>-?\d+)\\" '
    r'amgTrackId=\\"(?P<amg_track_id>-?\d+)\\" '
    r'amgArtistId=\\"(?P<amg_artist_id>-?\d+)\\" '
    r'TAID=\\"(?P<ta_id>-?\d+)\\" '
    r'TPID=\\"(?P<tp_id>-?\d+)\\" '
    r'cartcutId=\\"(?P<cartcut_id>-?\d+)\\" '
    r'amgArtworkURL=\\"(?P<amg_artwork_url>.*?)\\" '
    r'length=\\"(?P<length>\d\d:\d\d:\d\d)\\" '
    r'unsID=\\"(?P<uns_id>-?\d+)\\" '
    r'spotInstanceId=\\"(?P<spot_instance_id>.+?)\\""',
    re.ASCII,
)

_INT_FIELDS = (
    "media_base_id",
    "itunes_track_id",
    "amg_track_id",
    "amg_artist_id",
    "ta_id",
    "tp_id",
    "cartcut_id",
    "uns_id",
)

_URL_ADAPTER = TypeAdapter(AnyUrl)


def parse_metadata(text: str | None) -> ParsedMetadata:
    """Decode a segment title into :class:`ParsedMetadata`.

    Raises
    ------
    MetadataParseError
        If *text* is missing, does not match the grammar, or the length is
        not a valid ``HH:MM:SS`` time.
    """
    if text is None:
        raise MetadataParseError("No title")

    match = _METADATA_RE.fullmatch(text)
    if match is None:
        raise MetadataParseError("Failed to match")

    fields = match.groupdict()
    return ParsedMetadata(
        title=fields["title"],
        artist=fields["artist"],
        song_spot=fields["song_spot"],
        amg_artwork_url=_parse_url(fields["amg_artwork_url"]),
        length=_parse_length(fields["length"]),
        spot_instance_id=_parse_uuid(fields["spot_instance_id"]),
        **{name: int(fields[name]) for name in _INT_FIELDS},
    )


def _parse_length(raw: str) -> timedelta:
    try:
        t = datetime.strptime(raw, "%H:%M:%S")
    except ValueError as exc:
        raise MetadataParseError(f"Failed to parse length {raw!r}") from exc
    return timedelta(hours=t.hour, minutes=t.minute, seconds=t.second)


def _parse_url(raw: str) -> str | None:
    try:
        _URL_ADAPTER.validate_python(raw)
    except ValidationError:
        return None
    return raw


def _parse_uuid(raw: str) -> UUID | None:
    try:
        return UUID(raw)
    except ValueError:
        return None
