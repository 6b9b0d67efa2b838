"""Segment metadata models.

``ParsedMetadata`` is the typed form of the key/value blob a broadcaster
embeds in each HLS segment title.  ``ContentKind`` is what the classifier
derives from it (see ``radiorecall/services/classifier.py``).
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ContentKind(str, Enum):  # noqa: UP042  StrEnum requires Python 3.11+
    """Probable content of a segment, as suggested by its metadata."""

    UNKNOWN = "unknown"
    TALK = "talk"
    ADVERTISEMENT = "advertisement"
    MUSIC = "music"

    def __str__(self) -> str:
        return self.value


class ParsedMetadata(BaseModel):
    """Structured record decoded from one segment title.

    Only ever produced when the whole title text matches the metadata
    grammar; optional fields are ``None`` when their raw value does not
    parse (``amgArtworkURL="null"``, ``spotInstanceId="-1"``).
    """

    model_config = ConfigDict(frozen=True)

    title: str
    artist: str
    # Single character: M (music), F (fill/ad), T (talk), ...
    song_spot: str = Field(min_length=1, max_length=1)
    media_base_id: int = 0
    itunes_track_id: int = 0
    amg_track_id: int = 0
    amg_artist_id: int = 0
    ta_id: int = 0
    tp_id: int = 0
    cartcut_id: int = 0
    amg_artwork_url: str | None = None
    length: timedelta = timedelta(0)
    uns_id: int = 0
    spot_instance_id: UUID | None = None
