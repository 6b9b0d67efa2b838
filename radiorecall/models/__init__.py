"""radioRecall domain models — re-exports all public model classes.

The models are organized by concern:
    - metadata.py  — ParsedMetadata and ContentKind
    - records.py   — persisted records and fingerprint payloads
    - segment.py   — playlist, segments and download candidates
    - pipeline.py  — per-segment outcomes and cycle reports
"""

from __future__ import annotations

from radiorecall.models.metadata import ContentKind, ParsedMetadata
from radiorecall.models.pipeline import CycleReport, IngestOutcome
from radiorecall.models.records import (
    AudioFormat,
    AudioRecord,
    FingerprintMatch,
    MatchRecord,
    MetadataRecord,
    TrackInfo,
)
from radiorecall.models.segment import MediaPlaylist, Segment, SegmentDownloadInfo

__all__ = [
    "AudioFormat",
    "AudioRecord",
    "ContentKind",
    "CycleReport",
    "FingerprintMatch",
    "IngestOutcome",
    "MatchRecord",
    "MediaPlaylist",
    "MetadataRecord",
    "ParsedMetadata",
    "Segment",
    "SegmentDownloadInfo",
    "TrackInfo",
]
