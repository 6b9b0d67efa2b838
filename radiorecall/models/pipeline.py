"""Per-segment outcomes and per-cycle summaries of the poll loop."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class IngestOutcome(str, Enum):  # noqa: UP042  StrEnum requires Python 3.11+
    """What the dedup engine did with one candidate segment."""

    INSERTED = "INSERTED"  # Unknown to the fingerprint service; stored as new audio
    MATCHED = "MATCHED"    # Recognised; match rows appended
    FAILED = "FAILED"      # Skipped after a per-segment error


class CycleReport(BaseModel):
    """Counters for one poll cycle, logged at the end of the cycle."""

    model_config = ConfigDict(frozen=True)

    listed: int = 0
    accepted: int = 0
    candidates: int = 0
    inserted: int = 0
    matched: int = 0
    failed: int = 0
    poll_interval: float = 0.0
