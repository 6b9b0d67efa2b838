"""Abstract base class for the append-only recognition log."""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from radiorecall.models.records import MatchRecord


class IMatchStore(ABC):
    """Contract for the match log.

    Rows are never updated or deduplicated: each recognition of the same
    audio is a separate row, so the log doubles as a play history.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create the backing table if it does not exist.  Called at startup."""

    @abstractmethod
    async def append(self, record: MatchRecord) -> None:
        """Append *record*.  ``record.id`` need not exist in the audio store."""

    @abstractmethod
    async def get_matches(self, audio_id: UUID) -> list[MatchRecord]:
        """Return every recognition of *audio_id*, oldest first."""

    @abstractmethod
    async def count(self) -> int:
        """Return the total number of rows in the log."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""
