"""Abstract base class for raw audio blob storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from radiorecall.models.records import AudioRecord


class IAudioStore(ABC):
    """Contract for persisting audio bytes keyed by id.

    Records are immutable once written.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create the backing table if it does not exist.  Called at startup."""

    @abstractmethod
    async def insert(self, record: AudioRecord) -> None:
        """Store *record*.

        Raises
        ------
        radiorecall.utils.errors.DuplicateRecordError
            If a record with the same id is already stored.
        """

    @abstractmethod
    async def get(self, audio_id: UUID) -> AudioRecord:
        """Return the record stored under *audio_id*.

        Raises
        ------
        radiorecall.utils.errors.RecordNotFoundError
            If nothing is stored under *audio_id*.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""
