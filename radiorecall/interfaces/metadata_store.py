"""Abstract base class for audio metadata storage (1:1 with the audio store)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from radiorecall.models.records import MetadataRecord


class IMetadataStore(ABC):
    """Contract for persisting descriptive metadata keyed by audio id."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create the backing table if it does not exist.  Called at startup."""

    @abstractmethod
    async def insert(self, record: MetadataRecord) -> None:
        """Store *record*.

        Raises
        ------
        radiorecall.utils.errors.DuplicateRecordError
            If metadata for the same id is already stored.
        """

    @abstractmethod
    async def get(self, audio_id: UUID) -> MetadataRecord | None:
        """Return the metadata stored for *audio_id*, or ``None``."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""
