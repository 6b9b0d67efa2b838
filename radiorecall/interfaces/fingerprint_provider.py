"""Abstract base class for acoustic fingerprinting service providers.

The fingerprint service is the authority on whether a piece of audio has
been heard before.  Implementations wrap a remote recognition API (e.g.
EmySound); tests inject an in-memory fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from radiorecall.models.records import FingerprintMatch, TrackInfo


class IFingerprintProvider(ABC):
    """Contract for fingerprint query and registration."""

    @abstractmethod
    async def query(self, label: str, data: bytes) -> list[FingerprintMatch]:
        """Look up *data* against all registered tracks.

        Parameters
        ----------
        label:
            Correlation string (used as the uploaded file name); carries no
            semantics for the lookup.
        data:
            Raw audio bytes of one segment.

        Returns
        -------
        list[FingerprintMatch]
            Every registered track the audio matches.  Empty when the audio
            is unseen.

        Raises
        ------
        radiorecall.utils.errors.FingerprintError
            If the service is unreachable or rejects the request.
        """

    @abstractmethod
    async def insert(self, track: TrackInfo, label: str, data: bytes) -> None:
        """Register *data* under ``track.id`` so future queries match it.

        Raises
        ------
        radiorecall.utils.errors.FingerprintError
            If the service is unreachable or rejects the track.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
