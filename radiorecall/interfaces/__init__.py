"""Public interface definitions for the recorder's external collaborators.

The dedup engine talks to the fingerprint service and the three stores only
through these abstract base classes.  Concrete adapters live in
``radiorecall/providers/`` and are wired up in ``radiorecall/cli/record.py``;
tests inject in-memory fakes.

    Interface              →  Concrete implementation
    ─────────────────────────────────────────────────────
    IFingerprintProvider   →  EmySoundFingerprintProvider
    IAudioStore            →  SQLiteAudioStore
    IMetadataStore         →  SQLiteMetadataStore
    IMatchStore            →  SQLiteMatchStore
"""

from radiorecall.interfaces.audio_store import IAudioStore
from radiorecall.interfaces.fingerprint_provider import IFingerprintProvider
from radiorecall.interfaces.match_store import IMatchStore
from radiorecall.interfaces.metadata_store import IMetadataStore

__all__ = [
    "IAudioStore",
    "IFingerprintProvider",
    "IMatchStore",
    "IMetadataStore",
]
