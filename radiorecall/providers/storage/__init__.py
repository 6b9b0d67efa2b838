"""SQLite persistence providers.

Three independent files, one table each:
    audio.sqlite3     — raw bytes of newly discovered audio
    metadata.sqlite3  — kind/artist/title per audio id
    matches.sqlite3   — append-only recognition log

There are no cross-store transactions: a metadata write that fails after
the audio write succeeded leaves an orphan audio row.
"""

from radiorecall.providers.storage.sqlite_audio_store import SQLiteAudioStore
from radiorecall.providers.storage.sqlite_match_store import SQLiteMatchStore
from radiorecall.providers.storage.sqlite_metadata_store import SQLiteMetadataStore

__all__ = ["SQLiteAudioStore", "SQLiteMatchStore", "SQLiteMetadataStore"]
