"""SQLite-backed audio blob store.

Persists raw segment bytes to ``audio.sqlite3``, one row per newly
discovered piece of audio.  Uses ``aiosqlite`` for async I/O.  Rows are
never updated; a second insert under the same id is rejected.
"""

from __future__ import annotations

from pathlib import Path
from uuid import UUID

import aiosqlite
import structlog

from radiorecall.interfaces.audio_store import IAudioStore
from radiorecall.models.records import AudioFormat, AudioRecord
from radiorecall.utils.errors import DuplicateRecordError, RecordNotFoundError, StorageError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("audio.sqlite3")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS audio (
    id      TEXT PRIMARY KEY,
    format  TEXT NOT NULL,
    bytes   BLOB NOT NULL
);
"""

_INSERT_SQL = "INSERT INTO audio (id, format, bytes) VALUES (?, ?, ?);"

_SELECT_SQL = "SELECT id, format, bytes FROM audio WHERE id = ?;"


class SQLiteAudioStore(IAudioStore):
    """SQLite-backed audio persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the audio table if it doesn't exist."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                await db.commit()
        except (OSError, aiosqlite.Error) as exc:
            raise StorageError(
                message=f"Cannot open audio store at {self._db_path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("audio_db_initialized", path=str(self._db_path))

    async def insert(self, record: AudioRecord) -> None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(
                    _INSERT_SQL,
                    (str(record.id), record.format.value, record.data),
                )
                await db.commit()
        except aiosqlite.IntegrityError as exc:
            raise DuplicateRecordError(
                message=f"Audio {record.id} already stored",
                provider_name=self.get_provider_name(),
            ) from exc
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"Insert audio {record.id} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug("audio_inserted", id=str(record.id), size=len(record.data))

    async def get(self, audio_id: UUID) -> AudioRecord:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SELECT_SQL, (str(audio_id),))
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"Query audio {audio_id} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if row is None:
            raise RecordNotFoundError(
                message=f"No audio stored under {audio_id}",
                provider_name=self.get_provider_name(),
            )

        return AudioRecord(id=UUID(row[0]), format=AudioFormat(row[1]), data=bytes(row[2]))

    def get_provider_name(self) -> str:
        return "sqlite_audio"
