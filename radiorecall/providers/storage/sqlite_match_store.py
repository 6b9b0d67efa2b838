"""SQLite-backed match log.

Every fingerprint recognition is appended as its own row; the table has no
uniqueness constraint on the audio id, so repeated plays of the same track
accumulate into a play history.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from uuid import UUID

import aiosqlite
import structlog

from radiorecall.interfaces.match_store import IMatchStore
from radiorecall.models.records import MatchRecord
from radiorecall.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("matches.sqlite3")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS matches (
    row_id      INTEGER PRIMARY KEY AUTOINCREMENT,
    id          TEXT NOT NULL,
    matched_at  TEXT NOT NULL,
    score       REAL NOT NULL
);
"""

_CREATE_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_matches_id ON matches(id);"

_INSERT_SQL = "INSERT INTO matches (id, matched_at, score) VALUES (?, ?, ?);"

_SELECT_BY_ID_SQL = """\
SELECT id, matched_at, score FROM matches
WHERE id = ?
ORDER BY row_id ASC;
"""


class SQLiteMatchStore(IMatchStore):
    """SQLite-backed append-only recognition log."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the matches table and its id index if they don't exist."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                await db.execute(_CREATE_INDEX_SQL)
                await db.commit()
        except (OSError, aiosqlite.Error) as exc:
            raise StorageError(
                message=f"Cannot open match store at {self._db_path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("matches_db_initialized", path=str(self._db_path))

    async def append(self, record: MatchRecord) -> None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(
                    _INSERT_SQL,
                    (str(record.id), record.matched_at.isoformat(), record.score),
                )
                await db.commit()
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"Append match {record.id} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def get_matches(self, audio_id: UUID) -> list[MatchRecord]:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SELECT_BY_ID_SQL, (str(audio_id),))
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"Query matches {audio_id} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        return [
            MatchRecord(id=UUID(r[0]), matched_at=datetime.fromisoformat(r[1]), score=r[2])
            for r in rows
        ]

    async def count(self) -> int:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute("SELECT COUNT(*) FROM matches;")
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"Count matches failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return int(row[0]) if row else 0

    def get_provider_name(self) -> str:
        return "sqlite_matches"
