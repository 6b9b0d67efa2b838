"""SQLite-backed metadata store, keyed 1:1 with the audio store."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from uuid import UUID

import aiosqlite
import structlog

from radiorecall.interfaces.metadata_store import IMetadataStore
from radiorecall.models.metadata import ContentKind
from radiorecall.models.records import MetadataRecord
from radiorecall.utils.errors import DuplicateRecordError, StorageError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("metadata.sqlite3")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS metadata (
    id          TEXT PRIMARY KEY,
    created_at  TEXT NOT NULL,
    kind        TEXT NOT NULL,
    artist      TEXT NOT NULL,
    title       TEXT NOT NULL
);
"""

_INSERT_SQL = """\
INSERT INTO metadata (id, created_at, kind, artist, title)
VALUES (?, ?, ?, ?, ?);
"""

_SELECT_SQL = "SELECT id, created_at, kind, artist, title FROM metadata WHERE id = ?;"


class SQLiteMetadataStore(IMetadataStore):
    """SQLite-backed metadata persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the metadata table if it doesn't exist."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                await db.commit()
        except (OSError, aiosqlite.Error) as exc:
            raise StorageError(
                message=f"Cannot open metadata store at {self._db_path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("metadata_db_initialized", path=str(self._db_path))

    async def insert(self, record: MetadataRecord) -> None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(
                    _INSERT_SQL,
                    (
                        str(record.id),
                        record.created_at.isoformat(),
                        record.kind.value,
                        record.artist,
                        record.title,
                    ),
                )
                await db.commit()
        except aiosqlite.IntegrityError as exc:
            raise DuplicateRecordError(
                message=f"Metadata {record.id} already stored",
                provider_name=self.get_provider_name(),
            ) from exc
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"Insert metadata {record.id} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def get(self, audio_id: UUID) -> MetadataRecord | None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_SELECT_SQL, (str(audio_id),))
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"Query metadata {audio_id} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if row is None:
            return None

        return MetadataRecord(
            id=UUID(row["id"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            kind=ContentKind(row["kind"]),
            artist=row["artist"],
            title=row["title"],
        )

    def get_provider_name(self) -> str:
        return "sqlite_metadata"
