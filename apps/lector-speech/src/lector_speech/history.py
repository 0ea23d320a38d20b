"""SQLite-backed history of synthesis requests.

One row per request regardless of how many chunks it produced. The row
points at the first chunk's storage key and carries the total byte size.
"""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

import aiosqlite

from lector_common.logging import get_logger

from .errors import RecordError

log = get_logger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS audio_history (
    id TEXT PRIMARY KEY,
    caller_id TEXT,
    text_content TEXT NOT NULL,
    voice_id TEXT NOT NULL,
    voice_name TEXT NOT NULL,
    model_id TEXT NOT NULL,
    file_path TEXT NOT NULL,
    file_size INTEGER NOT NULL,
    chunk_count INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL
);
"""

_CREATE_INDEX = """
CREATE INDEX IF NOT EXISTS idx_audio_history_caller ON audio_history(caller_id, created_at);
"""

_COLUMNS = (
    "id, caller_id, text_content, voice_id, voice_name, model_id, "
    "file_path, file_size, chunk_count, created_at"
)


@dataclass(frozen=True)
class HistoryEntry:
    """Aggregated metadata for one request, before it is persisted."""

    caller_id: str | None
    text_content: str
    voice_id: str
    voice_name: str
    model_id: str
    file_path: str
    file_size: int
    chunk_count: int


@dataclass(frozen=True)
class HistoryRecord(HistoryEntry):
    id: str = ""
    created_at: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


def _row_to_record(row: tuple) -> HistoryRecord:
    rid, caller_id, text, voice_id, voice_name, model_id, path, size, count, created = row
    return HistoryRecord(
        id=rid,
        caller_id=caller_id,
        text_content=text,
        voice_id=voice_id,
        voice_name=voice_name,
        model_id=model_id,
        file_path=path,
        file_size=size,
        chunk_count=count,
        created_at=created,
    )


class HistoryStore:
    """Async SQLite store for audio history records."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("HistoryStore not initialized")
        return self._db

    async def init(self) -> None:
        """Open the database and create tables."""
        self._db = await aiosqlite.connect(self._db_path)
        await self._db.execute(_CREATE_TABLE)
        await self._db.execute(_CREATE_INDEX)
        await self._db.commit()
        log.info("history_store_ready", db_path=self._db_path)

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def record(self, entry: HistoryEntry) -> str:
        """Persist one history row and return its id. Raises RecordError on any failure."""
        record_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()
        try:
            await self.db.execute(
                f"INSERT INTO audio_history ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    record_id,
                    entry.caller_id,
                    entry.text_content,
                    entry.voice_id,
                    entry.voice_name,
                    entry.model_id,
                    entry.file_path,
                    entry.file_size,
                    entry.chunk_count,
                    now,
                ),
            )
            await self.db.commit()
        except (sqlite3.Error, RuntimeError, ValueError) as e:
            raise RecordError(f"Failed to save audio history: {e}") from e
        return record_id

    async def list_for_caller(self, caller_id: str | None, limit: int = 50) -> list[HistoryRecord]:
        """List a caller's records, newest first. ``None`` lists anonymous records."""
        if caller_id is None:
            cursor = await self.db.execute(
                f"SELECT {_COLUMNS} FROM audio_history WHERE caller_id IS NULL "
                "ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (limit,),
            )
        else:
            cursor = await self.db.execute(
                f"SELECT {_COLUMNS} FROM audio_history WHERE caller_id = ? "
                "ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (caller_id, limit),
            )
        rows = await cursor.fetchall()
        return [_row_to_record(r) for r in rows]

    async def get(self, record_id: str) -> HistoryRecord | None:
        cursor = await self.db.execute(
            f"SELECT {_COLUMNS} FROM audio_history WHERE id = ?", (record_id,)
        )
        row = await cursor.fetchone()
        return _row_to_record(row) if row else None

    async def delete(self, record_id: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
        cursor = await self.db.execute("DELETE FROM audio_history WHERE id = ?", (record_id,))
        await self.db.commit()
        return cursor.rowcount > 0
