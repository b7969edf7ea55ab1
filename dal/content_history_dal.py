"""Async Data Access Layer for the CONTENT_HISTORY table.

Provides ContentHistoryDAL with async CRUD operations compatible with
`utils.database_init.AsyncDatabaseInitializer`.
"""

from __future__ import annotations

import json
from typing import List, Optional, Sequence

from models.content_records import ContentHistoryRecord
from utils.database_init import AsyncDatabaseInitializer
from utils.timestamps import utc_now_iso


class ContentHistoryDAL:
    """Data access layer for generated post history.

    The constructor accepts an `AsyncDatabaseInitializer` (or any object
    exposing an async `connection()` context manager that yields an
    `aiosqlite.Connection`).
    """

    _COLUMNS = (
        "id",
        "user_id",
        "content",
        "platform",
        "hashtags",
        "engagement_prediction",
        "tone",
        "generated_at",
    )
    _COLUMN_LIST, _INSERT_COLUMNS = ", ".join(_COLUMNS), ", ".join(_COLUMNS[1:])

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def create(self, record: ContentHistoryRecord) -> ContentHistoryRecord:
        """Insert a history row and return it with `id` and `generated_at` filled in."""
        generated_at = record.generated_at or utc_now_iso()

        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"INSERT INTO CONTENT_HISTORY ({self._INSERT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    record.user_id,
                    record.content,
                    record.platform,
                    json.dumps(list(record.hashtags)),
                    record.engagement_prediction,
                    record.tone,
                    generated_at,
                ),
            )
            await conn.commit()
            record.id = cur.lastrowid
        record.generated_at = generated_at
        return record

    async def list_for_user(self, user_id: int) -> List[ContentHistoryRecord]:
        """Return a user's history, newest first."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM CONTENT_HISTORY WHERE user_id = ? ORDER BY id DESC",
                (user_id,),
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def delete(self, history_id: int, user_id: int) -> bool:
        """Delete a user's history row by id. Returns True if a row was deleted."""
        async with self._db.connection() as conn:
            await conn.execute(
                "DELETE FROM CONTENT_HISTORY WHERE id = ? AND user_id = ?", (history_id, user_id)
            )
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
            return bool(changed and changed[0] > 0)

    @staticmethod
    def _row_to_record(row: Sequence[object]) -> ContentHistoryRecord:
        return ContentHistoryRecord(
            id=row[0],
            user_id=row[1],
            content=row[2],
            platform=row[3],
            hashtags=json.loads(row[4] or "[]"),
            engagement_prediction=row[5],
            tone=row[6],
            generated_at=row[7],
        )
