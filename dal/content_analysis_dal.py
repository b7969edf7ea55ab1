"""Async DAL for the CONTENT_ANALYSIS table."""

from __future__ import annotations

import json
from typing import List, Sequence


from models.content_records import ContentAnalysisRecord
from utils.database_init import AsyncDatabaseInitializer
from utils.timestamps import utc_now_iso


class ContentAnalysisDAL:
    """Store and list sentiment/engagement analyses per user."""

    _COLUMNS = (
        "id",
        "user_id",
        "content",
        "sentiment_label",
        "sentiment_score",
        "hashtags",
        "engagement_score",
        "created_at",
    )
    _COLUMN_LIST, _INSERT_COLUMNS = ", ".join(_COLUMNS), ", ".join(_COLUMNS[1:])

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def create(self, record: ContentAnalysisRecord) -> ContentAnalysisRecord:
        created_at = record.created_at or utc_now_iso()
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"INSERT INTO CONTENT_ANALYSIS ({self._INSERT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    record.user_id,
                    record.content,
                    record.sentiment_label,
                    record.sentiment_score,
                    json.dumps(list(record.hashtags)),
                    record.engagement_score,
                    created_at,
                ),
            )
            await conn.commit()
            record.id = cur.lastrowid
        record.created_at = created_at
        return record

    async def list_for_user(self, user_id: int) -> List[ContentAnalysisRecord]:
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM CONTENT_ANALYSIS WHERE user_id = ? ORDER BY id DESC",
                (user_id,),
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def delete(self, analysis_id: int, user_id: int) -> bool:
        """Delete an analysis by id. Returns True if a row was deleted."""
        async with self._db.connection() as conn:
            await conn.execute(
                "DELETE FROM CONTENT_ANALYSIS WHERE id = ? AND user_id = ?", (analysis_id, user_id)
            )
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
            return bool(changed and changed[0] > 0)

    @staticmethod
    def _row_to_record(row: Sequence[object]) -> ContentAnalysisRecord:
        return ContentAnalysisRecord(
            id=row[0],
            user_id=row[1],
            content=row[2],
            sentiment_label=row[3],
            sentiment_score=row[4],
            hashtags=json.loads(row[5] or "[]"),
            engagement_score=row[6],
            created_at=row[7],
        )
