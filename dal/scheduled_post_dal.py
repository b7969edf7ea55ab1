"""Async DAL for the SCHEDULED_POST table."""

from __future__ import annotations

import json
from typing import List, Optional, Sequence


from models.content_records import ScheduledPostRecord
from utils.database_init import AsyncDatabaseInitializer
from utils.timestamps import utc_now_iso


class ScheduledPostDAL:
    """Create, list and update the status of scheduled posts."""

    _COLUMNS = (
        "id",
        "user_id",
        "content",
        "platform",
        "scheduled_time",
        "status",
        "hashtags",
        "engagement_prediction",
        "tone",
        "created_at",
    )
    _COLUMN_LIST, _INSERT_COLUMNS = ", ".join(_COLUMNS), ", ".join(_COLUMNS[1:])

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def create(self, record: ScheduledPostRecord) -> ScheduledPostRecord:
        created_at = record.created_at or utc_now_iso()
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"INSERT INTO SCHEDULED_POST ({self._INSERT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    record.user_id,
                    record.content,
                    record.platform,
                    record.scheduled_time,
                    record.status,
                    json.dumps(list(record.hashtags)),
                    record.engagement_prediction,
                    record.tone,
                    created_at,
                ),
            )
            await conn.commit()
            record.id = cur.lastrowid
        record.created_at = created_at
        return record

    async def list_for_user(self, user_id: int) -> List[ScheduledPostRecord]:
        """Return a user's posts ordered by scheduled time."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM SCHEDULED_POST WHERE user_id = ? ORDER BY scheduled_time",
                (user_id,),
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def update_status(self, post_id: int, user_id: int, status: str) -> Optional[ScheduledPostRecord]:
        """Set a post's status and return the updated row, or None if not found."""
        async with self._db.connection() as conn:
            await conn.execute(
                "UPDATE SCHEDULED_POST SET status = ? WHERE id = ? AND user_id = ?", (status, post_id, user_id)
            )
            await conn.commit()
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM SCHEDULED_POST WHERE id = ? AND user_id = ?", (post_id, user_id)
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    @staticmethod
    def _row_to_record(row: Sequence[object]) -> ScheduledPostRecord:
        return ScheduledPostRecord(
            id=row[0],
            user_id=row[1],
            content=row[2],
            platform=row[3],
            scheduled_time=row[4],
            status=row[5],
            hashtags=json.loads(row[6] or "[]"),
            engagement_prediction=row[7],
            tone=row[8],
            created_at=row[9],
        )
