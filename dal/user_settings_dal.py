"""Async DAL for the USER_SETTINGS table."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from models.content_records import UserSettingsRecord
from utils.database_init import AsyncDatabaseInitializer


class UserSettingsDAL:
    """Read and upsert per-user preferences."""

    _COLUMNS = (
        "user_id",
        "theme",
        "email_notifications",
        "push_notifications",
        "weekly_digest",
        "content_language",
        "auto_schedule",
    )
    _COLUMN_LIST = ", ".join(_COLUMNS)

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def get(self, user_id: int) -> Optional[UserSettingsRecord]:
        """Return the user's settings, or None if never saved."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM USER_SETTINGS WHERE user_id = ?", (user_id,)
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def upsert(self, user_id: int, updates: Dict[str, Any]) -> UserSettingsRecord:
        """Merge `updates` into the stored settings (defaults if none) and save.

        Unknown keys are ignored.
        """
        current = await self.get(user_id) or UserSettingsRecord(user_id=user_id)
        for key, value in updates.items():
            if key in self._COLUMNS[1:] and value is not None:
                setattr(current, key, value)

        placeholders = ", ".join("?" for _ in self._COLUMNS)
        async with self._db.connection() as conn:
            await conn.execute(
                f"INSERT OR REPLACE INTO USER_SETTINGS ({self._COLUMN_LIST}) VALUES ({placeholders})",
                (
                    current.user_id,
                    current.theme,
                    int(current.email_notifications),
                    int(current.push_notifications),
                    int(current.weekly_digest),
                    current.content_language,
                    int(current.auto_schedule),
                ),
            )
            await conn.commit()
        return current

    @staticmethod
    def _row_to_record(row: Sequence[Any]) -> UserSettingsRecord:
        return UserSettingsRecord(
            user_id=row[0],
            theme=row[1],
            email_notifications=bool(row[2]),
            push_notifications=bool(row[3]),
            weekly_digest=bool(row[4]),
            content_language=row[5],
            auto_schedule=bool(row[6]),
        )
