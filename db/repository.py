from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, Sequence

from models import Learner, LearnerStreak, LearningUnit, LearningUnitCreate, ScheduledItem
from utils.due import as_utc
from utils.errors import StorageError, StorageQueryError, StorageWriteError

UPDATABLE_ITEM_FIELDS = ("interval", "next_review", "last_response", "correct_count")


def to_db_ts(value: datetime) -> str:
    """Serialize a timestamp so that string order matches time order."""
    return as_utc(value).isoformat(timespec="microseconds")


def _from_db_ts(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Repository(Protocol):
    """Record store consumed by the review pass and the serving jobs."""

    def find_due_scheduled_items(self, now: datetime) -> Sequence[ScheduledItem]: ...

    def update_scheduled_item(
        self,
        item_id: int,
        fields: Dict[str, Any],
        expected_next_review: Optional[datetime] = None,
    ) -> bool: ...

    def find_learner(self, learner_id: int) -> Optional[Learner]: ...

    def find_learning_unit(self, unit_id: int) -> Optional[LearningUnit]: ...


class SQLiteRepository:
    """Repository over a single SQLite connection; commits after every write."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # --- scheduled items ---
    def find_due_scheduled_items(self, now: datetime) -> List[ScheduledItem]:
        try:
            cursor = self.conn.execute(
                """
                SELECT * FROM scheduled_items
                WHERE next_review <= ?
                ORDER BY served_at ASC, id ASC
                """,
                (to_db_ts(now),),
            )
            rows = cursor.fetchall()
        except sqlite3.Error as exc:
            raise StorageQueryError(f"due item query failed: {exc}") from exc
        return [self._item_from_row(row) for row in rows]

    def update_scheduled_item(
        self,
        item_id: int,
        fields: Dict[str, Any],
        expected_next_review: Optional[datetime] = None,
    ) -> bool:
        """Apply a partial update to one scheduled item.

        When ``expected_next_review`` is given the write only lands if the
        stored ``next_review`` still matches, and ``False`` is returned when
        another writer got there first.
        """
        unknown = set(fields) - set(UPDATABLE_ITEM_FIELDS)
        if unknown:
            raise StorageWriteError(f"cannot update fields: {', '.join(sorted(unknown))}")
        if not fields:
            return True
        assignments = []
        params: list[object] = []
        for name in UPDATABLE_ITEM_FIELDS:
            if name not in fields:
                continue
            value = fields[name]
            if name == "next_review":
                value = to_db_ts(value)
            assignments.append(f"{name} = ?")
            params.append(value)
        where = "id = ?"
        params.append(item_id)
        if expected_next_review is not None:
            where += " AND next_review = ?"
            params.append(to_db_ts(expected_next_review))
        try:
            cursor = self.conn.execute(
                f"UPDATE scheduled_items SET {', '.join(assignments)} WHERE {where}",
                params,
            )
            updated = cursor.rowcount
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StorageWriteError(f"update of scheduled item {item_id} failed: {exc}") from exc
        if updated:
            return True
        if not self._item_exists(item_id):
            raise StorageError(f"scheduled item {item_id} does not exist")
        return False

    def create_scheduled_item(
        self,
        *,
        learner_id: int,
        unit_id: int,
        served_at: datetime,
        next_review: datetime,
        interval: int,
        served_index: int = 1,
    ) -> ScheduledItem:
        try:
            cursor = self.conn.execute(
                """
                INSERT INTO scheduled_items (learner_id, unit_id, served_at, next_review, interval, served_index)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (learner_id, unit_id, to_db_ts(served_at), to_db_ts(next_review), interval, served_index),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StorageWriteError(f"could not schedule unit {unit_id} for learner {learner_id}: {exc}") from exc
        return self.get_scheduled_item(cursor.lastrowid)

    def get_scheduled_item(self, item_id: int) -> Optional[ScheduledItem]:
        row = self.conn.execute("SELECT * FROM scheduled_items WHERE id = ?", (item_id,)).fetchone()
        return self._item_from_row(row) if row else None

    def list_scheduled_items(
        self,
        learner_id: int,
        served_since: Optional[datetime] = None,
    ) -> List[ScheduledItem]:
        """Items for a learner in serve order, optionally only those served since a cutoff."""
        query = "SELECT * FROM scheduled_items WHERE learner_id = ?"
        params: list[object] = [learner_id]
        if served_since is not None:
            query += " AND served_at >= ?"
            params.append(to_db_ts(served_since))
        query += " ORDER BY served_at ASC, id ASC"
        try:
            rows = self.conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise StorageQueryError(f"listing items for learner {learner_id} failed: {exc}") from exc
        return [self._item_from_row(row) for row in rows]

    def _item_exists(self, item_id: int) -> bool:
        row = self.conn.execute("SELECT 1 FROM scheduled_items WHERE id = ?", (item_id,)).fetchone()
        return row is not None

    @staticmethod
    def _item_from_row(row: sqlite3.Row) -> ScheduledItem:
        data = dict(row)
        data["served_at"] = _from_db_ts(data["served_at"])
        data["next_review"] = _from_db_ts(data["next_review"])
        return ScheduledItem(**data)

    # --- learners ---
    def find_learner(self, learner_id: int) -> Optional[Learner]:
        row = self.conn.execute("SELECT * FROM learners WHERE id = ?", (learner_id,)).fetchone()
        return self._learner_from_row(row) if row else None

    def find_learner_by_chat(self, chat_id: str) -> Optional[Learner]:
        row = self.conn.execute("SELECT * FROM learners WHERE chat_id = ?", (str(chat_id),)).fetchone()
        return self._learner_from_row(row) if row else None

    def list_learners(self) -> List[Learner]:
        try:
            rows = self.conn.execute("SELECT * FROM learners ORDER BY id").fetchall()
        except sqlite3.Error as exc:
            raise StorageQueryError(f"listing learners failed: {exc}") from exc
        return [self._learner_from_row(row) for row in rows]

    def create_learner(self, chat_id: str, words_per_day: int, now: datetime) -> Learner:
        try:
            cursor = self.conn.execute(
                "INSERT INTO learners (chat_id, words_per_day, created_at) VALUES (?, ?, ?)",
                (str(chat_id), words_per_day, to_db_ts(now)),
            )
            self.conn.commit()
        except sqlite3.IntegrityError as exc:
            raise StorageWriteError(f"learner for chat {chat_id} already exists") from exc
        return self.find_learner(cursor.lastrowid)

    def set_words_per_day(self, learner_id: int, words_per_day: int) -> None:
        try:
            cursor = self.conn.execute(
                "UPDATE learners SET words_per_day = ? WHERE id = ?",
                (words_per_day, learner_id),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StorageWriteError(f"could not update learner {learner_id}: {exc}") from exc
        if cursor.rowcount == 0:
            raise StorageError(f"learner {learner_id} does not exist")

    @staticmethod
    def _learner_from_row(row: sqlite3.Row) -> Learner:
        data = dict(row)
        data["created_at"] = _from_db_ts(data.get("created_at"))
        return Learner(**data)

    # --- learning units ---
    def find_learning_unit(self, unit_id: int) -> Optional[LearningUnit]:
        row = self.conn.execute("SELECT * FROM learning_units WHERE id = ?", (unit_id,)).fetchone()
        if not row:
            return None
        data = dict(row)
        data["created_at"] = _from_db_ts(data.get("created_at"))
        return LearningUnit(**data)

    def insert_learning_unit(self, unit: LearningUnitCreate, now: datetime) -> LearningUnit:
        try:
            cursor = self.conn.execute(
                """
                INSERT INTO learning_units (word, part_of_speech, definition, example, source, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (unit.word, unit.part_of_speech, unit.definition, unit.example, unit.source, to_db_ts(now)),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StorageWriteError(f"could not save word {unit.word!r}: {exc}") from exc
        return self.find_learning_unit(cursor.lastrowid)

    def used_words(self, limit: int = 1000) -> List[str]:
        rows = self.conn.execute(
            "SELECT word FROM learning_units ORDER BY created_at DESC, id DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [row["word"].lower() for row in rows]

    # --- streaks ---
    def get_streak(self, learner_id: int) -> Optional[LearnerStreak]:
        row = self.conn.execute(
            "SELECT learner_id, streak, last_completed FROM learner_streaks WHERE learner_id = ?",
            (learner_id,),
        ).fetchone()
        if not row:
            return None
        return LearnerStreak(
            learner_id=row["learner_id"],
            streak=row["streak"],
            last_completed=_from_db_ts(row["last_completed"]),
        )

    def save_streak(self, streak: LearnerStreak) -> None:
        last_completed = to_db_ts(streak.last_completed) if streak.last_completed else None
        try:
            self.conn.execute(
                """
                INSERT INTO learner_streaks (learner_id, streak, last_completed)
                VALUES (?, ?, ?)
                ON CONFLICT(learner_id) DO UPDATE SET
                    streak = excluded.streak,
                    last_completed = excluded.last_completed
                """,
                (streak.learner_id, streak.streak, last_completed),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StorageWriteError(f"could not save streak for learner {streak.learner_id}: {exc}") from exc
