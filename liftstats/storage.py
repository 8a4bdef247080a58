"""SQLite storage layer for personal records (the only durable state)."""

from __future__ import annotations

import sqlite3
import uuid
from pathlib import Path
from typing import Optional

from .models import PersonalRecord

_COLUMNS = (
    "record_id, user_id, exercise_id, record_type, weight_kg, reps, sets, "
    "total_volume, duration_seconds, achieved_date, notes"
)


def _dict_factory(cursor: sqlite3.Cursor, row: tuple) -> dict:
    return {col[0]: row[i] for i, col in enumerate(cursor.description)}


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class RecordStore:
    """SQLite-backed personal record store. One row per (user_id, exercise_id, record_type)."""

    def __init__(self, db_path: str | Path = "liftstats.db"):
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = _dict_factory
            self._ensure_schema()
        return self._conn

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def _ensure_schema(self) -> None:
        conn = self.connect()
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS personal_records (
                record_id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                exercise_id TEXT NOT NULL,
                record_type TEXT NOT NULL,
                weight_kg REAL,
                reps INTEGER,
                sets INTEGER,
                total_volume REAL,
                duration_seconds INTEGER,
                achieved_date TEXT NOT NULL,
                notes TEXT,
                updated_at TEXT NOT NULL DEFAULT (datetime('now')),
                UNIQUE (user_id, exercise_id, record_type)
            );
            CREATE INDEX IF NOT EXISTS idx_pr_user_exercise ON personal_records(user_id, exercise_id);
        """)
        conn.commit()

    def upsert(self, record: PersonalRecord) -> str:
        """
        Insert or overwrite the record for its (user_id, exercise_id, record_type) key.
        Last write wins; the stored record_id of an existing key is kept. Returns the record_id.
        """
        conn = self.connect()
        conn.execute(
            f"""
            INSERT INTO personal_records ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, exercise_id, record_type) DO UPDATE SET
                weight_kg = excluded.weight_kg,
                reps = excluded.reps,
                sets = excluded.sets,
                total_volume = excluded.total_volume,
                duration_seconds = excluded.duration_seconds,
                achieved_date = excluded.achieved_date,
                notes = excluded.notes,
                updated_at = datetime('now')
            """,
            (
                record.record_id,
                record.user_id,
                record.exercise_id,
                record.record_type,
                record.weight_kg,
                record.reps,
                record.sets,
                record.total_volume,
                record.duration_seconds,
                record.achieved_date.isoformat(),
                record.notes,
            ),
        )
        conn.commit()
        row = conn.execute(
            "SELECT record_id FROM personal_records WHERE user_id = ? AND exercise_id = ? AND record_type = ?",
            (record.user_id, record.exercise_id, record.record_type),
        ).fetchone()
        return row["record_id"]

    def get(self, record_id: str) -> Optional[PersonalRecord]:
        conn = self.connect()
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM personal_records WHERE record_id = ?",
            (record_id,),
        ).fetchone()
        if not row:
            return None
        return PersonalRecord.model_validate(row)

    def list_for_exercise(self, user_id: str, exercise_id: str) -> list[PersonalRecord]:
        """All record types held for the exercise, most recently achieved first."""
        conn = self.connect()
        rows = conn.execute(
            f"""
            SELECT {_COLUMNS} FROM personal_records
            WHERE user_id = ? AND exercise_id = ?
            ORDER BY achieved_date DESC, updated_at DESC, record_type ASC
            """,
            (user_id, exercise_id),
        ).fetchall()
        return [PersonalRecord.model_validate(r) for r in rows]

    def delete(self, record_id: str) -> bool:
        """Remove a single record. Returns False if no such record."""
        conn = self.connect()
        cur = conn.execute("DELETE FROM personal_records WHERE record_id = ?", (record_id,))
        conn.commit()
        return cur.rowcount > 0
