"""
interest_assessment/database.py — SQLite student store
======================================================
Persists the completed interest assessment for each student and remembers
whether diagnostic question generation has already been requested, so a
re-submitted assessment never triggers it twice.

Design decisions
----------------
- **Single write on completion** — the answers, the completed flag and the
  completion timestamp are written by one UPDATE; there is no partial save.
- **JSON blobs** — the nested answer document is stored as TEXT, matching
  the payload shape the wizard submits.
- **WAL journal mode** — the CLI and any reporting job may read concurrently.

Tables
------
  students
    user_id                          TEXT UNIQUE NOT NULL — auth principal id
    unique_id                        TEXT UNIQUE NOT NULL — student-facing id
    full_name / email / role         TEXT
    interest_assessment_json         TEXT    — submitted answer document
    interest_assessment_completed    INTEGER — 0 | 1
    interest_assessment_completed_at TEXT    — ISO-8601
    wizard_trace_json                TEXT    — serialised SessionTrace
    created_at / updated_at          TEXT
  diagnostic_requests
    unique_id                        TEXT PRIMARY KEY
    webhook_triggered                INTEGER — 1 once questions were generated
    triggered_at                     TEXT
    generated_questions_json         TEXT    — webhook output (may be "[]")
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from interest_assessment.errors import StudentNotFound, SubmissionError


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class StudentStore:
    """SQLite-backed persistence for students and their interest assessments."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self.init_db()

    def _get_conn(self) -> sqlite3.Connection:
        """Return a connection with row_factory set."""
        conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def init_db(self) -> None:
        """Create tables if they don't exist."""
        conn = self._get_conn()
        conn.executescript("""
        CREATE TABLE IF NOT EXISTS students (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id         TEXT    UNIQUE NOT NULL,
            unique_id       TEXT    UNIQUE NOT NULL,
            full_name       TEXT    DEFAULT '',
            email           TEXT    DEFAULT '',
            role            TEXT    DEFAULT 'student',
            interest_assessment_json          TEXT,
            interest_assessment_completed     INTEGER DEFAULT 0,
            interest_assessment_completed_at  TEXT,
            wizard_trace_json TEXT,
            created_at      TEXT    DEFAULT (datetime('now')),
            updated_at      TEXT    DEFAULT (datetime('now'))
        );
        CREATE TABLE IF NOT EXISTS diagnostic_requests (
            unique_id                TEXT PRIMARY KEY,
            webhook_triggered        INTEGER DEFAULT 0,
            triggered_at             TEXT,
            generated_questions_json TEXT
        );
        """)
        conn.commit()
        conn.close()

    # ─── Student CRUD ────────────────────────────────────────────────────────

    def get_student(self, user_id: str) -> Optional[dict]:
        """Fetch a student by auth user id. Returns dict or None."""
        conn = self._get_conn()
        row = conn.execute("SELECT * FROM students WHERE user_id = ?", (user_id,)).fetchone()
        conn.close()
        if row is None:
            return None
        return dict(row)

    def create_student(self, user_id: str, unique_id: str,
                       full_name: str = "", email: str = "") -> int:
        """Create a new student record, return the id."""
        conn = self._get_conn()
        cur = conn.execute(
            "INSERT INTO students (user_id, unique_id, full_name, email) VALUES (?, ?, ?, ?)",
            (user_id, unique_id, full_name, email),
        )
        conn.commit()
        student_id = cur.lastrowid
        conn.close()
        return student_id

    def upsert_student(self, user_id: str, unique_id: str,
                       full_name: str = "", email: str = "") -> int:
        """Create or get existing student, return id."""
        existing = self.get_student(user_id)
        if existing:
            return existing["id"]
        return self.create_student(user_id, unique_id, full_name, email)

    # ─── Interest assessment ─────────────────────────────────────────────────

    def is_interest_assessment_completed(self, user_id: str) -> bool:
        student = self.get_student(user_id)
        return bool(student and student["interest_assessment_completed"])

    def save_interest_assessment(self, user_id: str, payload: dict,
                                 trace_json: Optional[str] = None) -> dict:
        """
        Store the answers and mark the assessment complete in one UPDATE.
        Returns the updated student row.
        """
        try:
            conn = self._get_conn()
            try:
                cur = conn.execute("""
                    UPDATE students SET
                        interest_assessment_json = ?,
                        interest_assessment_completed = 1,
                        interest_assessment_completed_at = ?,
                        wizard_trace_json = COALESCE(?, wizard_trace_json),
                        updated_at = datetime('now')
                    WHERE user_id = ?
                """, (json.dumps(payload), _utc_now(), trace_json, user_id))
                updated = cur.rowcount
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise SubmissionError(f"Failed to update student: {exc}") from exc

        if updated == 0:
            raise StudentNotFound("Student not found")
        return self.get_student(user_id)

    def load_interest_assessment(self, user_id: str) -> Optional[dict]:
        student = self.get_student(user_id)
        if not student or not student["interest_assessment_json"]:
            return None
        return json.loads(student["interest_assessment_json"])

    # ─── Diagnostic question requests ────────────────────────────────────────

    def get_diagnostic_request(self, unique_id: str) -> Optional[dict]:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM diagnostic_requests WHERE unique_id = ?", (unique_id,)
        ).fetchone()
        conn.close()
        return dict(row) if row else None

    def webhook_already_triggered(self, unique_id: str) -> bool:
        request = self.get_diagnostic_request(unique_id)
        return bool(request and request["webhook_triggered"])

    def save_diagnostic_request(self, unique_id: str, questions: list,
                                triggered: bool) -> None:
        """Record a question generation request (placeholder when not triggered)."""
        conn = self._get_conn()
        conn.execute("""
            INSERT INTO diagnostic_requests
                (unique_id, webhook_triggered, triggered_at, generated_questions_json)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(unique_id) DO UPDATE SET
                webhook_triggered = excluded.webhook_triggered,
                triggered_at = excluded.triggered_at,
                generated_questions_json = excluded.generated_questions_json
        """, (unique_id, int(triggered), _utc_now(), json.dumps(questions)))
        conn.commit()
        conn.close()
