"""SQLite persistence for users, their single resume and their single latest analysis."""

from __future__ import annotations

import os
import sqlite3
import threading
import uuid
from typing import Callable, Optional, TypeVar

from skillgap.core.config import settings
from skillgap.schemas.profile import ResumeProfile
from skillgap.schemas.records import AnalysisRecord, ResumeRecord, UserRecord, utcnow

_conn: sqlite3.Connection | None = None
_conn_lock = threading.Lock()

T = TypeVar("T")


class StoreError(RuntimeError):
    pass


class DuplicateUserError(StoreError):
    pass


def new_id() -> str:
    return uuid.uuid4().hex


def _get_connection() -> sqlite3.Connection:
    global _conn
    with _conn_lock:
        if _conn is not None:
            return _conn

        db_path = settings.db_path
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        _conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        _conn.execute("PRAGMA journal_mode=WAL;")
        _conn.execute("PRAGMA synchronous=NORMAL;")
        _conn.execute("PRAGMA busy_timeout=5000;")
        _conn.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL,
                credential TEXT,
                created_at TEXT NOT NULL
            );
            """
        )
        _conn.execute(
            """
            CREATE TABLE IF NOT EXISTS resumes (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL UNIQUE,
                uploaded_at TEXT NOT NULL,
                record_json TEXT NOT NULL
            );
            """
        )
        _conn.execute(
            """
            CREATE TABLE IF NOT EXISTS analyses (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                analyzed_at TEXT NOT NULL,
                record_json TEXT NOT NULL
            );
            """
        )
        _conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_analyses_user
            ON analyses (user_id, analyzed_at);
            """
        )
        return _conn


def init_store() -> None:
    _get_connection()


def _transaction(work: Callable[[sqlite3.Connection], T]) -> T:
    conn = _get_connection()
    with _conn_lock:
        conn.execute("BEGIN IMMEDIATE")
        try:
            result = work(conn)
        except Exception:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")
        return result


def _fetchone(sql: str, params: tuple) -> tuple | None:
    conn = _get_connection()
    with _conn_lock:
        return conn.execute(sql, params).fetchone()


# Users


def _row_to_user(row: tuple) -> UserRecord:
    return UserRecord(id=row[0], email=row[1], name=row[2], credential=row[3], created_at=row[4])


def create_user(email: str, name: str = "") -> UserRecord:
    user = UserRecord(id=new_id(), email=email.strip().lower(), name=name.strip())

    def work(conn: sqlite3.Connection) -> UserRecord:
        try:
            conn.execute(
                "INSERT INTO users (id, email, name, credential, created_at) VALUES (?, ?, ?, ?, ?)",
                (user.id, user.email, user.name, None, user.created_at.isoformat()),
            )
        except sqlite3.IntegrityError as exc:
            raise DuplicateUserError(f"User with email '{user.email}' already exists.") from exc
        return user

    return _transaction(work)


def get_user(user_id: str) -> Optional[UserRecord]:
    row = _fetchone("SELECT id, email, name, credential, created_at FROM users WHERE id = ?", (user_id,))
    return _row_to_user(row) if row else None


def update_user_credential(user_id: str, encrypted_credential: str | None) -> bool:
    def work(conn: sqlite3.Connection) -> bool:
        cur = conn.execute("UPDATE users SET credential = ? WHERE id = ?", (encrypted_credential, user_id))
        return cur.rowcount > 0

    return _transaction(work)


# Resumes


def _load_resume(conn: sqlite3.Connection, user_id: str) -> Optional[ResumeRecord]:
    row = conn.execute("SELECT record_json FROM resumes WHERE user_id = ?", (user_id,)).fetchone()
    return ResumeRecord.model_validate_json(row[0]) if row else None


def _write_resume(conn: sqlite3.Connection, record: ResumeRecord) -> None:
    conn.execute("DELETE FROM resumes WHERE user_id = ?", (record.user_id,))
    conn.execute(
        "INSERT INTO resumes (id, user_id, uploaded_at, record_json) VALUES (?, ?, ?, ?)",
        (
            record.id,
            record.user_id,
            record.uploaded_at.isoformat(),
            record.model_dump_json(by_alias=True),
        ),
    )


def get_resume(user_id: str) -> Optional[ResumeRecord]:
    row = _fetchone("SELECT record_json FROM resumes WHERE user_id = ?", (user_id,))
    return ResumeRecord.model_validate_json(row[0]) if row else None


def replace_resume(record: ResumeRecord) -> ResumeRecord:
    """Single slot per user: the previous resume is dropped in the same transaction."""

    def work(conn: sqlite3.Connection) -> ResumeRecord:
        _write_resume(conn, record)
        return record

    return _transaction(work)


def _update_resume(user_id: str, change: Callable[[ResumeRecord], ResumeRecord]) -> Optional[ResumeRecord]:
    def work(conn: sqlite3.Connection) -> Optional[ResumeRecord]:
        current = _load_resume(conn, user_id)
        if current is None:
            return None
        updated = change(current)
        _write_resume(conn, updated)
        return updated

    return _transaction(work)


def update_resume_skills(user_id: str, skills: list[str]) -> Optional[ResumeRecord]:
    return _update_resume(
        user_id,
        lambda current: current.model_copy(update={"extracted_skills": list(skills), "updated_at": utcnow()}),
    )


def update_resume_profile(user_id: str, profile: ResumeProfile) -> Optional[ResumeRecord]:
    return _update_resume(user_id, lambda current: current.with_profile(profile))


def delete_resume(user_id: str) -> bool:
    def work(conn: sqlite3.Connection) -> bool:
        return conn.execute("DELETE FROM resumes WHERE user_id = ?", (user_id,)).rowcount > 0

    return _transaction(work)


# Analyses


def get_latest_analysis(user_id: str) -> Optional[AnalysisRecord]:
    row = _fetchone(
        "SELECT record_json FROM analyses WHERE user_id = ? ORDER BY analyzed_at DESC LIMIT 1",
        (user_id,),
    )
    return AnalysisRecord.model_validate_json(row[0]) if row else None


def replace_analysis(record: AnalysisRecord) -> AnalysisRecord:
    """Delete every prior analysis of the user and insert the new one atomically."""

    def work(conn: sqlite3.Connection) -> AnalysisRecord:
        conn.execute("DELETE FROM analyses WHERE user_id = ?", (record.user_id,))
        conn.execute(
            "INSERT INTO analyses (id, user_id, analyzed_at, record_json) VALUES (?, ?, ?, ?)",
            (
                record.id,
                record.user_id,
                record.analyzed_at.isoformat(),
                record.model_dump_json(by_alias=True),
            ),
        )
        return record

    return _transaction(work)


def count_analyses(user_id: str) -> int:
    row = _fetchone("SELECT COUNT(*) FROM analyses WHERE user_id = ?", (user_id,))
    return int(row[0]) if row else 0


def clear_store() -> None:
    def work(conn: sqlite3.Connection) -> None:
        conn.execute("DELETE FROM analyses")
        conn.execute("DELETE FROM resumes")
        conn.execute("DELETE FROM users")

    _transaction(work)
