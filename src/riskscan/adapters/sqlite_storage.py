from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone

from riskscan.domain.errors import PersistenceError
from riskscan.domain.models import FileRef, Job, JobError, JobStatus, ReportRecord
from riskscan.ports.storage_port import StoragePort


class SQLiteStorage(StoragePort):
    def __init__(self, sqlite_path: str) -> None:
        self._sqlite_path = sqlite_path
        self._ensure_schema()

    def create_job(self, job: Job) -> None:
        now = _utcnow()
        created_at = job.created_at or now
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO jobs(
                        job_id, plan, user_id, files_json, instructions, status,
                        report_id, error_json, warn, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, NULL, NULL, NULL, ?, ?)
                    ON CONFLICT(job_id) DO UPDATE SET
                        plan = excluded.plan,
                        user_id = excluded.user_id,
                        files_json = excluded.files_json,
                        instructions = excluded.instructions,
                        status = excluded.status,
                        report_id = NULL,
                        error_json = NULL,
                        warn = NULL,
                        updated_at = excluded.updated_at
                    """,
                    (
                        job.job_id,
                        job.plan,
                        job.user_id,
                        json.dumps([file_ref.to_dict() for file_ref in job.files]),
                        job.instructions,
                        JobStatus(job.status).value,
                        _iso(created_at),
                        _iso(now),
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to create job") from exc

    def get_job(self, job_id: str) -> Job | None:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    """
                    SELECT job_id, plan, user_id, files_json, instructions, status,
                           report_id, error_json, warn, created_at, updated_at
                    FROM jobs
                    WHERE job_id = ?
                    """,
                    (job_id,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to fetch job") from exc
        if row is None:
            return None
        files = [
            FileRef.from_dict(item)
            for item in json.loads(row[3] or "[]")
            if isinstance(item, dict)
        ]
        error = None
        if row[7]:
            error_data = json.loads(row[7])
            error = JobError(
                code=str(error_data.get("code", "")),
                message=str(error_data.get("message", "")),
            )
        return Job(
            job_id=row[0],
            plan=row[1],
            user_id=row[2],
            files=files,
            instructions=row[4],
            status=JobStatus(row[5]),
            report_id=row[6],
            error=error,
            warn=row[8],
            created_at=_parse_datetime(row[9]),
            updated_at=_parse_datetime(row[10]),
        )

    def update_job_status(
        self,
        job_id: str,
        status: JobStatus,
        report_id: str | None = None,
        error: JobError | None = None,
        warn: str | None = None,
    ) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    UPDATE jobs
                    SET status = ?, report_id = ?, error_json = ?, warn = ?, updated_at = ?
                    WHERE job_id = ?
                    """,
                    (
                        JobStatus(status).value,
                        report_id,
                        json.dumps(error.to_dict()) if error else None,
                        warn,
                        _iso(_utcnow()),
                        job_id,
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to update job status") from exc

    def save_report(self, record: ReportRecord) -> None:
        now = _utcnow()
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO reports(
                        report_id, job_id, user_id, report_json, images_deleted,
                        created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(report_id) DO UPDATE SET
                        job_id = excluded.job_id,
                        user_id = excluded.user_id,
                        report_json = excluded.report_json,
                        images_deleted = excluded.images_deleted,
                        updated_at = excluded.updated_at
                    """,
                    (
                        record.report_id,
                        record.job_id,
                        record.user_id,
                        json.dumps(record.report),
                        1 if record.images_deleted else 0,
                        _iso(record.created_at or now),
                        _iso(now),
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to save report") from exc

    def get_report(self, report_id: str) -> ReportRecord | None:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT {_REPORT_COLUMNS} FROM reports WHERE report_id = ?",
                    (report_id,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to fetch report") from exc
        if row is None:
            return None
        return _report_from_row(row)

    def set_report_images_deleted(self, report_id: str, images_deleted: bool) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    UPDATE reports
                    SET images_deleted = ?, updated_at = ?
                    WHERE report_id = ?
                    """,
                    (1 if images_deleted else 0, _iso(_utcnow()), report_id),
                )
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to update report images_deleted") from exc

    def list_reports_with_images(
        self, created_before: datetime, limit: int
    ) -> list[ReportRecord]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"""
                    SELECT {_REPORT_COLUMNS}
                    FROM reports
                    WHERE images_deleted = 0 AND created_at < ?
                    ORDER BY created_at ASC
                    LIMIT ?
                    """,
                    (_iso(created_before), limit),
                ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to list reports awaiting purge") from exc
        return [_report_from_row(row) for row in rows]

    def delete_user_data(self, user_id: str) -> tuple[int, int]:
        try:
            with self._connect() as conn:
                reports_deleted = conn.execute(
                    "DELETE FROM reports WHERE user_id = ?", (user_id,)
                ).rowcount
                jobs_marked = conn.execute(
                    """
                    UPDATE jobs
                    SET status = ?, updated_at = ?
                    WHERE user_id = ?
                    """,
                    (JobStatus.USER_DELETED.value, _iso(_utcnow()), user_id),
                ).rowcount
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to delete user data") from exc
        return reports_deleted, jobs_marked

    def _ensure_schema(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS jobs(
                        job_id TEXT PRIMARY KEY,
                        plan TEXT NOT NULL,
                        user_id TEXT,
                        files_json TEXT NOT NULL,
                        instructions TEXT,
                        status TEXT NOT NULL,
                        report_id TEXT,
                        error_json TEXT,
                        warn TEXT,
                        created_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS reports(
                        report_id TEXT PRIMARY KEY,
                        job_id TEXT NOT NULL,
                        user_id TEXT,
                        report_json TEXT NOT NULL,
                        images_deleted INTEGER NOT NULL DEFAULT 0,
                        created_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
                conn.execute("CREATE INDEX IF NOT EXISTS idx_jobs_user ON jobs(user_id)")
                conn.execute("CREATE INDEX IF NOT EXISTS idx_reports_user ON reports(user_id)")
                conn.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_reports_images
                    ON reports(images_deleted, created_at)
                    """
                )
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to initialize schema") from exc

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._sqlite_path, timeout=30)


_REPORT_COLUMNS = (
    "report_id, job_id, user_id, report_json, images_deleted, created_at, updated_at"
)


def _report_from_row(row: tuple) -> ReportRecord:
    return ReportRecord(
        report_id=row[0],
        job_id=row[1],
        user_id=row[2],
        report=json.loads(row[3]),
        images_deleted=bool(row[4]),
        created_at=_parse_datetime(row[5]),
        updated_at=_parse_datetime(row[6]),
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")
