from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from riskscan.domain.models import Job, JobError, JobStatus, ReportRecord


@runtime_checkable
class StoragePort(Protocol):
    def create_job(self, job: Job) -> None:
        """Persist a newly registered job."""

    def get_job(self, job_id: str) -> Job | None:
        """Return a job by id, or None if missing."""

    def update_job_status(
        self,
        job_id: str,
        status: JobStatus,
        report_id: str | None = None,
        error: JobError | None = None,
        warn: str | None = None,
    ) -> None:
        """Set a job's status; report_id, error and warn are overwritten together."""

    def save_report(self, record: ReportRecord) -> None:
        """Create or overwrite the report keyed by record.report_id."""

    def get_report(self, report_id: str) -> ReportRecord | None:
        """Return a report by id, or None if missing."""

    def set_report_images_deleted(self, report_id: str, images_deleted: bool) -> None:
        """Flip the images_deleted flag on a report."""

    def list_reports_with_images(self, created_before: datetime, limit: int) -> list[ReportRecord]:
        """Return reports still flagged images_deleted=False created before a cutoff."""

    def delete_user_data(self, user_id: str) -> tuple[int, int]:
        """Delete a user's reports and mark their jobs user_deleted.

        Returns (reports_deleted, jobs_marked).
        """
