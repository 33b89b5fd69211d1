from __future__ import annotations

from datetime import datetime, timezone

from riskscan.domain.errors import ValidationError
from riskscan.domain.models import FileRef, Job, JobStatus, Plan, PlanLimits
from riskscan.ports.storage_port import StoragePort
from riskscan.settings import ERROR_DETAIL_MAX_CHARS


class JobsService:
    def __init__(self, storage: StoragePort, limits: PlanLimits) -> None:
        self._storage = storage
        self._limits = limits

    def register_job(
        self,
        job_id: str,
        plan: str,
        files: list[FileRef],
        user_id: str | None = None,
        instructions: str | None = None,
    ) -> Job:
        if not job_id or not job_id.strip():
            raise ValidationError("jobId is required")
        if not files:
            raise ValidationError("files must contain at least one entry")
        if any(not file_ref.path for file_ref in files):
            raise ValidationError("every file needs a storage path")
        plan = plan or Plan.FREE.value
        limit = self._limits.max_for(plan)
        if len(files) > limit:
            raise ValidationError(f"too many files for plan={plan} (max {limit})")
        job = Job(
            job_id=job_id.strip(),
            plan=plan,
            files=list(files),
            status=JobStatus.UPLOADED,
            user_id=user_id,
            instructions=instructions.strip() if instructions and instructions.strip() else None,
            created_at=datetime.now(timezone.utc),
        )
        self._storage.create_job(job)
        return job

    def get_job_view(self, job_id: str) -> dict | None:
        """Public job status; the error is a bounded string with no internals."""

        job = self._storage.get_job(job_id)
        if job is None:
            return None
        error = job.error.describe()[:ERROR_DETAIL_MAX_CHARS] if job.error else None
        return {
            "jobId": job.job_id,
            "status": job.status.value,
            "reportId": job.report_id,
            "error": error,
        }

    def get_report(self, report_id: str) -> dict | None:
        record = self._storage.get_report(report_id)
        if record is None:
            return None
        return record.report

    def delete_user_data(self, user_id: str) -> dict:
        if not user_id or not user_id.strip():
            raise ValidationError("userId is required")
        reports_deleted, jobs_marked = self._storage.delete_user_data(user_id.strip())
        return {"ok": True, "reportsDeleted": reports_deleted, "jobsMarked": jobs_marked}
