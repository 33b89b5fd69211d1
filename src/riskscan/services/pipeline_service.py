"""Per-job state machine for the analysis worker.

uploaded -> processing -> complete | error. The job record is the only place
success or failure is recorded; ``process_job`` never raises, so the caller
can acknowledge the inbound message unconditionally.
"""

from __future__ import annotations

import logging

from riskscan.domain.models import Job, JobError, JobStatus, PlanLimits, ReportRecord
from riskscan.domain.report_normalizer import normalize_report
from riskscan.ports.storage_port import StoragePort
from riskscan.services.classification_service import ClassificationService
from riskscan.services.ocr_service import TextExtractionService
from riskscan.services.purge_service import PurgeService
from riskscan.settings import ERROR_DETAIL_MAX_CHARS

logger = logging.getLogger(__name__)

PURGE_FAILED_WARNING = "purge_failed_lifecycle_will_cleanup"
TOO_MANY_FILES = "too_many_files"
INTERNAL_ERROR = "internal_error"

_SKIP_STATUSES = (JobStatus.COMPLETE, JobStatus.USER_DELETED)


class AnalysisPipeline:
    def __init__(
        self,
        storage: StoragePort,
        extraction: TextExtractionService,
        classification: ClassificationService,
        purge: PurgeService,
        limits: PlanLimits,
        error_detail_max_chars: int | None = None,
    ) -> None:
        self._storage = storage
        self._extraction = extraction
        self._classification = classification
        self._purge = purge
        self._limits = limits
        self._error_detail_max_chars = error_detail_max_chars or ERROR_DETAIL_MAX_CHARS

    def process_job(self, job_id: str) -> JobStatus | None:
        """Run one job to a terminal status; returns that status, or None if absent."""

        try:
            job = self._storage.get_job(job_id)
        except Exception:
            logger.exception("job %s: failed to load", job_id)
            self._record_failure(job_id, INTERNAL_ERROR, "failed to load job")
            return JobStatus.ERROR
        if job is None:
            logger.info("job %s: not found, treating as handled", job_id)
            return None
        if job.status in _SKIP_STATUSES:
            logger.info("job %s: already %s, skipping", job_id, job.status.value)
            return job.status

        try:
            return self._run(job)
        except Exception as exc:
            logger.exception("job %s: pipeline failed", job_id)
            self._record_failure(job_id, INTERNAL_ERROR, str(exc) or type(exc).__name__)
            return JobStatus.ERROR

    def _run(self, job: Job) -> JobStatus:
        max_allowed = self._limits.max_for(job.plan)
        if len(job.files) > max_allowed:
            logger.warning(
                "job %s: %d files exceeds max %d for plan %s",
                job.job_id,
                len(job.files),
                max_allowed,
                job.plan,
            )
            self._storage.update_job_status(
                job.job_id,
                JobStatus.ERROR,
                error=JobError(code=TOO_MANY_FILES, message=f"max {max_allowed} for plan"),
            )
            return JobStatus.ERROR

        self._storage.update_job_status(job.job_id, JobStatus.PROCESSING)
        logger.info("job %s: processing %d files", job.job_id, len(job.files))

        extraction = self._extraction.extract(job.files)
        raw_report = self._classification.classify(extraction.text, job.instructions)
        normalized = normalize_report(raw_report)

        report_id = job.job_id
        self._storage.save_report(
            ReportRecord(
                report_id=report_id,
                job_id=job.job_id,
                user_id=job.user_id,
                report=normalized.to_dict(),
                images_deleted=False,
            )
        )

        purge = self._purge.purge(job.files)
        self._storage.update_job_status(
            job.job_id,
            JobStatus.COMPLETE,
            report_id=report_id,
            warn=None if purge.ok else PURGE_FAILED_WARNING,
        )
        if purge.ok:
            try:
                self._storage.set_report_images_deleted(report_id, True)
            except Exception:
                # The job is already complete; the retention sweep flips the flag later.
                logger.exception("job %s: failed to flag images_deleted", job.job_id)
        logger.info(
            "job %s: complete risk_score=%d images_deleted=%s",
            job.job_id,
            normalized.risk_score,
            purge.ok,
        )
        return JobStatus.COMPLETE

    def _record_failure(self, job_id: str, code: str, detail: str) -> None:
        message = detail[: self._error_detail_max_chars]
        try:
            self._storage.update_job_status(
                job_id, JobStatus.ERROR, error=JobError(code=code, message=message)
            )
        except Exception:
            logger.exception("job %s: failed to record error status", job_id)
