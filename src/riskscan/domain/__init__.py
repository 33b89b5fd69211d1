from .models import FileRef, Job, JobError, JobStatus, NormalizedReport, PlanLimits, ReportRecord
from .report_normalizer import normalize_report, risk_label, tactic_score
from .text_cleaner import NO_TEXT_SENTINEL, clean_text

__all__ = [
    "FileRef",
    "Job",
    "JobError",
    "JobStatus",
    "NO_TEXT_SENTINEL",
    "NormalizedReport",
    "PlanLimits",
    "ReportRecord",
    "clean_text",
    "normalize_report",
    "risk_label",
    "tactic_score",
]
