from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class JobStatus(str, Enum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"
    USER_DELETED = "user_deleted"


class Plan(str, Enum):
    FREE = "free"
    PRO = "pro"


@dataclass(frozen=True)
class FileRef:
    path: str
    size: int | None = None
    mime: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "size": self.size, "mime": self.mime}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileRef":
        size = data.get("size")
        return cls(
            path=str(data.get("path", "")),
            size=int(size) if isinstance(size, (int, float)) else None,
            mime=data.get("mime") if isinstance(data.get("mime"), str) else None,
        )


@dataclass(frozen=True)
class JobError:
    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}

    def describe(self) -> str:
        return f"{self.code}: {self.message}" if self.message else self.code


@dataclass
class Job:
    job_id: str
    plan: str
    files: list[FileRef]
    status: JobStatus
    user_id: str | None = None
    instructions: str | None = None
    report_id: str | None = None
    error: JobError | None = None
    warn: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class OCRResult:
    text: str
    confidence: float | None


@dataclass(frozen=True)
class PlanLimits:
    free_max: int = 3
    pro_max: int = 15

    def max_for(self, plan: str | None) -> int:
        """Return the file cap for a plan; unknown plans get the free cap."""

        if plan == Plan.PRO.value:
            return self.pro_max
        return self.free_max


@dataclass
class TacticResult:
    id: str
    name: str
    likelihood: float
    severity: float
    frequency: float
    examples: list[str]
    score: int
    contribution_pct: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "likelihood": self.likelihood,
            "severity": self.severity,
            "frequency": self.frequency,
            "examples": list(self.examples),
            "score": self.score,
            "contribution_pct": self.contribution_pct,
        }


@dataclass
class Receipt:
    quote: str
    category: str | None = None
    source: str | None = None
    severity: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "quote": self.quote,
            "category": self.category,
            "source": self.source,
            "severity": self.severity,
        }


@dataclass
class NormalizedReport:
    risk_score: int
    risk_label: str
    confidence: float
    tactics: list[TacticResult]
    receipts: list[Receipt] = field(default_factory=list)
    kpis: dict[str, Any] = field(default_factory=dict)
    narrative: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "risk_score": self.risk_score,
            "risk_label": self.risk_label,
            "confidence": self.confidence,
            "tactics": [tactic.to_dict() for tactic in self.tactics],
            "receipts": [receipt.to_dict() for receipt in self.receipts],
            "kpis": dict(self.kpis),
            "narrative": self.narrative,
        }


@dataclass
class ReportRecord:
    report_id: str
    job_id: str
    user_id: str | None
    report: dict[str, Any]
    images_deleted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
