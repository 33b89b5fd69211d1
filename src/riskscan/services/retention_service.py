from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from riskscan.ports.storage_port import StoragePort
from riskscan.settings import RETENTION_MINUTES, SWEEP_BATCH_SIZE

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    examined: int
    flagged: int


class RetentionService:
    """Backstop for failed purges.

    The upload bucket's lifecycle rule deletes objects after the retention
    window; this sweep only brings ``images_deleted`` in line with it.
    """

    def __init__(
        self,
        storage: StoragePort,
        retention_minutes: int | None = None,
        batch_size: int | None = None,
    ) -> None:
        self._storage = storage
        self._retention = timedelta(minutes=retention_minutes or RETENTION_MINUTES)
        self._batch_size = batch_size or SWEEP_BATCH_SIZE

    def sweep(self, now: datetime | None = None) -> SweepResult:
        now = now or datetime.now(timezone.utc)
        cutoff = now - self._retention
        reports = self._storage.list_reports_with_images(cutoff, self._batch_size)
        flagged = 0
        for record in reports:
            self._storage.set_report_images_deleted(record.report_id, True)
            flagged += 1
        if flagged:
            logger.info("retention sweep flagged %d reports as images_deleted", flagged)
        return SweepResult(examined=len(reports), flagged=flagged)
