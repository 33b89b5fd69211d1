from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from riskscan.domain.models import ReportRecord
from riskscan.services.retention_service import RetentionService


def test_sweep_flags_reports_past_retention() -> None:
    storage = Mock()
    storage.list_reports_with_images.return_value = [
        ReportRecord(report_id="r1", job_id="r1", user_id=None, report={}),
        ReportRecord(report_id="r2", job_id="r2", user_id=None, report={}),
    ]
    now = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    result = RetentionService(storage, retention_minutes=60, batch_size=20).sweep(now=now)

    storage.list_reports_with_images.assert_called_once_with(now - timedelta(minutes=60), 20)
    assert storage.set_report_images_deleted.call_args_list == [
        (("r1", True),),
        (("r2", True),),
    ]
    assert result.examined == 2
    assert result.flagged == 2


def test_sweep_with_nothing_pending() -> None:
    storage = Mock()
    storage.list_reports_with_images.return_value = []

    result = RetentionService(storage).sweep()

    assert result.flagged == 0
    storage.set_report_images_deleted.assert_not_called()
