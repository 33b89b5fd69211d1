from __future__ import annotations

import base64
import json
import logging

from riskscan.services.pipeline_service import AnalysisPipeline

logger = logging.getLogger(__name__)


def decode_job_id(envelope: object) -> str | None:
    """Pull ``jobId`` out of a push envelope ``{"message": {"data": <base64 JSON>}}``."""

    if not isinstance(envelope, dict):
        return None
    message = envelope.get("message")
    if not isinstance(message, dict):
        return None
    data = message.get("data")
    if not isinstance(data, str) or not data:
        return None
    try:
        decoded = base64.b64decode(data, validate=False).decode("utf-8")
        payload = json.loads(decoded)
    except (ValueError, RecursionError):
        return None
    if not isinstance(payload, dict):
        return None
    job_id = payload.get("jobId")
    if not isinstance(job_id, str) or not job_id.strip():
        return None
    return job_id.strip()


class Dispatcher:
    def __init__(self, pipeline: AnalysisPipeline) -> None:
        self._pipeline = pipeline

    def handle_push(self, envelope: object) -> None:
        """Process one inbound job reference. Returns normally for every input."""

        job_id = decode_job_id(envelope)
        if job_id is None:
            logger.warning("dropping malformed push envelope")
            return
        message_id = None
        if isinstance(envelope, dict) and isinstance(envelope.get("message"), dict):
            message_id = envelope["message"].get("messageId") or envelope["message"].get("message_id")
        logger.info("received job %s (message %s)", job_id, message_id)
        status = self._pipeline.process_job(job_id)
        logger.info("job %s finished with status %s", job_id, getattr(status, "value", status))
