import base64
import json
from unittest.mock import Mock

from fastapi.testclient import TestClient

from riskscan.domain.models import JobStatus
from riskscan.services.dispatcher import Dispatcher, decode_job_id
from riskscan.worker_api import create_app


def _envelope(payload: object) -> dict:
    data = base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")
    return {"message": {"data": data, "messageId": "m-1"}, "subscription": "projects/p/subscriptions/s"}


def test_decode_job_id_reads_base64_payload() -> None:
    assert decode_job_id(_envelope({"jobId": "job-1"})) == "job-1"


def test_decode_job_id_rejects_malformed_envelopes() -> None:
    assert decode_job_id(None) is None
    assert decode_job_id({}) is None
    assert decode_job_id({"message": {}}) is None
    assert decode_job_id({"message": {"data": "%%% not base64 %%%"}}) is None
    assert decode_job_id(_envelope(["job-1"])) is None
    assert decode_job_id(_envelope({"jobId": ""})) is None
    assert decode_job_id(_envelope({"job": "job-1"})) is None


def test_dispatcher_runs_pipeline_for_valid_envelope() -> None:
    pipeline = Mock()
    pipeline.process_job.return_value = JobStatus.COMPLETE

    Dispatcher(pipeline).handle_push(_envelope({"jobId": "job-1"}))

    pipeline.process_job.assert_called_once_with("job-1")


def test_dispatcher_drops_malformed_envelope() -> None:
    pipeline = Mock()

    Dispatcher(pipeline).handle_push({"message": {"data": ""}})

    pipeline.process_job.assert_not_called()


def _client(pipeline) -> TestClient:
    return TestClient(create_app({"dispatcher": Dispatcher(pipeline)}))


def test_push_endpoint_acknowledges_success() -> None:
    pipeline = Mock()
    pipeline.process_job.return_value = JobStatus.COMPLETE

    response = _client(pipeline).post("/_pubsub/analyze", json=_envelope({"jobId": "job-1"}))

    assert response.status_code == 200
    assert response.text == "ok"
    pipeline.process_job.assert_called_once_with("job-1")


def test_push_endpoint_acknowledges_failed_job() -> None:
    pipeline = Mock()
    pipeline.process_job.return_value = JobStatus.ERROR

    response = _client(pipeline).post("/_pubsub/analyze", json=_envelope({"jobId": "job-1"}))

    assert response.status_code == 200


def test_push_endpoint_acknowledges_unexpected_exception() -> None:
    pipeline = Mock()
    pipeline.process_job.side_effect = RuntimeError("should never escape")

    response = _client(pipeline).post("/_pubsub/analyze", json=_envelope({"jobId": "job-1"}))

    assert response.status_code == 200


def test_push_endpoint_acknowledges_garbage_body() -> None:
    pipeline = Mock()
    client = _client(pipeline)

    not_json = client.post(
        "/_pubsub/analyze", content=b"not json", headers={"Content-Type": "application/json"}
    )
    empty = client.post("/_pubsub/analyze")
    deeply_nested = client.post(
        "/_pubsub/analyze", content=b"[" * 100000, headers={"Content-Type": "application/json"}
    )

    assert not_json.status_code == 200
    assert empty.status_code == 200
    assert deeply_nested.status_code == 200
    pipeline.process_job.assert_not_called()


def test_healthz() -> None:
    response = _client(Mock()).get("/healthz")

    assert response.status_code == 200
    assert response.text == "ok"


def test_decode_job_id_rejects_deeply_nested_payload() -> None:
    data = base64.b64encode(b"[" * 100000).decode("ascii")

    assert decode_job_id({"message": {"data": data}}) is None
