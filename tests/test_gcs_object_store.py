import pytest
import requests

from riskscan.adapters import gcs_object_store
from riskscan.adapters.gcs_object_store import GCSObjectStore
from riskscan.domain.errors import PurgeError, TransientFetchError


class _FakeResponse:
    def __init__(self, status_code: int, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content


def _store() -> GCSObjectStore:
    return GCSObjectStore(bucket="uploads-bucket", access_token="token")


def test_download_bytes_requests_media(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def _fake_get(url, headers, params, timeout):
        captured["url"] = url
        captured["headers"] = headers
        captured["params"] = params
        return _FakeResponse(200, b"image-bytes")

    monkeypatch.setattr(gcs_object_store.requests, "get", _fake_get)

    assert _store().download_bytes("uploads/job-1/0.jpg") == b"image-bytes"
    assert captured["url"] == (
        "https://storage.googleapis.com/storage/v1/b/uploads-bucket/o/uploads%2Fjob-1%2F0.jpg"
    )
    assert captured["params"] == {"alt": "media"}
    assert captured["headers"] == {"Authorization": "Bearer token"}


@pytest.mark.parametrize("status_code", [403, 404, 500])
def test_download_bytes_raises_transient_fetch_error(monkeypatch, status_code) -> None:
    monkeypatch.setattr(
        gcs_object_store.requests,
        "get",
        lambda url, headers, params, timeout: _FakeResponse(status_code),
    )

    with pytest.raises(TransientFetchError):
        _store().download_bytes("uploads/job-1/0.jpg")


def test_download_bytes_wraps_connection_errors(monkeypatch) -> None:
    def _fake_get(url, headers, params, timeout):
        raise requests.ConnectionError("reset")

    monkeypatch.setattr(gcs_object_store.requests, "get", _fake_get)

    with pytest.raises(TransientFetchError):
        _store().download_bytes("uploads/job-1/0.jpg")


def test_delete_object_reports_found_and_missing(monkeypatch) -> None:
    responses = iter([_FakeResponse(204), _FakeResponse(404)])
    monkeypatch.setattr(
        gcs_object_store.requests, "delete", lambda url, headers, timeout: next(responses)
    )
    store = _store()

    assert store.delete_object("a.jpg") is True
    assert store.delete_object("a.jpg") is False


def test_delete_object_raises_purge_error(monkeypatch) -> None:
    monkeypatch.setattr(
        gcs_object_store.requests, "delete", lambda url, headers, timeout: _FakeResponse(403)
    )

    with pytest.raises(PurgeError):
        _store().delete_object("a.jpg")
