import json

import pytest
import requests

from riskscan.adapters import llm_openai
from riskscan.adapters.llm_mock import MockLLMAdapter
from riskscan.adapters.llm_openai import OpenAILLMAdapter
from riskscan.domain.errors import ClassificationError


def _adapter(api_key: str = "test") -> OpenAILLMAdapter:
    return OpenAILLMAdapter(api_key=api_key, model="mock", base_url="https://example.com/")


class _FakeResponse:
    def __init__(self, payload: object, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> object:
        return self._payload


def test_complete_json_posts_json_mode_request(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def _fake_post(url, headers, json, timeout):
        captured["url"] = url
        captured["body"] = json
        captured["timeout"] = timeout
        return _FakeResponse({"output_text": '{"tactics": []}'})

    monkeypatch.setattr(llm_openai.requests, "post", _fake_post)
    adapter = _adapter()

    content = adapter.complete_json("sys", "user", temperature=0.2, max_output_tokens=1500)

    assert content == '{"tactics": []}'
    assert captured["url"] == "https://example.com/responses"
    body = captured["body"]
    assert body["model"] == "mock"
    assert body["temperature"] == 0.2
    assert body["max_output_tokens"] == 1500
    assert body["text"] == {"format": {"type": "json_object"}}
    assert body["input"][0] == {
        "role": "system",
        "content": [{"type": "input_text", "text": "sys"}],
    }


def test_complete_json_raises_on_transport_failure(monkeypatch) -> None:
    def _fake_post(url, headers, json, timeout):
        raise requests.ConnectionError("boom")

    monkeypatch.setattr(llm_openai.requests, "post", _fake_post)

    with pytest.raises(ClassificationError):
        _adapter().complete_json("sys", "user", temperature=0.2, max_output_tokens=10)


def test_complete_json_raises_on_http_error(monkeypatch) -> None:
    monkeypatch.setattr(
        llm_openai.requests,
        "post",
        lambda url, headers, json, timeout: _FakeResponse({}, status_code=500),
    )

    with pytest.raises(ClassificationError):
        _adapter().complete_json("sys", "user", temperature=0.2, max_output_tokens=10)


def test_complete_json_requires_api_key() -> None:
    with pytest.raises(ClassificationError, match="not configured"):
        _adapter(api_key="").complete_json("sys", "user", temperature=0.2, max_output_tokens=10)


def test_extract_output_text_reads_output_blocks() -> None:
    payload = {
        "output": [
            {"type": "reasoning", "content": []},
            {"type": "message", "content": [{"type": "output_text", "text": ' {"a": 1} '}]},
        ]
    }

    assert OpenAILLMAdapter._extract_output_text(payload) == '{"a": 1}'


def test_extract_output_text_serializes_json_blocks() -> None:
    payload = {"output": [{"content": [{"type": "output_json", "json": {"a": 1}}]}]}

    assert json.loads(OpenAILLMAdapter._extract_output_text(payload)) == {"a": 1}


def test_extract_output_text_empty_when_missing() -> None:
    assert OpenAILLMAdapter._extract_output_text({}) == ""


def test_mock_adapter_returns_empty_tactics() -> None:
    content = MockLLMAdapter().complete_json("sys", "user", temperature=0.2, max_output_tokens=10)

    assert json.loads(content)["tactics"] == []


def test_extract_output_text_raises_on_refusal() -> None:
    payload = {"output": [{"content": [{"type": "refusal", "refusal": "I can't help with that."}]}]}

    with pytest.raises(ClassificationError, match="refused"):
        OpenAILLMAdapter._extract_output_text(payload)
