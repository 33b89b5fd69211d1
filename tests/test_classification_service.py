import json
from unittest.mock import Mock

import pytest

from riskscan.domain.errors import ClassificationError
from riskscan.domain.taxonomy import DEFAULT_INSTRUCTIONS, SYSTEM_PROMPT, TACTIC_IDS
from riskscan.services.classification_service import (
    ClassificationService,
    extract_json_object,
)


def test_extract_json_object_scans_first_and_last_brace() -> None:
    text = 'Sure! Here is the report:\n```json\n{"tactics": [{"id": "threats"}]}\n```'

    assert extract_json_object(text) == {"tactics": [{"id": "threats"}]}


@pytest.mark.parametrize(
    "text",
    [
        None,
        "",
        "no json here",
        "} backwards {",
        "{not: valid}",
        "[1, 2, 3]",
        '{"a": 1',
        '{"kpis": {"n": ' + "9" * 5000 + "}}",
        "{" + '"a": [' * 100000 + "}",
    ],
)
def test_extract_json_object_degrades_to_empty(text) -> None:
    assert extract_json_object(text) == {}


def test_classify_uses_default_instructions_and_taxonomy() -> None:
    llm = Mock()
    llm.complete_json.return_value = '{"confidence": 0.5}'
    service = ClassificationService(llm, temperature=0.2, max_output_tokens=900)

    result = service.classify("hello there")

    assert result == {"confidence": 0.5}
    args, kwargs = llm.complete_json.call_args
    assert args[0] == SYSTEM_PROMPT
    payload = json.loads(args[1])
    assert payload["instructions"] == DEFAULT_INSTRUCTIONS
    assert payload["taxonomy"] == list(TACTIC_IDS)
    assert len(payload["taxonomy"]) == 12
    assert payload["text"] == "hello there"
    assert payload["constraints"]["max_examples_per_tactic"] == 5
    assert kwargs == {"temperature": 0.2, "max_output_tokens": 900}


def test_classify_prefers_job_instruction_override() -> None:
    llm = Mock()
    llm.complete_json.return_value = "{}"
    service = ClassificationService(llm)

    service.classify("text", instructions="  Focus on threats only.  ")

    payload = json.loads(llm.complete_json.call_args[0][1])
    assert payload["instructions"] == "Focus on threats only."
    assert payload["taxonomy"] == list(TACTIC_IDS)


def test_blank_override_falls_back_to_default() -> None:
    llm = Mock()
    llm.complete_json.return_value = "{}"
    service = ClassificationService(llm)

    service.classify("text", instructions="   ")

    payload = json.loads(llm.complete_json.call_args[0][1])
    assert payload["instructions"] == DEFAULT_INSTRUCTIONS


def test_default_instructions_describe_output_schema() -> None:
    for key in ("confidence", "tactics", "likelihood", "severity", "frequency", "receipts", "kpis"):
        assert key in DEFAULT_INSTRUCTIONS


def test_classify_returns_empty_object_for_garbage_output() -> None:
    llm = Mock()
    llm.complete_json.return_value = "I'm sorry, I can't help with that."
    service = ClassificationService(llm)

    assert service.classify("text") == {}


def test_classify_propagates_transport_failures() -> None:
    llm = Mock()
    llm.complete_json.side_effect = ClassificationError("timeout")
    service = ClassificationService(llm)

    with pytest.raises(ClassificationError):
        service.classify("text")
