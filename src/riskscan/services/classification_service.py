from __future__ import annotations

import json
import logging

from riskscan.domain.taxonomy import (
    DEFAULT_INSTRUCTIONS,
    MAX_EXAMPLES_PER_TACTIC,
    MAX_QUOTE_LENGTH,
    MAX_RECEIPTS,
    SYSTEM_PROMPT,
    TACTIC_IDS,
)
from riskscan.ports.llm_port import LLMPort
from riskscan.settings import LLM_MAX_OUTPUT_TOKENS, LLM_TEMPERATURE

logger = logging.getLogger(__name__)


class ClassificationService:
    def __init__(
        self,
        llm: LLMPort,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> None:
        self._llm = llm
        self._temperature = LLM_TEMPERATURE if temperature is None else temperature
        self._max_output_tokens = max_output_tokens or LLM_MAX_OUTPUT_TOKENS

    def classify(self, text: str, instructions: str | None = None) -> dict:
        """Ask the model for tactics in ``text``; malformed output becomes ``{}``.

        Transport failures propagate as ClassificationError.
        """

        user_prompt = self.build_user_prompt(text, instructions)
        content = self._llm.complete_json(
            SYSTEM_PROMPT,
            user_prompt,
            temperature=self._temperature,
            max_output_tokens=self._max_output_tokens,
        )
        parsed = extract_json_object(content)
        if not parsed:
            logger.warning("classifier output was empty or unparseable (%d chars)", len(content or ""))
        return parsed

    @staticmethod
    def build_user_prompt(text: str, instructions: str | None = None) -> str:
        override = instructions.strip() if isinstance(instructions, str) else ""
        payload = {
            "instructions": override or DEFAULT_INSTRUCTIONS,
            "taxonomy": list(TACTIC_IDS),
            "constraints": {
                "max_examples_per_tactic": MAX_EXAMPLES_PER_TACTIC,
                "max_quote_length": MAX_QUOTE_LENGTH,
                "max_receipts": MAX_RECEIPTS,
            },
            "text": text,
        }
        return json.dumps(payload, ensure_ascii=False)


def extract_json_object(text: str | None) -> dict:
    """Parse the span between the first ``{`` and the last ``}``; ``{}`` on failure."""

    if not text:
        return {}
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return {}
    try:
        data = json.loads(text[start : end + 1])
    except (ValueError, RecursionError):
        # ValueError also covers integer literals past the digit limit.
        return {}
    return data if isinstance(data, dict) else {}
