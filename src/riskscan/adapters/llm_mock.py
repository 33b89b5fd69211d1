from __future__ import annotations

import json

from riskscan.ports.llm_port import LLMPort


class MockLLMAdapter(LLMPort):
    """Offline stand-in: returns a report with no detected tactics."""

    def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        _ = system_prompt
        _ = user_prompt
        _ = temperature
        _ = max_output_tokens
        return json.dumps(
            {
                "confidence": 0.0,
                "tactics": [],
                "receipts": [],
                "kpis": {},
                "narrative": "Language model not configured; no analysis performed.",
            }
        )
