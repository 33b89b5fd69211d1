from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LLMPort(Protocol):
    def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Run one JSON-mode completion and return the raw response text.

        Raises ClassificationError when the model cannot be reached.
        """
