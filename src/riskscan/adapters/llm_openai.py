from __future__ import annotations

import json

import requests

from riskscan.domain.errors import ClassificationError
from riskscan.ports.llm_port import LLMPort


class OpenAILLMAdapter(LLMPort):
    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout_seconds: float = 60.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        if not self._api_key:
            raise ClassificationError("OpenAI API key is not configured.")
        payload = self._post_response(
            [
                _input_message("system", system_prompt),
                _input_message("user", user_prompt),
            ],
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        return self._extract_output_text(payload)

    def _post_response(
        self,
        input_items: list[dict],
        temperature: float,
        max_output_tokens: int,
    ) -> dict:
        try:
            response = requests.post(
                f"{self._base_url}/responses",
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self._model,
                    "input": input_items,
                    "text": {"format": {"type": "json_object"}},
                    "temperature": temperature,
                    "max_output_tokens": max_output_tokens,
                },
                timeout=self._timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise ClassificationError(f"OpenAI request failed: {exc}") from exc
        except ValueError as exc:
            raise ClassificationError("OpenAI returned a non-JSON response body.") from exc
        if not isinstance(payload, dict):
            raise ClassificationError("OpenAI returned an unexpected response body.")
        return payload

    @staticmethod
    def _extract_output_text(payload: dict) -> str:
        """First text block of the response; JSON blocks are re-serialized.

        A refusal is raised rather than returned so the job records why no
        report exists.
        """

        direct_text = payload.get("output_text")
        if isinstance(direct_text, str) and direct_text.strip():
            return direct_text.strip()
        for item in payload.get("output") or []:
            if not isinstance(item, dict):
                continue
            for block in item.get("content") or []:
                if not isinstance(block, dict):
                    continue
                kind = block.get("type")
                if kind == "refusal":
                    raise ClassificationError(
                        f"Model refused the request: {block.get('refusal') or ''}".strip()
                    )
                if kind in ("output_text", "text"):
                    return (block.get("text") or "").strip()
                if kind == "output_json" and block.get("json") is not None:
                    return json.dumps(block["json"])
        return ""


def _input_message(role: str, text: str) -> dict:
    return {"role": role, "content": [{"type": "input_text", "text": text}]}
