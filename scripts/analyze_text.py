from __future__ import annotations

import argparse
import json
from pathlib import Path

from dotenv import load_dotenv

_REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(_REPO_ROOT / ".env", override=False)

from riskscan.adapters.llm_mock import MockLLMAdapter
from riskscan.adapters.llm_openai import OpenAILLMAdapter
from riskscan.domain.report_normalizer import normalize_report
from riskscan.domain.text_cleaner import clean_text
from riskscan.services.classification_service import ClassificationService


def _build_llm_adapter():
    from riskscan.settings import (
        LLM_PROVIDER,
        LLM_TIMEOUT_SECONDS,
        OPENAI_API_KEY,
        OPENAI_BASE_URL,
        OPENAI_MODEL,
    )

    if LLM_PROVIDER.lower() == "openai" and OPENAI_API_KEY:
        return OpenAILLMAdapter(
            api_key=OPENAI_API_KEY,
            model=OPENAI_MODEL,
            base_url=OPENAI_BASE_URL,
            timeout_seconds=LLM_TIMEOUT_SECONDS,
        )
    return MockLLMAdapter()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Classify a transcript text file and print the normalized report."
    )
    parser.add_argument("--text", required=True, help="Path to transcript/OCR text file.")
    parser.add_argument("--instructions", default=None, help="Optional instruction override.")
    parser.add_argument("--raw", action="store_true", help="Also print the raw model object.")
    args = parser.parse_args()

    text = clean_text(Path(args.text).read_text())
    service = ClassificationService(_build_llm_adapter())
    raw = service.classify(text, args.instructions)
    if args.raw:
        print("Raw model output:")
        print(json.dumps(raw, indent=2))
    print(json.dumps(normalize_report(raw).to_dict(), indent=2))


if __name__ == "__main__":
    main()
