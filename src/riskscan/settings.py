from __future__ import annotations

import os

SQLITE_PATH = os.getenv("SQLITE_PATH", "./riskscan.db")

UPLOAD_BUCKET = os.getenv("UPLOAD_BUCKET", "")
GCS_ACCESS_TOKEN = os.getenv("GCS_ACCESS_TOKEN", "")

FREE_MAX_IMAGES = int(os.getenv("FREE_MAX_IMAGES", "3"))
PRO_MAX_IMAGES = int(os.getenv("PRO_MAX_IMAGES", "15"))

LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.2"))
LLM_MAX_OUTPUT_TOKENS = int(os.getenv("LLM_MAX_OUTPUT_TOKENS", "1500"))
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

OCR_LANG = os.getenv("OCR_LANG", "eng")
OCR_WORKERS = int(os.getenv("OCR_WORKERS", "1"))
PURGE_WORKERS = int(os.getenv("PURGE_WORKERS", "8"))
JPEG_QUALITY = int(os.getenv("JPEG_QUALITY", "90"))

ERROR_DETAIL_MAX_CHARS = int(os.getenv("ERROR_DETAIL_MAX_CHARS", "500"))
RETENTION_MINUTES = int(os.getenv("RETENTION_MINUTES", "60"))
SWEEP_BATCH_SIZE = int(os.getenv("SWEEP_BATCH_SIZE", "20"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
WORKER_HOST = os.getenv("WORKER_HOST", "0.0.0.0")
WORKER_PORT = int(os.getenv("WORKER_PORT", os.getenv("PORT", "8080")))
