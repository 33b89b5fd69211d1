from .gcs_object_store import GCSObjectStore
from .llm_mock import MockLLMAdapter
from .llm_openai import OpenAILLMAdapter
from .ocr_tesseract_adapter import TesseractOCRAdapter
from .sqlite_storage import SQLiteStorage

__all__ = [
    "GCSObjectStore",
    "MockLLMAdapter",
    "OpenAILLMAdapter",
    "SQLiteStorage",
    "TesseractOCRAdapter",
]
