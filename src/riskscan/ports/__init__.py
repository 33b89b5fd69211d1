from .llm_port import LLMPort
from .object_store_port import ObjectStorePort
from .ocr_port import OCRPort
from .storage_port import StoragePort

__all__ = ["LLMPort", "OCRPort", "ObjectStorePort", "StoragePort"]
