from __future__ import annotations

from typing import Any

from riskscan.adapters.gcs_object_store import GCSObjectStore
from riskscan.adapters.llm_mock import MockLLMAdapter
from riskscan.adapters.llm_openai import OpenAILLMAdapter
from riskscan.adapters.ocr_tesseract_adapter import TesseractOCRAdapter
from riskscan.adapters.sqlite_storage import SQLiteStorage
from riskscan.domain.models import PlanLimits
from riskscan.services.classification_service import ClassificationService
from riskscan.services.dispatcher import Dispatcher
from riskscan.services.image_preprocessor import ImagePreprocessor
from riskscan.services.jobs_service import JobsService
from riskscan.services.ocr_service import TextExtractionService
from riskscan.services.pipeline_service import AnalysisPipeline
from riskscan.services.purge_service import PurgeService
from riskscan.services.retention_service import RetentionService
from riskscan.settings import (
    FREE_MAX_IMAGES,
    GCS_ACCESS_TOKEN,
    LLM_PROVIDER,
    LLM_TIMEOUT_SECONDS,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    OPENAI_MODEL,
    PRO_MAX_IMAGES,
    SQLITE_PATH,
    UPLOAD_BUCKET,
)


def build_services(sqlite_path: str | None = None) -> dict[str, Any]:
    storage = SQLiteStorage(sqlite_path or SQLITE_PATH)
    object_store = GCSObjectStore(UPLOAD_BUCKET, GCS_ACCESS_TOKEN)
    ocr = TesseractOCRAdapter()
    llm = MockLLMAdapter()
    if LLM_PROVIDER.lower() == "openai" and OPENAI_API_KEY:
        llm = OpenAILLMAdapter(
            api_key=OPENAI_API_KEY,
            model=OPENAI_MODEL,
            base_url=OPENAI_BASE_URL,
            timeout_seconds=LLM_TIMEOUT_SECONDS,
        )
    limits = PlanLimits(free_max=FREE_MAX_IMAGES, pro_max=PRO_MAX_IMAGES)

    extraction_service = TextExtractionService(object_store, ImagePreprocessor(), ocr)
    classification_service = ClassificationService(llm)
    purge_service = PurgeService(object_store)
    pipeline = AnalysisPipeline(
        storage=storage,
        extraction=extraction_service,
        classification=classification_service,
        purge=purge_service,
        limits=limits,
    )
    return {
        "pipeline": pipeline,
        "dispatcher": Dispatcher(pipeline),
        "jobs_service": JobsService(storage, limits),
        "retention_service": RetentionService(storage),
        "extraction_service": extraction_service,
        "classification_service": classification_service,
        "purge_service": purge_service,
        "limits": limits,
        "llm": llm,
        "ocr": ocr,
        "object_store": object_store,
        "storage": storage,
    }
