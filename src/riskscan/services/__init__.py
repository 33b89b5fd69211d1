from .classification_service import ClassificationService
from .dispatcher import Dispatcher
from .image_preprocessor import ImagePreprocessor
from .jobs_service import JobsService
from .ocr_service import TextExtractionService
from .pipeline_service import AnalysisPipeline
from .purge_service import PurgeService
from .retention_service import RetentionService

__all__ = [
    "AnalysisPipeline",
    "ClassificationService",
    "Dispatcher",
    "ImagePreprocessor",
    "JobsService",
    "PurgeService",
    "RetentionService",
    "TextExtractionService",
]
