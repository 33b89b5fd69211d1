from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from time import perf_counter

from riskscan.domain.models import FileRef
from riskscan.domain.text_cleaner import clean_text, join_texts
from riskscan.ports.object_store_port import ObjectStorePort
from riskscan.ports.ocr_port import OCRPort
from riskscan.services.image_preprocessor import ImagePreprocessor
from riskscan.settings import OCR_WORKERS

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    text: str
    processed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class TextExtractionService:
    def __init__(
        self,
        object_store: ObjectStorePort,
        preprocessor: ImagePreprocessor,
        ocr: OCRPort,
        workers: int | None = None,
    ) -> None:
        self._object_store = object_store
        self._preprocessor = preprocessor
        self._ocr = ocr
        self._workers = workers if workers is not None else OCR_WORKERS

    def extract(self, files: list[FileRef]) -> ExtractionResult:
        """OCR every file in order, skipping files that fail, and clean the result."""

        if not files:
            return ExtractionResult(text=clean_text(""))
        run_mode = "serial" if self._workers <= 1 or len(files) <= 1 else "parallel"
        started = perf_counter()
        if run_mode == "serial":
            texts = [self._extract_one(file_ref) for file_ref in files]
        else:
            with ThreadPoolExecutor(max_workers=min(self._workers, len(files))) as executor:
                # map() yields in submission order, which keeps file order.
                texts = list(executor.map(self._extract_one, files))

        result = ExtractionResult(text="")
        successful: list[str] = []
        for file_ref, text in zip(files, texts):
            if text is None:
                result.skipped.append(file_ref.path)
                continue
            result.processed.append(file_ref.path)
            successful.append(text)
        result.text = clean_text(join_texts(successful))
        logger.info(
            "ocr finished mode=%s processed=%d skipped=%d duration_ms=%d",
            run_mode,
            len(result.processed),
            len(result.skipped),
            int((perf_counter() - started) * 1000),
        )
        return result

    def _extract_one(self, file_ref: FileRef) -> str | None:
        try:
            raw = self._object_store.download_bytes(file_ref.path)
            prepared = self._preprocessor.preprocess(raw)
            result = self._ocr.extract_text(prepared)
        except Exception as exc:
            logger.warning("skipping file %s: %s", file_ref.path, exc)
            return None
        return result.text or ""
