from __future__ import annotations

from typing import Protocol, runtime_checkable

from riskscan.domain.models import OCRResult


@runtime_checkable
class OCRPort(Protocol):
    def extract_text(self, image_bytes: bytes) -> OCRResult:
        """Extract full-document text from preprocessed image bytes."""
