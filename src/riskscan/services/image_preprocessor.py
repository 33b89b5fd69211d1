from __future__ import annotations

import io

from PIL import Image, ImageFilter, ImageOps, UnidentifiedImageError

from riskscan.domain.errors import ImagePreprocessError
from riskscan.settings import JPEG_QUALITY


class ImagePreprocessor:
    """Normalize a screenshot for text recognition.

    Applies EXIF orientation, converts to grayscale, sharpens, and re-encodes
    as JPEG at a fixed quality. The same input bytes always produce the same
    output bytes.
    """

    def __init__(self, jpeg_quality: int | None = None) -> None:
        self._jpeg_quality = jpeg_quality or JPEG_QUALITY

    def preprocess(self, image_bytes: bytes) -> bytes:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                img = ImageOps.exif_transpose(image)
                img = img.convert("L")
                img = img.filter(ImageFilter.SHARPEN)
                buffer = io.BytesIO()
                img.save(buffer, format="JPEG", quality=self._jpeg_quality)
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise ImagePreprocessError("Failed to preprocess image bytes.") from exc
        return buffer.getvalue()
