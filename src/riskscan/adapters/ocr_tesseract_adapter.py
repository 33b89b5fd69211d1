from __future__ import annotations

import io
import re

from riskscan.domain.errors import OCRError
from riskscan.domain.models import OCRResult
from riskscan.ports.ocr_port import OCRPort
from riskscan.settings import OCR_LANG

# Uniform block of text: chat bubbles read top to bottom.
_TESSERACT_CONFIG = "--oem 1 --psm 6"
_ROTATE_RE = re.compile(r"Rotate:\s*(\d+)")


class TesseractOCRAdapter(OCRPort):
    """Screenshot OCR via a single ``image_to_data`` pass.

    Words are regrouped into Tesseract's own lines so bubble boundaries survive,
    and the same pass yields the mean word confidence (0..1).
    """

    def __init__(self, language: str | None = None) -> None:
        self._language = language or OCR_LANG

    def extract_text(self, image_bytes: bytes) -> OCRResult:
        try:
            import pytesseract
            from PIL import Image
        except ImportError as exc:
            raise OCRError(
                "pytesseract and Pillow are required for OCR. "
                "Install with: pip install pytesseract pillow"
            ) from exc

        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except Exception as exc:
            raise OCRError("Failed to load screenshot for OCR.") from exc

        try:
            image = self._upright(image, pytesseract)
            data = pytesseract.image_to_data(
                image,
                lang=self._language,
                config=_TESSERACT_CONFIG,
                output_type=pytesseract.Output.DICT,
            )
        except pytesseract.TesseractNotFoundError as exc:
            raise OCRError(
                "Tesseract OCR engine not found. Install tesseract-ocr and ensure it is on PATH."
            ) from exc
        except Exception as exc:
            raise OCRError("Failed to run OCR on screenshot.") from exc
        return OCRResult(text=_lines_from_data(data), confidence=_mean_confidence(data))

    def _upright(self, image: object, pytesseract: object) -> object:
        try:
            osd = pytesseract.image_to_osd(image, lang=self._language)
        except pytesseract.TesseractError:
            # OSD needs more text than most screenshots carry.
            return image
        match = _ROTATE_RE.search(osd)
        if not match or int(match.group(1)) == 0:
            return image
        return image.rotate(-int(match.group(1)), expand=True)


def _lines_from_data(data: dict) -> str:
    lines: dict[tuple[int, int, int], list[str]] = {}
    words = data.get("text", [])
    for index, word in enumerate(words):
        word = (word or "").strip()
        if not word:
            continue
        key = (
            _index_value(data, "block_num", index),
            _index_value(data, "par_num", index),
            _index_value(data, "line_num", index),
        )
        lines.setdefault(key, []).append(word)

    output: list[str] = []
    previous_block = None
    for key in sorted(lines):
        if previous_block is not None and key[0] != previous_block:
            output.append("")
        output.append(" ".join(lines[key]))
        previous_block = key[0]
    return "\n".join(output)


def _mean_confidence(data: dict) -> float | None:
    values: list[float] = []
    for value in data.get("conf", []):
        try:
            confidence = float(value)
        except (TypeError, ValueError):
            continue
        if confidence >= 0:
            values.append(confidence)
    if not values:
        return None
    return sum(values) / len(values) / 100.0


def _index_value(data: dict, key: str, index: int) -> int:
    column = data.get(key, [])
    try:
        return int(column[index])
    except (IndexError, TypeError, ValueError):
        return 0
