import io

import pytest
from PIL import Image

from riskscan.domain.errors import ImagePreprocessError
from riskscan.services.image_preprocessor import ImagePreprocessor


def _png_bytes(size=(40, 20), color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def test_preprocess_outputs_grayscale_jpeg() -> None:
    output = ImagePreprocessor(jpeg_quality=90).preprocess(_png_bytes())

    with Image.open(io.BytesIO(output)) as image:
        assert image.format == "JPEG"
        assert image.mode == "L"
        assert image.size == (40, 20)


def test_preprocess_is_deterministic() -> None:
    preprocessor = ImagePreprocessor()
    raw = _png_bytes()

    assert preprocessor.preprocess(raw) == preprocessor.preprocess(raw)


def test_preprocess_applies_exif_orientation() -> None:
    image = Image.new("RGB", (40, 20), (0, 0, 0))
    exif = image.getexif()
    exif[0x0112] = 6  # rotate 90 degrees clockwise on display
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", exif=exif.tobytes())

    output = ImagePreprocessor().preprocess(buffer.getvalue())

    with Image.open(io.BytesIO(output)) as result:
        assert result.size == (20, 40)


def test_preprocess_rejects_invalid_bytes() -> None:
    with pytest.raises(ImagePreprocessError):
        ImagePreprocessor().preprocess(b"definitely not an image")
