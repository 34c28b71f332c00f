import io

import numpy as np
import pytest
from PIL import Image

from shopfront_media.domain.entities.derivative import DerivativeRequest, ImageFormat
from shopfront_media.domain.services.transcode_service import TranscodeError, TranscodeService as TS
from tests.helpers.images import make_image_bytes, open_image


def _request(width=None, quality=80, fmt=ImageFormat.JPEG):
    return DerivativeRequest(source_path="shirt.jpg", width=width, quality=quality, format=fmt)


def test_resize_keeps_aspect_ratio():
    src = make_image_bytes(800, 1000)
    out = open_image(TS.transcode(src, _request(width=200)))
    assert out.format == "JPEG"
    assert out.size == (200, 250)


def test_never_upscales():
    src = make_image_bytes(120, 60)
    out = open_image(TS.transcode(src, _request(width=500)))
    assert out.size == (120, 60)


def test_webp_output():
    src = make_image_bytes(300, 300)
    out = open_image(TS.transcode(src, _request(width=150, fmt=ImageFormat.WEBP)))
    assert out.format == "WEBP"
    assert out.size == (150, 150)


def test_png_output_is_lossless():
    src = make_image_bytes(10, 10, color=(10, 200, 30), fmt="PNG")
    out = open_image(TS.transcode(src, _request(quality=90, fmt=ImageFormat.PNG)))
    assert out.format == "PNG"
    assert np.array_equal(np.asarray(out.convert("RGB")), np.asarray(open_image(src).convert("RGB")))


@pytest.mark.parametrize("quality, level", [(1, 0), (44, 4), (45, 5), (80, 8), (100, 9)])
def test_png_compress_level(quality, level):
    assert TS.png_compress_level(quality) == level


def test_jpeg_from_rgba_source():
    img = Image.new("RGBA", (40, 20), (255, 0, 0, 128))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    out = open_image(TS.transcode(buf.getvalue(), _request(fmt=ImageFormat.JPEG)))
    assert out.format == "JPEG"
    assert out.mode == "RGB"


def test_webp_keeps_palette_transparency():
    img = Image.new("P", (16, 16), 0)
    img.info["transparency"] = 0
    buf = io.BytesIO()
    img.save(buf, format="PNG", transparency=0)
    out = open_image(TS.transcode(buf.getvalue(), _request(fmt=ImageFormat.WEBP)))
    assert out.mode == "RGBA"


def test_lower_quality_gives_smaller_jpeg():
    rng = np.random.default_rng(0)
    arr = rng.integers(0, 255, size=(200, 200, 3), dtype=np.uint8)
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="PNG")
    low = TS.transcode(buf.getvalue(), _request(quality=10))
    high = TS.transcode(buf.getvalue(), _request(quality=95))
    assert len(low) < len(high)


def test_corrupt_input_raises_transcode_error():
    with pytest.raises(TranscodeError):
        TS.transcode(b"definitely not an image", _request(width=200))
