from __future__ import annotations

from io import BytesIO

from PIL import Image

from shopfront_media.domain.entities.derivative import DerivativeRequest, ImageFormat


class TranscodeError(Exception):
    """Decoding, resizing or encoding a source image failed."""


class TranscodeService:
    """Pillow resize + re-encode pipeline for image derivatives.

    Output formats:
    - webp: lossy at the requested quality
    - png: lossless, quality mapped to zlib compress level (quality / 10)
    - jpeg: lossy at the requested quality, optimized progressive encoding
    """

    # Fit inside `width` keeping aspect ratio. Never upscales.
    @staticmethod
    def resize_to_width(img: Image.Image, width: int) -> Image.Image:
        if img.width <= width:
            return img
        height = max(1, round(img.height * width / img.width))
        return img.resize((width, height), Image.Resampling.LANCZOS)

    # quality 1..100 -> compress level 0..9, rounding half up
    @staticmethod
    def png_compress_level(quality: int) -> int:
        return min(max(int(quality / 10 + 0.5), 0), 9)

    @staticmethod
    def encode(img: Image.Image, fmt: ImageFormat, quality: int) -> bytes:
        buf = BytesIO()
        if fmt is ImageFormat.WEBP:
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA" if _has_alpha(img) else "RGB")
            img.save(buf, format="WEBP", quality=quality)
        elif fmt is ImageFormat.PNG:
            if img.mode == "CMYK":
                img = img.convert("RGB")
            img.save(buf, format="PNG", compress_level=TranscodeService.png_compress_level(quality))
        else:
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            img.save(buf, format="JPEG", quality=quality, optimize=True, progressive=True)
        return buf.getvalue()

    @staticmethod
    def transcode(data: bytes, request: DerivativeRequest) -> bytes:
        """Decode `data`, apply the requested width and encode to the requested format.

        Raises:
            TranscodeError: for any failure; callers fall back to the original file.
        """
        try:
            with Image.open(BytesIO(data)) as img:
                img.load()
                out = img
                if request.width is not None:
                    out = TranscodeService.resize_to_width(img, request.width)
                return TranscodeService.encode(out, request.format, request.quality)
        except Exception as exc:
            raise TranscodeError(f"Cannot transcode {request.source_path}: {exc}") from exc


def _has_alpha(img: Image.Image) -> bool:
    return "A" in img.getbands() or "transparency" in img.info
