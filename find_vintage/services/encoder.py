"""Turn a captured image into provider-ready JPEG bytes."""

from __future__ import annotations

from io import BytesIO
from typing import Union

from PIL import Image, ImageOps

from find_vintage.logging import logger
from find_vintage.services.exceptions import EncodingError

MAX_SIDE_LENGTH = 1280
DEFAULT_QUALITY = 0.7

CapturedImage = Union[bytes, bytearray, memoryview, Image.Image]


def jpeg_quality(quality: float) -> int:
    """Map a compression factor in (0, 1] onto Pillow's JPEG scale."""

    if not 0.0 < quality <= 1.0:
        raise EncodingError(f"Quality must be in (0, 1], got {quality!r}")
    return max(1, min(95, round(quality * 100)))


class ImageEncoder:
    __slots__ = ("max_side_length",)

    def __init__(self, max_side_length: int | None = MAX_SIDE_LENGTH) -> None:
        self.max_side_length = max_side_length

    def encode(self, image: CapturedImage, quality: float = DEFAULT_QUALITY) -> bytes:
        jpeg_level = jpeg_quality(quality)
        if isinstance(image, Image.Image):
            return self._to_jpeg(image, jpeg_level)
        if not isinstance(image, (bytes, bytearray, memoryview)):
            raise EncodingError(f"Unsupported image type: {type(image).__name__}")
        raw = bytes(image)
        if not raw:
            raise EncodingError("Captured image is empty")
        try:
            with Image.open(BytesIO(raw)) as opened:
                opened.load()
                return self._to_jpeg(opened, jpeg_level)
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            logger.warning("image_decode_failed", size=len(raw), error=str(exc))
            raise EncodingError("Captured image could not be decoded") from exc

    def _to_jpeg(self, image: Image.Image, jpeg_level: int) -> bytes:
        if image.width == 0 or image.height == 0:
            raise EncodingError("Captured image has no pixels")
        try:
            image = ImageOps.exif_transpose(image)
            if self.max_side_length and max(image.size) > self.max_side_length:
                image = image.copy()
                image.thumbnail((self.max_side_length, self.max_side_length))
            if image.mode == "P" and "transparency" in image.info:
                image = image.convert("RGBA")
            if image.mode not in ("RGB", "RGBA"):
                image = image.convert("RGBA") if "A" in image.mode else image.convert("RGB")
            if image.mode == "RGBA":
                background = Image.new("RGBA", image.size, (255, 255, 255, 255))
                background.paste(image, mask=image.split()[3])
                image = background.convert("RGB")
            buffer = BytesIO()
            image.save(buffer, format="JPEG", quality=jpeg_level, optimize=True)
        except (OSError, ValueError) as exc:
            logger.warning("image_encode_failed", mode=image.mode, error=str(exc))
            raise EncodingError("Captured image could not be encoded as JPEG") from exc
        payload = buffer.getvalue()
        if not payload:
            raise EncodingError("JPEG encoder produced no data")
        return payload


__all__ = ["CapturedImage", "DEFAULT_QUALITY", "ImageEncoder", "MAX_SIDE_LENGTH", "jpeg_quality"]
