from __future__ import annotations

import io
import logging

from PIL import Image

from .errors import DecodingError, EncodingError

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 90
_CONVERT_TO_RGB_MODES = frozenset({"RGBA", "LA", "P", "PA"})


class JpegCodec:
    """Lossy JPEG codec used for selfie images."""

    suffix = ".jpg"

    def __init__(self, quality: int = DEFAULT_JPEG_QUALITY) -> None:
        if not 1 <= quality <= 95:
            raise ValueError("quality must be between 1 and 95")
        self.quality = quality

    def encode(self, image: object) -> bytes:
        if not isinstance(image, Image.Image):
            raise EncodingError(image, "not a PIL image")

        source = image
        if source.mode in _CONVERT_TO_RGB_MODES:
            source = source.convert("RGB")

        buffer = io.BytesIO()
        try:
            source.save(buffer, format="JPEG", quality=self.quality)
        except (OSError, ValueError) as exc:
            logger.warning("jpeg_codec encode failed mode=%s error=%s", image.mode, exc)
            raise EncodingError(image, str(exc)) from exc
        return buffer.getvalue()

    def decode(self, data: bytes) -> Image.Image:
        try:
            with Image.open(io.BytesIO(data)) as opened:
                opened.load()
                return opened.copy()
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodingError(f"Cannot decode image data: {exc}") from exc
