"""
Image size optimization for completion requests.

Re-encodes a photo at decreasing JPEG quality until it fits the
payload budget.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Optional

import structlog

from carve.domain.meal.analysis.ports import IImageCodec
from carve.domain.shared.errors import InvalidInputError
from carve.infrastructure.image.jpeg_codec import PillowJpegCodec

logger = structlog.get_logger(__name__)

MAX_IMAGE_BYTES = 1024 * 1024  # 1 MiB

# Quality in tenths: 1.0 down to 0.1
_START_QUALITY_TENTHS = 10
_MIN_QUALITY_TENTHS = 1


@dataclass(frozen=True)
class OptimizedImage:
    """Encoded JPEG and the quality it was encoded at."""

    data: bytes
    quality: float
    encodings: int

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


class JpegOptimizer:
    """
    Quality-stepping JPEG compressor.

    Starts at quality 1.0 and steps down by 0.1 while the output exceeds
    ``max_bytes``. At the 0.1 floor the image is returned whatever its
    size, so at most 10 encodings are done.

    Example:
        >>> optimizer = JpegOptimizer()
        >>> optimized = optimizer.optimize(photo_bytes)
        >>> assert optimized.size_bytes <= MAX_IMAGE_BYTES or optimized.quality == 0.1
    """

    def __init__(
        self,
        codec: Optional[IImageCodec] = None,
        max_bytes: int = MAX_IMAGE_BYTES,
    ) -> None:
        self.codec = codec or PillowJpegCodec()
        self.max_bytes = max_bytes

    def optimize(self, raw: bytes) -> OptimizedImage:
        """
        Compress raw image bytes to the size budget.

        Raises:
            InvalidInputError: If the bytes cannot be decoded
        """
        try:
            image = self.codec.decode(raw)
        except ValueError as exc:
            raise InvalidInputError(f"Image could not be decoded: {exc}") from exc

        tenths = _START_QUALITY_TENTHS
        data = self.codec.encode(image, tenths / 10)
        encodings = 1
        while len(data) > self.max_bytes and tenths > _MIN_QUALITY_TENTHS:
            tenths -= 1
            data = self.codec.encode(image, tenths / 10)
            encodings += 1

        logger.debug(
            "Image optimized",
            original_bytes=len(raw),
            final_bytes=len(data),
            quality=tenths / 10,
            encodings=encodings,
            within_budget=len(data) <= self.max_bytes,
        )
        return OptimizedImage(data=data, quality=tenths / 10, encodings=encodings)
