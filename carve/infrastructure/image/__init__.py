"""JPEG encoding and size optimization."""

from carve.infrastructure.image.jpeg_codec import PillowJpegCodec
from carve.infrastructure.image.optimizer import JpegOptimizer, OptimizedImage

__all__ = [
    "PillowJpegCodec",
    "JpegOptimizer",
    "OptimizedImage",
]
