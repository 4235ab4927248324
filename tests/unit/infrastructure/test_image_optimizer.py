"""
Unit tests for JPEG codec and size optimizer.
"""

import io
from typing import Any, List

import pytest
from PIL import Image

from carve.domain.shared.errors import InvalidInputError
from carve.infrastructure.image.jpeg_codec import PillowJpegCodec
from carve.infrastructure.image.optimizer import (
    MAX_IMAGE_BYTES,
    JpegOptimizer,
)


class SizedCodec:
    """Codec whose output size is a function of quality."""

    def __init__(self, size_at: Any) -> None:
        self.size_at = size_at
        self.qualities: List[float] = []

    def decode(self, data: bytes) -> str:
        return "image"

    def encode(self, image: Any, quality: float) -> bytes:
        self.qualities.append(quality)
        return b"x" * self.size_at(quality)


class TestPillowJpegCodec:
    def test_roundtrip_produces_jpeg(self, small_jpeg: bytes) -> None:
        codec = PillowJpegCodec()
        data = codec.encode(codec.decode(small_jpeg), quality=0.8)
        assert data[:2] == b"\xff\xd8"

    def test_alpha_image_flattened_to_rgb(self, png_with_alpha: bytes) -> None:
        codec = PillowJpegCodec()
        image = codec.decode(png_with_alpha)
        assert image.mode == "RGB"
        assert image.size == (64, 48)

    def test_max_dimension_downscales(self, small_jpeg: bytes) -> None:
        codec = PillowJpegCodec(max_dimension=100)
        image = codec.decode(small_jpeg)
        assert max(image.size) == 100

    def test_garbage_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="Unreadable image"):
            PillowJpegCodec().decode(b"\x00\x01\x02")

    def test_decompression_bomb_raises_value_error(self, small_jpeg: bytes, monkeypatch) -> None:
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        with pytest.raises(ValueError, match="Unreadable image"):
            PillowJpegCodec().decode(small_jpeg)

    def test_lower_quality_is_smaller(self, small_jpeg: bytes) -> None:
        codec = PillowJpegCodec()
        image = codec.decode(small_jpeg)
        assert len(codec.encode(image, 0.3)) < len(codec.encode(image, 1.0))


class TestJpegOptimizer:
    def test_small_image_encoded_once_at_full_quality(self) -> None:
        codec = SizedCodec(lambda q: 1000)
        optimized = JpegOptimizer(codec=codec).optimize(b"raw")

        assert codec.qualities == [1.0]
        assert optimized.quality == 1.0
        assert optimized.encodings == 1

    def test_steps_down_by_tenths_until_within_budget(self) -> None:
        # Fits only at quality <= 0.6
        codec = SizedCodec(lambda q: 2000 if q > 0.65 else 500)
        optimized = JpegOptimizer(codec=codec, max_bytes=1000).optimize(b"raw")

        assert codec.qualities == [1.0, 0.9, 0.8, 0.7, 0.6]
        assert optimized.quality == 0.6
        assert optimized.size_bytes == 500

    def test_floor_returns_oversized_image_after_ten_encodings(self) -> None:
        codec = SizedCodec(lambda q: 5000)
        optimized = JpegOptimizer(codec=codec, max_bytes=1000).optimize(b"raw")

        assert len(codec.qualities) == 10
        assert codec.qualities[-1] == 0.1
        assert optimized.quality == 0.1
        assert optimized.size_bytes == 5000

    def test_large_photo_fits_budget_or_hits_floor(self, large_jpeg: bytes) -> None:
        codec = PillowJpegCodec()
        full_quality = codec.encode(codec.decode(large_jpeg), 1.0)
        assert len(full_quality) > MAX_IMAGE_BYTES

        optimized = JpegOptimizer().optimize(large_jpeg)

        assert optimized.size_bytes <= MAX_IMAGE_BYTES or optimized.quality == 0.1
        assert optimized.quality < 1.0
        Image.open(io.BytesIO(optimized.data)).verify()

    def test_base64_output(self) -> None:
        codec = SizedCodec(lambda q: 3)
        optimized = JpegOptimizer(codec=codec).optimize(b"raw")
        assert optimized.to_base64() == "eHh4"

    def test_undecodable_bytes_raise_invalid_input(self) -> None:
        with pytest.raises(InvalidInputError):
            JpegOptimizer().optimize(b"not an image")

    def test_oversized_image_raises_invalid_input(self, small_jpeg: bytes, monkeypatch) -> None:
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        with pytest.raises(InvalidInputError):
            JpegOptimizer().optimize(small_jpeg)
