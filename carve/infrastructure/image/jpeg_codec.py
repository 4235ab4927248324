"""JPEG codec backed by Pillow. Implements IImageCodec port."""

from __future__ import annotations

import io
from typing import Optional

from PIL import Image, UnidentifiedImageError


class PillowJpegCodec:
    """
    Decode arbitrary image bytes, encode RGB JPEG.

    Args:
        max_dimension: Downscale so the longest edge fits (None = keep size)

    Example:
        >>> codec = PillowJpegCodec()
        >>> image = codec.decode(photo_bytes)
        >>> jpeg = codec.encode(image, quality=0.8)
    """

    def __init__(self, max_dimension: Optional[int] = None) -> None:
        self.max_dimension = max_dimension

    def decode(self, data: bytes) -> Image.Image:
        """
        Decode and normalize to RGB.

        Transparent images are flattened on white, as JPEG has no alpha.

        Raises:
            ValueError: If bytes are not a readable image or exceed the pixel limit
        """
        try:
            img: Image.Image = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise ValueError(f"Unreadable image: {exc}") from exc

        rgb_img: Image.Image
        if img.mode in ("RGBA", "LA", "P"):
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            rgb_img = background
        elif img.mode != "RGB":
            rgb_img = img.convert("RGB")
        else:
            rgb_img = img

        if self.max_dimension and max(rgb_img.size) > self.max_dimension:
            rgb_img = rgb_img.copy()
            rgb_img.thumbnail((self.max_dimension, self.max_dimension))

        return rgb_img

    def encode(self, image: Image.Image, quality: float) -> bytes:
        """Encode as JPEG; quality 0.1-1.0 maps to Pillow's 1-100."""
        pil_quality = max(1, min(100, int(round(quality * 100))))
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=pil_quality)
        return buffer.getvalue()
