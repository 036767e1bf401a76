"""Image encoding — PixelBuffer to file on disk via Pillow."""

import logging
from pathlib import Path

from PIL import Image

from engine.buffer import PixelBuffer

logger = logging.getLogger(__name__)

# Formats without an alpha channel; alpha is dropped on save
_OPAQUE_FORMATS = {".jpg", ".jpeg", ".bmp"}

JPEG_QUALITY = 95


def write_image(buffer: PixelBuffer, path: str):
    """Encode ``buffer`` to ``path``. The format follows the file extension."""
    ext = Path(path).suffix.lower()
    img = Image.fromarray(buffer.data)
    save_kwargs = {}
    if ext in _OPAQUE_FORMATS:
        img = img.convert("RGB")
    if ext in (".jpg", ".jpeg"):
        save_kwargs["quality"] = JPEG_QUALITY
    img.save(path, **save_kwargs)
    logger.debug("Wrote %s (%dx%d)", Path(path).name, buffer.width, buffer.height)
