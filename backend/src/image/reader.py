"""Image decoding — file on disk to PixelBuffer via Pillow."""

import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from engine.buffer import PixelBuffer
from security import ALLOWED_IMAGE_EXTENSIONS, is_unsafe_filename

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 100 * 1024 * 1024  # 100 MB

# 64 megapixels, e.g. 8192 x 8192
MAX_PIXELS = 64_000_000


def validate_image_path(path: str) -> list[str]:
    """Validate an input image path. Returns list of errors (empty = valid).

    Checks:
    - File exists
    - Not a symlink
    - Extension in whitelist
    - File size <= MAX_IMAGE_BYTES
    - Filename is safe (no path traversal)
    """
    errors: list[str] = []
    p = Path(path)

    if not p.exists():
        errors.append(f"File not found: {path}")
        return errors

    if p.is_symlink():
        errors.append("Symlinks are not allowed")
        return errors

    ext = p.suffix.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        errors.append(
            f"Extension '{ext}' not allowed. Allowed: {sorted(ALLOWED_IMAGE_EXTENSIONS)}"
        )

    size = p.stat().st_size
    if size > MAX_IMAGE_BYTES:
        size_mb = size / (1024 * 1024)
        errors.append(
            f"File too large: {size_mb:.1f} MB (max {MAX_IMAGE_BYTES // (1024 * 1024)} MB)"
        )

    if is_unsafe_filename(p.name):
        errors.append(f"Unsafe filename: {p.name}")

    return errors


def read_image(path: str) -> PixelBuffer:
    """Decode an image file into an RGBA PixelBuffer.

    Raises:
        ValueError: Path fails validation or the image exceeds MAX_PIXELS.
        OSError: The file cannot be decoded.
    """
    errors = validate_image_path(path)
    if errors:
        raise ValueError("; ".join(errors))

    try:
        with Image.open(path) as img:
            width, height = img.size
            if width * height > MAX_PIXELS:
                raise ValueError(
                    f"Image too large: {width}x{height} exceeds {MAX_PIXELS} pixels"
                )
            rgba = img.convert("RGBA")
            data = np.asarray(rgba, dtype=np.uint8)
    except UnidentifiedImageError as e:
        raise OSError(f"Cannot decode image: {Path(path).name}") from e

    logger.debug("Read %s (%dx%d)", Path(path).name, width, height)
    return PixelBuffer.from_array(data)
