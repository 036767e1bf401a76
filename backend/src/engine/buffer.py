"""Pixel buffer — canonical RGBA image container for the processing core."""

from dataclasses import dataclass

import numpy as np

from engine.errors import InvalidBufferError

# ITU-R BT.601 luma weights
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114


def luminance(frame: np.ndarray) -> np.ndarray:
    """Weighted grayscale of an (H, W, >=3) array as float64 (H, W)."""
    rgb = frame[:, :, :3].astype(np.float64)
    return rgb[:, :, 0] * LUMA_R + rgb[:, :, 1] * LUMA_G + rgb[:, :, 2] * LUMA_B


def to_uint8(values) -> np.ndarray:
    """Quantize floats to 8-bit samples: round half to even, clamp to [0, 255]."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def _check_dimensions(width, height):
    if isinstance(width, bool) or isinstance(height, bool):
        raise InvalidBufferError("width and height must be integers")
    if not isinstance(width, (int, np.integer)) or not isinstance(
        height, (int, np.integer)
    ):
        raise InvalidBufferError(
            f"width and height must be integers, got {type(width).__name__}"
            f" and {type(height).__name__}"
        )
    if width <= 0 or height <= 0:
        raise InvalidBufferError(f"invalid dimensions {width}x{height}")


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Width, height and interleaved 8-bit RGBA samples.

    ``data`` has shape (height, width, 4) and dtype uint8. Buffers are never
    aliased by the pipeline: every stage works on its own copy.
    """

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        _check_dimensions(self.width, self.height)
        if not isinstance(self.data, np.ndarray):
            raise InvalidBufferError(
                f"data must be an ndarray, got {type(self.data).__name__}"
            )
        expected = (self.height, self.width, 4)
        if self.data.shape != expected:
            raise InvalidBufferError(
                f"data shape {self.data.shape} does not match {expected}"
            )
        if self.data.dtype != np.uint8:
            raise InvalidBufferError(f"data dtype must be uint8, got {self.data.dtype}")

    @classmethod
    def from_bytes(cls, width: int, height: int, data) -> "PixelBuffer":
        """Build from a flat RGBA sequence of exactly width*height*4 samples."""
        _check_dimensions(width, height)
        flat = np.frombuffer(bytes(data), dtype=np.uint8)
        expected = width * height * 4
        if flat.size != expected:
            raise InvalidBufferError(
                f"buffer length {flat.size} != {width}*{height}*4 = {expected}"
            )
        return cls(int(width), int(height), flat.reshape(height, width, 4).copy())

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Build from an (H, W, 4) or (H, W, 3) uint8 array. Always copies."""
        if not isinstance(array, np.ndarray) or array.ndim != 3:
            raise InvalidBufferError("expected an (H, W, 3|4) array")
        if array.dtype != np.uint8:
            raise InvalidBufferError(f"array dtype must be uint8, got {array.dtype}")
        h, w, channels = array.shape
        if channels == 3:
            alpha = np.full((h, w, 1), 255, dtype=np.uint8)
            data = np.concatenate([array, alpha], axis=2)
        elif channels == 4:
            data = array.copy()
        else:
            raise InvalidBufferError(f"expected 3 or 4 channels, got {channels}")
        return cls(w, h, data)

    @classmethod
    def filled(cls, width: int, height: int, rgba=(0, 0, 0, 255)) -> "PixelBuffer":
        """Solid-color buffer, mostly useful for fixtures and previews."""
        _check_dimensions(width, height)
        data = np.empty((height, width, 4), dtype=np.uint8)
        data[:, :] = rgba
        return cls(width, height, data)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.data.copy())

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.data, other.data)
        )
