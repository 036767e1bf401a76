"""Edge Detect effect — 3x3 Sobel gradient magnitude over luminance."""

import cv2
import numpy as np

from engine.buffer import luminance, to_uint8

EFFECT_ID = "fx.edge_detect"
EFFECT_NAME = "Edge Detect"
EFFECT_CATEGORY = "fx"

PARAMS: dict = {}


def apply(frame: np.ndarray) -> np.ndarray:
    """Sobel magnitude clamped to 255 on R, G, B, opaque alpha.

    Only interior pixels are written. The 1-pixel border has no full 3x3
    neighborhood and stays (0, 0, 0, 0), as does any image under 3x3.
    """
    h, w = frame.shape[:2]
    output = np.zeros_like(frame)
    if h < 3 or w < 3:
        return output

    gray = luminance(frame)
    gx = cv2.Sobel(gray, cv2.CV_64F, 1, 0, ksize=3)
    gy = cv2.Sobel(gray, cv2.CV_64F, 0, 1, ksize=3)
    magnitude = to_uint8(np.minimum(np.sqrt(gx**2 + gy**2), 255.0))

    interior = magnitude[1:-1, 1:-1]
    output[1:-1, 1:-1, 0] = interior
    output[1:-1, 1:-1, 1] = interior
    output[1:-1, 1:-1, 2] = interior
    output[1:-1, 1:-1, 3] = 255
    return output
