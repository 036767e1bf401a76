import numpy as np
import pytest
import sentry_sdk

from engine.buffer import PixelBuffer
from engine.pipeline import flush_timing


@pytest.fixture(autouse=True)
def _isolated_sentry():
    """Keep pipeline captures local: no DSN, nothing leaves the test run."""
    sentry_sdk.init(dsn="")
    yield


@pytest.fixture(autouse=True)
def _reset_stage_timing():
    flush_timing()
    yield
    flush_timing()


@pytest.fixture
def random_frame():
    """Seeded 32x48 RGBA frame with varied alpha."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, (32, 48, 4), dtype=np.uint8)


@pytest.fixture
def gradient_frame():
    """Horizontal gray ramp 0..255, opaque, 16 rows x 64 columns."""
    ramp = np.linspace(0, 255, 64).round().astype(np.uint8)
    frame = np.empty((16, 64, 4), dtype=np.uint8)
    frame[:, :, 0] = ramp
    frame[:, :, 1] = ramp
    frame[:, :, 2] = ramp
    frame[:, :, 3] = 255
    return frame


@pytest.fixture
def random_buffer(random_frame):
    return PixelBuffer.from_array(random_frame)


def solid(h, w, rgba):
    """Solid-color (h, w, 4) frame."""
    frame = np.empty((h, w, 4), dtype=np.uint8)
    frame[:, :] = rgba
    return frame


@pytest.fixture
def solid_frame():
    return solid
