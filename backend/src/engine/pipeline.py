"""Processing pipeline — one linear pass from source buffer to output buffer.

Stage order:
    brightness -> contrast
    -> [dithering only] blur -> dither contrast -> tone curve
       -> luminance threshold -> depth
    -> main effect (dither + optional invert | threshold | edge detect | none)
    -> palette mapping

Each stage is skipped at its neutral value. Stages never mutate their input;
the caller's buffer is copied before the first stage. A failing stage aborts
the whole call: callers get a complete buffer or an exception, never a
half-processed image.
"""

import logging
import time
from collections import defaultdict, deque

import numpy as np
import sentry_sdk

from effects import registry
from effects.fx import duotone, edge_detect, threshold
from effects.tone import blur, brightness, contrast, depth, invert, luminance_threshold, tones
from engine.buffer import PixelBuffer
from engine.determinism import derive_seed, make_rng
from engine.errors import InvalidBufferError, ProcessingError
from engine.params import Effect, ProcessingParams

logger = logging.getLogger(__name__)

# Per-stage timing threshold (milliseconds)
STAGE_WARN_MS = 250

# Rolling timing stats per stage
_stage_timing: dict[str, deque] = defaultdict(lambda: deque(maxlen=100))


def record_timing(stage: str, elapsed_ms: float):
    """Record a timing sample for a stage."""
    _stage_timing[stage].append(elapsed_ms)


def get_stage_stats() -> dict[str, dict]:
    """Return p50/max/sample count per stage."""
    result = {}
    for stage, samples in _stage_timing.items():
        s = sorted(samples)
        result[stage] = {
            "p50": s[len(s) // 2] if s else 0,
            "max": max(s) if s else 0,
            "samples": len(s),
        }
    return result


def flush_timing():
    """Clear all timing stats."""
    _stage_timing.clear()


def _capture_with_context(e: Exception, stage: str, extra: dict):
    """Capture exception to Sentry with stage-level context and fingerprint dedup."""
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("stage", stage)
        scope.fingerprint = ["stage-crash", stage, type(e).__name__]
        scope.set_context("stage", extra)
        sentry_sdk.capture_exception(e, scope=scope)


def _run_stage(stage: str, fn, frame: np.ndarray, *args, **kwargs) -> np.ndarray:
    """Run one stage, validate its output and record timing."""
    t0 = time.monotonic()
    try:
        out = fn(frame, *args, **kwargs)
        if not isinstance(out, np.ndarray):
            raise TypeError(f"Stage returned {type(out).__name__}, expected ndarray")
        if out.shape != frame.shape:
            raise ValueError(f"Stage returned shape {out.shape}, expected {frame.shape}")
        if out.dtype != np.uint8:
            out = np.clip(out, 0, 255).astype(np.uint8)
    except Exception as e:
        _capture_with_context(
            e, stage, {"frame_shape": list(frame.shape), "arg_count": len(args)}
        )
        logger.error(
            "Stage %s failed: %s", stage, type(e).__name__, extra={"stage": stage}
        )
        logger.debug("Stage %s exception detail: %s", stage, e)
        raise

    elapsed_ms = (time.monotonic() - t0) * 1000
    record_timing(stage, elapsed_ms)
    if elapsed_ms > STAGE_WARN_MS:
        logger.warning(
            "Stage %s took %.0fms (>%dms warn threshold) on %dx%d",
            stage,
            elapsed_ms,
            STAGE_WARN_MS,
            frame.shape[1],
            frame.shape[0],
            extra={"stage": stage},
        )
    else:
        logger.debug("Stage %s took %.1fms", stage, elapsed_ms)
    return out


def _dither_rng(params: ProcessingParams, rng: np.random.Generator | None):
    if rng is not None:
        return rng
    if params.seed is None:
        return make_rng()
    return make_rng(derive_seed(params.seed, params.dithering_algorithm.value))


def _prepare_for_dither(frame: np.ndarray, params: ProcessingParams) -> np.ndarray:
    if params.blur > 0:
        frame = _run_stage("blur", blur.apply, frame, params.blur)

    if params.dither_contrast != 100:
        contrast_adjust = (params.dither_contrast - 100) * 1.5
        frame = _run_stage("dither_contrast", contrast.apply, frame, contrast_adjust)

    if params.midtones != 100 or params.highlights != 100:
        mid_adjust = (params.midtones - 100) * 0.5
        high_adjust = (params.highlights - 100) * 0.5
        frame = _run_stage("tone_curve", tones.apply, frame, mid_adjust, high_adjust)

    if params.luminance_threshold != 128:
        percent = (params.luminance_threshold / 255) * 100
        frame = _run_stage("luminance_threshold", luminance_threshold.apply, frame, percent)

    if params.depth < 100:
        frame = _run_stage("depth", depth.apply, frame, params.depth)

    return frame


def process_frame(
    frame: np.ndarray,
    params: ProcessingParams,
    *,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Run the pipeline on an (H, W, 4) uint8 frame.

    Args:
        frame:  Input RGBA frame. Never modified.
        params: Processing parameters; clamped via ``normalized()`` first.
        rng:    Random source for the noise-family algorithms. Defaults to a
                generator seeded from ``params.seed`` (or OS entropy if None).

    Returns:
        New RGBA frame with the same shape.

    Raises:
        InvalidBufferError: Frame is not an (H, W, 4) uint8 array.
        UnsupportedAlgorithmError: Unknown effect or algorithm.
    """
    if not isinstance(frame, np.ndarray) or frame.ndim != 3 or frame.shape[2] != 4:
        raise InvalidBufferError("expected an (H, W, 4) frame")
    if frame.dtype != np.uint8:
        raise InvalidBufferError(f"frame dtype must be uint8, got {frame.dtype}")
    if frame.shape[0] <= 0 or frame.shape[1] <= 0:
        raise InvalidBufferError(f"invalid dimensions {frame.shape[1]}x{frame.shape[0]}")

    params = params.normalized()
    output = frame.copy()

    if params.brightness != 0:
        output = _run_stage("brightness", brightness.apply, output, params.brightness)

    if params.contrast != 0:
        output = _run_stage("contrast", contrast.apply, output, params.contrast)

    if params.effect is Effect.DITHERING:
        info = registry.require(params.dithering_algorithm.value)
        output = _prepare_for_dither(output, params)
        sentry_sdk.add_breadcrumb(
            category="dither",
            message=f"Dithering with {params.dithering_algorithm.value}",
            data={"width": frame.shape[1], "height": frame.shape[0]},
            level="info",
        )
        output = _run_stage(
            params.dithering_algorithm.value,
            info["fn"],
            output,
            intensity=params.dither_intensity,
            scale=params.effect_scale,
            size=params.effect_size,
            rng=_dither_rng(params, rng),
        )
        if params.invert:
            output = _run_stage("invert", invert.apply, output)
    elif params.effect is Effect.THRESHOLD:
        output = _run_stage("threshold", threshold.apply, output, params.threshold)
    elif params.effect is Effect.EDGE_DETECT:
        output = _run_stage("edge_detect", edge_detect.apply, output)
    elif params.effect is not Effect.NONE:
        raise ProcessingError(f"unhandled effect: {params.effect}")

    output = _run_stage("palette", duotone.apply, output, params.color_palette)
    return output


def process(
    buffer: PixelBuffer,
    params: ProcessingParams,
    *,
    rng: np.random.Generator | None = None,
) -> PixelBuffer:
    """Apply the full pipeline to a pixel buffer. Returns a new buffer."""
    if not isinstance(buffer, PixelBuffer):
        raise InvalidBufferError(
            f"expected a PixelBuffer, got {type(buffer).__name__}"
        )
    t0 = time.monotonic()
    data = process_frame(buffer.data, params, rng=rng)
    logger.debug(
        "Processed %dx%d (effect=%s, palette=%s) in %.1fms",
        buffer.width,
        buffer.height,
        params.effect.value,
        params.color_palette.value,
        (time.monotonic() - t0) * 1000,
    )
    return PixelBuffer(buffer.width, buffer.height, data)
