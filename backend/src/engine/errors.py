"""Typed errors raised by the processing core."""


class ProcessingError(ValueError):
    """Base class for every error the pipeline raises on bad input."""


class InvalidBufferError(ProcessingError):
    """Pixel buffer dimensions, length or dtype are inconsistent."""


class UnsupportedAlgorithmError(ProcessingError):
    """Unknown effect, dithering algorithm or color palette tag."""
