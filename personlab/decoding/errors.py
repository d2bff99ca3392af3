"""Errors raised before decoding starts. Decoding itself has no recoverable failures."""


class DecodingError(ValueError):
    """Base class for caller contract violations."""


class ConfigurationError(DecodingError):
    """Invalid decoder configuration (stride, detection count, thresholds)."""


class ShapeMismatchError(DecodingError):
    """An input buffer's shape disagrees with the grid, keypoint or part counts."""
