"""Shape checks run before any decoding work. Every failure raises ShapeMismatchError."""
from typing import Optional, Tuple

import numpy as np

from .errors import ShapeMismatchError
from .grid import grid_size


def as_buffer(array, name: str, ndim: int) -> np.ndarray:
    """Coerce an input to a float32 ndarray of the given rank."""
    buffer = np.asarray(array, dtype=np.float32)
    if buffer.ndim != ndim:
        raise ShapeMismatchError(f"{name} must be {ndim}D, got shape {buffer.shape}")
    return buffer


def validate_pose_buffers(
    scores: np.ndarray,
    offsets: np.ndarray,
    displacements_fwd: np.ndarray,
    displacements_bwd: np.ndarray,
    num_keypoints: int,
    num_edges: int,
) -> Tuple[int, int]:
    """
    Check the four pose heads against each other and the skeleton.

    Returns:
        (grid_height, grid_width)
    """
    height, width, channels = scores.shape
    if height == 0 or width == 0:
        raise ShapeMismatchError(f"Heatmap grid is empty: {scores.shape}")
    if channels != num_keypoints:
        raise ShapeMismatchError(
            f"Heatmap has {channels} keypoint channels, skeleton expects {num_keypoints}"
        )

    expected = {
        "offsets": (offsets, (height, width, 2 * num_keypoints)),
        "displacements_fwd": (displacements_fwd, (height, width, 2 * num_edges)),
        "displacements_bwd": (displacements_bwd, (height, width, 2 * num_edges)),
    }
    for name, (buffer, shape) in expected.items():
        if buffer.shape != shape:
            raise ShapeMismatchError(f"{name} shape {buffer.shape} doesn't match expected {shape}")
    return height, width


def validate_segmentation_buffers(mask: np.ndarray, long_offsets: np.ndarray, num_keypoints: int):
    height, width = mask.shape
    expected = (height, width, 2 * num_keypoints)
    if long_offsets.shape != expected:
        raise ShapeMismatchError(f"long_offsets shape {long_offsets.shape} doesn't match expected {expected}")


def validate_part_buffers(mask: np.ndarray, part_heatmaps: np.ndarray, stride: int, num_parts: Optional[int] = None):
    height, width = mask.shape
    expected_grid = (grid_size(height, stride), grid_size(width, stride))
    if part_heatmaps.shape[:2] != expected_grid:
        raise ShapeMismatchError(
            f"part_heatmaps grid {part_heatmaps.shape[:2]} doesn't match {expected_grid} "
            f"for a {height}x{width} image at stride {stride}"
        )
    if part_heatmaps.shape[2] == 0:
        raise ShapeMismatchError("part_heatmaps has no part channels")
    if num_parts is not None and part_heatmaps.shape[2] != num_parts:
        raise ShapeMismatchError(f"part_heatmaps has {part_heatmaps.shape[2]} channels, expected {num_parts}")
