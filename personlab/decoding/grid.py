"""
Conversions between pixel coordinates and the network's output grid.

The grid is coarser than the input image by the output stride S: cell
(row, col) sits at pixel (row * S, col * S). Lookups always round half-up to
the nearest cell and clamp into the buffer, so no lookup can fail.
"""
from typing import Tuple

import numpy as np


def _round_half_up(values):
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(np.int64)


def nearest_grid_index(point: Tuple[float, float], stride: int, height: int, width: int) -> Tuple[int, int]:
    """
    Nearest grid cell to a pixel position.

    Args:
        point: (y, x) pixel position
        stride: Output stride of the network
        height: Grid height
        width: Grid width

    Returns:
        (row, col) clamped to [0, height-1] x [0, width-1]
    """
    row, col = _round_half_up([point[0] / stride, point[1] / stride])
    return int(np.clip(row, 0, height - 1)), int(np.clip(col, 0, width - 1))


def grid_to_pixel(row: int, col: int, stride: int) -> Tuple[float, float]:
    """Base pixel position (y, x) of a grid cell."""
    return float(row * stride), float(col * stride)


def grid_size(image_extent: int, stride: int) -> int:
    """Number of cells the network produces along an image axis of image_extent pixels."""
    return (image_extent - 1) // stride + 1


def pixel_to_grid_map(image_extent: int, stride: int, grid_extent: int) -> np.ndarray:
    """Nearest cell index for every pixel along one image axis."""
    pixels = np.arange(image_extent, dtype=np.float64)
    return np.clip(_round_half_up(pixels / stride), 0, grid_extent - 1)
