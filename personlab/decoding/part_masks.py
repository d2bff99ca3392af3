from typing import List

import numpy as np

from .grid import pixel_to_grid_map
from .instance_masks import BACKGROUND


def decode_part_segmentation(mask: np.ndarray, part_heatmaps: np.ndarray, stride: int) -> np.ndarray:
    """
    Label each foreground pixel with the best-scoring part of its nearest grid cell.

    Args:
        mask: (H, W) binary person mask
        part_heatmaps: (grid_H, grid_W, P) part scores
        stride: Output stride

    Returns:
        (H, W) int32 part ids, -1 on background
    """
    height, width = mask.shape
    grid_height, grid_width, _ = part_heatmaps.shape

    part_ids = np.argmax(part_heatmaps, axis=2).astype(np.int32)
    rows = pixel_to_grid_map(height, stride, grid_height)
    cols = pixel_to_grid_map(width, stride, grid_width)
    part_map = part_ids[rows[:, None], cols[None, :]]

    return np.where(mask.astype(bool), part_map, BACKGROUND).astype(np.int32)


def decode_person_part_masks(instance_mask: np.ndarray, part_mask: np.ndarray, num_instances: int) -> List[np.ndarray]:
    """Per-instance part maps: the part id inside the instance, -1 elsewhere."""
    return [
        np.where(instance_mask == i, part_mask, BACKGROUND).astype(np.int32)
        for i in range(num_instances)
    ]
