"""
Keypoint candidate extraction.

A cell is a candidate for keypoint k when its score clears the threshold and
no cell of the same keypoint within the local window scores higher. The test
is a max-filter comparison, so scan order never changes the result and tied
maxima all survive.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List

import numpy as np
from scipy.ndimage import maximum_filter

from .grid import grid_to_pixel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """Local-maximum keypoint: type, score and refined pixel position."""
    keypoint_id: int
    score: float
    y: float
    x: float
    row: int
    col: int


def local_maximum_mask(scores: np.ndarray, radius: int) -> np.ndarray:
    """
    Boolean (H, W, K) mask of cells equal to the max of their window.

    Windows are (2r+1) x (2r+1) over the spatial axes only and are cut at the
    grid border.
    """
    window = 2 * radius + 1
    window_max = maximum_filter(scores, size=(window, window, 1), mode="constant", cval=-np.inf)
    return scores >= window_max


def extract_candidates(
    scores: np.ndarray,
    offsets: np.ndarray,
    stride: int,
    score_threshold: float,
    local_maximum_radius: int = 1,
) -> Dict[int, List[Candidate]]:
    """
    Find local-maximum candidates per keypoint type.

    Args:
        scores: Heatmap, shape (H, W, K)
        offsets: Short-range offsets, shape (H, W, 2K); dy in [..., k], dx in [..., K + k]
        stride: Output stride
        score_threshold: Minimum candidate score (inclusive)
        local_maximum_radius: Half-width of the local window in grid cells

    Returns:
        keypoint id -> candidates in scan order (row, col)
    """
    num_keypoints = scores.shape[2]
    mask = (scores >= score_threshold) & local_maximum_mask(scores, local_maximum_radius)

    # np.nonzero walks C order: row, col, keypoint
    rows, cols, keypoint_ids = np.nonzero(mask)
    dy = offsets[rows, cols, keypoint_ids]
    dx = offsets[rows, cols, num_keypoints + keypoint_ids]

    candidates: Dict[int, List[Candidate]] = {k: [] for k in range(num_keypoints)}
    for row, col, k, oy, ox in zip(rows.tolist(), cols.tolist(), keypoint_ids.tolist(),
                                   dy.tolist(), dx.tolist()):
        base_y, base_x = grid_to_pixel(row, col, stride)
        candidates[k].append(Candidate(
            keypoint_id=k,
            score=float(scores[row, col, k]),
            y=base_y + oy,
            x=base_x + ox,
            row=row,
            col=col,
        ))

    logger.debug(f"Extracted {len(rows)} keypoint candidates above {score_threshold}")
    return candidates


def candidate_queue(candidates: Dict[int, List[Candidate]]) -> List[Candidate]:
    """
    Flatten candidates into root order: descending score, ties by scan order.
    A candidate's position in this list is its discovery index.
    """
    flat = [c for per_type in candidates.values() for c in per_type]
    flat.sort(key=lambda c: (c.row, c.col, c.keypoint_id))
    # Stable sort keeps scan order among equal scores
    flat.sort(key=lambda c: -c.score)
    return flat
