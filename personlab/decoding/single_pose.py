from typing import Optional, Sequence

import numpy as np

from ..models.pose_data import Pose


def decode_single_pose(
    scores: np.ndarray,
    offsets: np.ndarray,
    stride: int,
    keypoint_names: Optional[Sequence[str]] = None,
) -> Pose:
    """
    Single-person decoding: each keypoint at its heatmap's global maximum.

    The arg-max cell (first in scan order on ties) is refined by its offset
    vector. No displacement heads are needed and exactly one pose is returned.
    """
    height, width, num_keypoints = scores.shape
    flat_argmax = np.argmax(scores.reshape(height * width, num_keypoints), axis=0)
    rows, cols = np.unravel_index(flat_argmax, (height, width))
    keypoint_ids = np.arange(num_keypoints)

    positions = np.stack([
        rows * stride + offsets[rows, cols, keypoint_ids],
        cols * stride + offsets[rows, cols, num_keypoints + keypoint_ids],
    ], axis=1).astype(np.float32)
    keypoint_scores = scores[rows, cols, keypoint_ids].astype(np.float32)

    return Pose.from_arrays(positions, keypoint_scores, keypoint_names)
