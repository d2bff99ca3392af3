"""
Grow a full pose from one root candidate by walking the skeleton tree.

Each step snaps the resolved source keypoint to its nearest cell, follows the
displacement vector of the connecting edge, snaps again and refines with the
target keypoint's short-range offset. Parent -> child steps read the forward
displacement head, child -> parent steps the backward head.
"""
from typing import Tuple

import numpy as np

from ..models.pose_data import Pose
from ..skeletons.skeleton import SkeletonTree
from .candidates import Candidate
from .grid import grid_to_pixel, nearest_grid_index


def traverse_to_target_keypoint(
    edge_id: int,
    source_position: Tuple[float, float],
    target_id: int,
    scores: np.ndarray,
    offsets: np.ndarray,
    stride: int,
    displacements: np.ndarray,
) -> Tuple[Tuple[float, float], float]:
    """
    Predict one adjacent keypoint.

    Returns:
        ((y, x) position, score) of the target keypoint
    """
    height, width, num_keypoints = scores.shape
    num_edges = displacements.shape[2] // 2

    source_row, source_col = nearest_grid_index(source_position, stride, height, width)
    displaced = (
        source_position[0] + float(displacements[source_row, source_col, edge_id]),
        source_position[1] + float(displacements[source_row, source_col, num_edges + edge_id]),
    )

    row, col = nearest_grid_index(displaced, stride, height, width)
    base_y, base_x = grid_to_pixel(row, col, stride)
    y = base_y + float(offsets[row, col, target_id])
    x = base_x + float(offsets[row, col, num_keypoints + target_id])
    return (y, x), float(scores[row, col, target_id])


def decode_pose(
    root: Candidate,
    scores: np.ndarray,
    offsets: np.ndarray,
    displacements_fwd: np.ndarray,
    displacements_bwd: np.ndarray,
    stride: int,
    skeleton: SkeletonTree,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Decode every keypoint of the pose rooted at a candidate.

    Returns:
        positions (K, 2) of (y, x) and keypoint scores (K,)
    """
    positions = np.zeros((skeleton.num_joints, 2), dtype=np.float32)
    keypoint_scores = np.zeros(skeleton.num_joints, dtype=np.float32)

    positions[root.keypoint_id] = (root.y, root.x)
    keypoint_scores[root.keypoint_id] = root.score

    for source_id, target_id, edge_id, forward in skeleton.traversal(root.keypoint_id):
        displacements = displacements_fwd if forward else displacements_bwd
        source_position = (float(positions[source_id, 0]), float(positions[source_id, 1]))
        position, score = traverse_to_target_keypoint(
            edge_id, source_position, target_id, scores, offsets, stride, displacements
        )
        positions[target_id] = position
        keypoint_scores[target_id] = score

    return positions, keypoint_scores


def grow_pose(
    root: Candidate,
    scores: np.ndarray,
    offsets: np.ndarray,
    displacements_fwd: np.ndarray,
    displacements_bwd: np.ndarray,
    stride: int,
    skeleton: SkeletonTree,
) -> Pose:
    """decode_pose wrapped into a Pose named after the skeleton joints and scored by its mean keypoint score."""
    positions, keypoint_scores = decode_pose(
        root, scores, offsets, displacements_fwd, displacements_bwd, stride, skeleton
    )
    return Pose.from_arrays(positions, keypoint_scores, skeleton.idx_to_name)
