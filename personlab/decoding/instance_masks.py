"""
Instance mask decoding.

Every foreground pixel follows its long-range offsets to one embedding point
per keypoint type. The pixel joins the pose whose keypoints lie closest to
those embeddings (mean squared distance over the pose's confident keypoints).
"""
import logging
from typing import List, Optional

import numpy as np

from ..models.pose_data import Pose

logger = logging.getLogger(__name__)

BACKGROUND = -1


def to_mask(segment_scores: np.ndarray, threshold: float = 0.5) -> np.ndarray:
    """Binary uint8 person mask: 1 where score > threshold."""
    return (np.asarray(segment_scores) > threshold).astype(np.uint8)


def compute_embeddings(
    pixel_rows: np.ndarray,
    pixel_cols: np.ndarray,
    long_offsets: np.ndarray,
    keypoint_ids: np.ndarray,
    refine_steps: int = 1,
) -> np.ndarray:
    """
    Follow long-range offsets from each pixel.

    Args:
        pixel_rows, pixel_cols: (N,) pixel coordinates
        long_offsets: (H, W, 2K); dy in [..., k], dx in [..., K + k]
        keypoint_ids: (M,) keypoint types to embed
        refine_steps: Number of offset hops per keypoint type

    Returns:
        (N, M, 2) embedding points as (y, x)
    """
    height, width, channels = long_offsets.shape
    num_keypoints = channels // 2

    y = np.repeat(pixel_rows.astype(np.float32)[:, None], len(keypoint_ids), axis=1)
    x = np.repeat(pixel_cols.astype(np.float32)[:, None], len(keypoint_ids), axis=1)
    for _ in range(refine_steps):
        iy = np.clip(np.floor(y + 0.5).astype(np.int64), 0, height - 1)
        ix = np.clip(np.floor(x + 0.5).astype(np.int64), 0, width - 1)
        y = np.clip(y + long_offsets[iy, ix, keypoint_ids], 0, height - 1)
        x = np.clip(x + long_offsets[iy, ix, num_keypoints + keypoint_ids], 0, width - 1)
    return np.stack([y, x], axis=2)


def embedding_distance(
    embeddings: np.ndarray,
    pose: Pose,
    keypoint_ids: np.ndarray,
    min_keypoint_score: float = 0.3,
) -> np.ndarray:
    """
    Mean squared distance between (N, M, 2) embeddings and a pose's keypoints.
    Falls back to all keypoints when none of the pose's keypoints is confident.
    """
    positions = pose.positions()[keypoint_ids]
    confident = pose.keypoint_scores()[keypoint_ids] > min_keypoint_score
    if not confident.any():
        confident = np.ones_like(confident)

    squared = np.sum((embeddings[:, confident, :] - positions[confident][None, :, :]) ** 2, axis=2)
    return squared.mean(axis=1)


def decode_instance_mask(
    mask: np.ndarray,
    long_offsets: np.ndarray,
    poses: List[Pose],
    min_keypoint_score: float = 0.3,
    refine_steps: int = 1,
    num_keypoints_for_matching: Optional[int] = None,
) -> np.ndarray:
    """
    Assign every foreground pixel to its nearest pose instance.

    Args:
        mask: (H, W) binary person mask
        long_offsets: (H, W, 2K) long-range offsets at image resolution
        poses: Accepted poses; their list index is the instance id
        min_keypoint_score: Keypoints at or below this score are ignored
        refine_steps: Long-offset hops per keypoint type
        num_keypoints_for_matching: Use only the first N keypoint types

    Returns:
        (H, W) int32 instance ids, -1 on background
    """
    height, width = mask.shape
    instance_mask = np.full((height, width), BACKGROUND, dtype=np.int32)
    if not poses:
        return instance_mask

    num_keypoints = long_offsets.shape[2] // 2
    if num_keypoints_for_matching is not None:
        num_keypoints = min(num_keypoints, num_keypoints_for_matching)
    keypoint_ids = np.arange(num_keypoints)

    rows, cols = np.nonzero(mask)
    if len(rows) == 0:
        return instance_mask

    embeddings = compute_embeddings(rows, cols, long_offsets, keypoint_ids, refine_steps)

    best_instance = np.zeros(len(rows), dtype=np.int32)
    best_distance = np.full(len(rows), np.inf, dtype=np.float64)
    for instance_id, pose in enumerate(poses):
        distance = embedding_distance(embeddings, pose, keypoint_ids, min_keypoint_score)
        # Strict comparison keeps the earlier (higher scored) pose on ties
        closer = distance < best_distance
        best_instance[closer] = instance_id
        best_distance[closer] = distance[closer]

    instance_mask[rows, cols] = best_instance
    logger.debug(f"Assigned {len(rows)} foreground pixels across {len(poses)} instances")
    return instance_mask


def split_instance_masks(instance_mask: np.ndarray, num_instances: int) -> List[np.ndarray]:
    """One binary uint8 mask per instance id."""
    return [(instance_mask == i).astype(np.uint8) for i in range(num_instances)]
