"""
Multi-person pose assembly: greedy non-maximum suppression over whole poses.

One pose is grown from every keypoint candidate. Poses are then accepted in
order of descending score (ties by candidate discovery order) unless they
overlap an already accepted pose, where overlap is the fraction of mutually
confident keypoint types that lie within nms_radius pixels of each other.
"""
import heapq
import logging
from typing import List

import numpy as np

from ..models.pose_data import Pose
from ..skeletons.skeleton import SkeletonTree
from .candidates import candidate_queue, extract_candidates
from .pose_traversal import grow_pose

logger = logging.getLogger(__name__)


def pose_overlap(pose_a: Pose, pose_b: Pose, score_threshold: float, nms_radius: float) -> float:
    """
    Fraction of keypoint types, confident in both poses, that lie within nms_radius.

    Returns 0.0 when the poses share no confident keypoint type.
    """
    confident = (pose_a.keypoint_scores() >= score_threshold) & (pose_b.keypoint_scores() >= score_threshold)
    num_pairs = int(np.count_nonzero(confident))
    if num_pairs == 0:
        return 0.0

    squared_distances = np.sum((pose_a.positions() - pose_b.positions()) ** 2, axis=1)
    close = (squared_distances <= nms_radius * nms_radius) & confident
    return np.count_nonzero(close) / num_pairs


def is_duplicate_pose(
    pose: Pose,
    accepted: List[Pose],
    score_threshold: float,
    nms_radius: float,
    pose_overlap_threshold: float,
) -> bool:
    return any(
        pose_overlap(pose, other, score_threshold, nms_radius) > pose_overlap_threshold
        for other in accepted
    )


def decode_multiple_poses(
    scores: np.ndarray,
    offsets: np.ndarray,
    displacements_fwd: np.ndarray,
    displacements_bwd: np.ndarray,
    stride: int,
    skeleton: SkeletonTree,
    max_pose_detections: int = 10,
    score_threshold: float = 0.3,
    nms_radius: float = 20.0,
    local_maximum_radius: int = 1,
    pose_overlap_threshold: float = 0.5,
) -> List[Pose]:
    """
    Decode up to max_pose_detections non-duplicate poses.

    Args:
        scores: Heatmap, shape (H, W, K)
        offsets: Short-range offsets, shape (H, W, 2K)
        displacements_fwd: Parent -> child displacements, shape (H, W, 2E)
        displacements_bwd: Child -> parent displacements, shape (H, W, 2E)
        stride: Output stride
        skeleton: Pose tree matching the displacement edge order
        max_pose_detections: Upper bound on returned poses
        score_threshold: Candidate threshold, also the per-keypoint confidence
            used by the overlap measure
        nms_radius: Pixel distance under which two keypoints coincide
        local_maximum_radius: Candidate window half-width in grid cells
        pose_overlap_threshold: Overlap above which a pose is a duplicate

    Keypoint names come from the skeleton joints.

    Returns:
        Accepted poses, highest score first
    """
    candidates = extract_candidates(scores, offsets, stride, score_threshold, local_maximum_radius)
    roots = candidate_queue(candidates)
    if not roots:
        logger.warning("No keypoint candidates above score threshold; returning no poses")
        return []

    # heapq is a min-heap: key on negated score, discovery index breaks ties
    queue = []
    for discovery_index, root in enumerate(roots):
        pose = grow_pose(root, scores, offsets, displacements_fwd, displacements_bwd,
                         stride, skeleton)
        queue.append((-pose.score, discovery_index, pose))
    heapq.heapify(queue)

    accepted: List[Pose] = []
    suppressed = 0
    while queue and len(accepted) < max_pose_detections:
        _, _, pose = heapq.heappop(queue)
        if is_duplicate_pose(pose, accepted, score_threshold, nms_radius, pose_overlap_threshold):
            suppressed += 1
            continue
        accepted.append(pose)

    logger.debug(
        f"Accepted {len(accepted)} of {len(roots)} candidate poses ({suppressed} suppressed as duplicates)"
    )
    return accepted
