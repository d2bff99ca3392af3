"""Shared fixtures for decoder tests."""
import numpy as np
import pytest

from personlab.models.pose_data import Pose
from personlab.skeletons.skeleton import SkeletonTree
from personlab.skeletons.skeleton_registry import default_skeleton

NUM_KEYPOINTS = 17
NUM_EDGES = 16


@pytest.fixture
def posenet_skeleton():
    """The shipped 17-keypoint PoseNet tree."""
    return default_skeleton()


@pytest.fixture
def chain_skeleton():
    """Three joints in a line: a -> b -> c"""
    return SkeletonTree(["a", "b", "c"], [("a", "b"), ("b", "c")])


@pytest.fixture
def make_pose_buffers():
    """
    Factory for pose heads with zero offsets/displacements and sharp peaks.

    Each peak is (row, col, score) and is written for every keypoint type.
    """
    def _make(grid_height, grid_width, peaks, num_keypoints=NUM_KEYPOINTS, num_edges=NUM_EDGES):
        scores = np.zeros((grid_height, grid_width, num_keypoints), dtype=np.float32)
        for row, col, score in peaks:
            scores[row, col, :] = score
        offsets = np.zeros((grid_height, grid_width, 2 * num_keypoints), dtype=np.float32)
        displacements_fwd = np.zeros((grid_height, grid_width, 2 * num_edges), dtype=np.float32)
        displacements_bwd = np.zeros((grid_height, grid_width, 2 * num_edges), dtype=np.float32)
        return scores, offsets, displacements_fwd, displacements_bwd
    return _make


@pytest.fixture
def make_pose():
    """Factory for a pose with every keypoint at one (y, x) position."""
    def _make(y, x, score=0.9, num_keypoints=NUM_KEYPOINTS):
        positions = np.tile(np.array([[y, x]], dtype=np.float32), (num_keypoints, 1))
        scores = np.full(num_keypoints, score, dtype=np.float32)
        return Pose.from_arrays(positions, scores)
    return _make


@pytest.fixture
def random_pose_buffers():
    """Noisy but well-formed pose heads on a 20x20 grid."""
    rng = np.random.default_rng(42)
    scores = rng.random((20, 20, NUM_KEYPOINTS)).astype(np.float32)
    offsets = rng.uniform(-4, 4, (20, 20, 2 * NUM_KEYPOINTS)).astype(np.float32)
    displacements_fwd = rng.uniform(-30, 30, (20, 20, 2 * NUM_EDGES)).astype(np.float32)
    displacements_bwd = rng.uniform(-30, 30, (20, 20, 2 * NUM_EDGES)).astype(np.float32)
    return scores, offsets, displacements_fwd, displacements_bwd
