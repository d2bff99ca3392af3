"""
Core data structures for decoded pose and segmentation results.
Positions are in the model input's pixel space; callers rescale them.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..skeletons.keypoint_schema import KEYPOINT_NAMES


@dataclass(frozen=True)
class Keypoint:
    """2D keypoint with pixel coordinates and the heatmap score it was decoded with."""
    part: str
    x: float
    y: float
    score: float

    def to_dict(self) -> dict:
        return {"part": self.part, "x": self.x, "y": self.y, "score": self.score}

    def to_list(self) -> List[float]:
        """Returns [x, y] format for compatibility."""
        return [self.x, self.y]


@dataclass(frozen=True)
class Pose:
    """One detected person: a keypoint per keypoint type, ordered by type index."""
    keypoints: Tuple[Keypoint, ...]
    score: float

    @property
    def num_keypoints(self) -> int:
        return len(self.keypoints)

    def get_keypoint(self, index: int) -> Keypoint:
        """Get a specific keypoint by type index."""
        return self.keypoints[index]

    def get_keypoint_by_name(self, name: str) -> Optional[Keypoint]:
        """Get a keypoint by semantic name (e.g., 'LEFT_ELBOW', 'NOSE').

        Examples:
            >>> pose.get_keypoint_by_name('nose')
        """
        name = name.upper()
        for keypoint in self.keypoints:
            if keypoint.part.upper() == name:
                return keypoint
        return None

    def positions(self) -> np.ndarray:
        """Keypoint positions as a (K, 2) array of (y, x)."""
        return np.array([[kp.y, kp.x] for kp in self.keypoints], dtype=np.float32).reshape(-1, 2)

    def keypoint_scores(self) -> np.ndarray:
        """Keypoint scores as a (K,) array."""
        return np.array([kp.score for kp in self.keypoints], dtype=np.float32)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "keypoints": [kp.to_dict() for kp in self.keypoints],
        }

    @classmethod
    def from_arrays(
        cls,
        positions: np.ndarray,
        scores: np.ndarray,
        keypoint_names: Optional[Sequence[str]] = None,
    ) -> "Pose":
        """
        Build a Pose from decoder arrays.

        Args:
            positions: (K, 2) array of (y, x) pixel positions
            scores: (K,) array of keypoint scores
            keypoint_names: Names by type index, defaults to the PoseNet schema

        Returns:
            Pose whose score is the mean keypoint score
        """
        names = list(keypoint_names) if keypoint_names is not None else KEYPOINT_NAMES
        if len(names) < len(scores):
            raise ValueError(f"Need {len(scores)} keypoint names, got {len(names)}")

        keypoints = tuple(
            Keypoint(part=names[k], x=float(positions[k, 1]), y=float(positions[k, 0]), score=float(scores[k]))
            for k in range(len(scores))
        )
        score = float(np.mean(scores)) if len(scores) else 0.0
        return cls(keypoints=keypoints, score=score)


@dataclass
class PersonSegmentation:
    """Instance mask (pose index per pixel, -1 for background) plus the poses it refers to."""
    height: int
    width: int
    data: np.ndarray
    poses: List[Pose]

    @property
    def num_people(self) -> int:
        return len(self.poses)

    def to_dict(self) -> dict:
        return {
            "height": self.height,
            "width": self.width,
            "data": self.data.tolist(),
            "poses": [pose.to_dict() for pose in self.poses],
        }


@dataclass
class PartSegmentation:
    """Part mask (part index per pixel, -1 for background)."""
    height: int
    width: int
    data: np.ndarray

    def to_dict(self) -> dict:
        return {"height": self.height, "width": self.width, "data": self.data.tolist()}


@dataclass
class PersonPartSegmentation:
    """Per-person part maps, index-aligned with poses."""
    height: int
    width: int
    part_masks: List[np.ndarray]
    poses: List[Pose]


def filter_poses_by_confidence(poses: List[Pose], min_pose_confidence: float = 0.3) -> List[Pose]:
    """Display-side filter; the decoders themselves never drop poses by score."""
    return [pose for pose in poses if pose.score >= min_pose_confidence]
