"""
Data models for decoded poses and segmentation results.
"""
from .pose_data import (
    Keypoint,
    PartSegmentation,
    PersonPartSegmentation,
    PersonSegmentation,
    Pose,
    filter_poses_by_confidence,
)

__all__ = [
    "Keypoint",
    "PartSegmentation",
    "PersonPartSegmentation",
    "PersonSegmentation",
    "Pose",
    "filter_poses_by_confidence",
]
