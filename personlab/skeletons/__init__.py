"""
Skeleton trees, keypoint schemas and the skeleton registry.
"""
from .keypoint_schema import (
    BodyPart,
    KEYPOINT_NAMES,
    PART_NAMES,
    POSE_CHAIN,
    PoseNetKeypoint,
    get_keypoint_index,
    get_keypoint_name,
    get_part_name,
)
from .skeleton import SkeletonTree
from .skeleton_registry import SkeletonRegistry, default_skeleton, load_default_registry

__all__ = [
    "BodyPart",
    "KEYPOINT_NAMES",
    "PART_NAMES",
    "POSE_CHAIN",
    "PoseNetKeypoint",
    "get_keypoint_index",
    "get_keypoint_name",
    "get_part_name",
    "SkeletonTree",
    "SkeletonRegistry",
    "default_skeleton",
    "load_default_registry",
]
