"""
Keypoint and body-part schemas for the PersonLab / PoseNet output heads.
Maps numeric channel indices to semantic body part names.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple


class PoseNetKeypoint(Enum):
    """
    PoseNet 17-keypoint format (COCO body ordering).
    Channel k of the heatmap head scores keypoint k.
    """
    NOSE = 0
    LEFT_EYE = 1
    RIGHT_EYE = 2
    LEFT_EAR = 3
    RIGHT_EAR = 4
    LEFT_SHOULDER = 5
    RIGHT_SHOULDER = 6
    LEFT_ELBOW = 7
    RIGHT_ELBOW = 8
    LEFT_WRIST = 9
    RIGHT_WRIST = 10
    LEFT_HIP = 11
    RIGHT_HIP = 12
    LEFT_KNEE = 13
    RIGHT_KNEE = 14
    LEFT_ANKLE = 15
    RIGHT_ANKLE = 16


# Canonical (parent, child) orientation of the pose tree. Edge e of the
# displacement heads corresponds to POSE_CHAIN[e].
POSE_CHAIN: List[Tuple[str, str]] = [
    ("NOSE", "LEFT_EYE"),
    ("LEFT_EYE", "LEFT_EAR"),
    ("NOSE", "RIGHT_EYE"),
    ("RIGHT_EYE", "RIGHT_EAR"),
    ("NOSE", "LEFT_SHOULDER"),
    ("LEFT_SHOULDER", "LEFT_ELBOW"),
    ("LEFT_ELBOW", "LEFT_WRIST"),
    ("LEFT_SHOULDER", "LEFT_HIP"),
    ("LEFT_HIP", "LEFT_KNEE"),
    ("LEFT_KNEE", "LEFT_ANKLE"),
    ("NOSE", "RIGHT_SHOULDER"),
    ("RIGHT_SHOULDER", "RIGHT_ELBOW"),
    ("RIGHT_ELBOW", "RIGHT_WRIST"),
    ("RIGHT_SHOULDER", "RIGHT_HIP"),
    ("RIGHT_HIP", "RIGHT_KNEE"),
    ("RIGHT_KNEE", "RIGHT_ANKLE"),
]


class BodyPart(Enum):
    """
    BodyPix 24-part segmentation format.
    Channel p of the part heatmap head scores part p.
    """
    LEFT_FACE = 0
    RIGHT_FACE = 1
    LEFT_UPPER_ARM_FRONT = 2
    LEFT_UPPER_ARM_BACK = 3
    RIGHT_UPPER_ARM_FRONT = 4
    RIGHT_UPPER_ARM_BACK = 5
    LEFT_LOWER_ARM_FRONT = 6
    LEFT_LOWER_ARM_BACK = 7
    RIGHT_LOWER_ARM_FRONT = 8
    RIGHT_LOWER_ARM_BACK = 9
    LEFT_HAND = 10
    RIGHT_HAND = 11
    TORSO_FRONT = 12
    TORSO_BACK = 13
    LEFT_UPPER_LEG_FRONT = 14
    LEFT_UPPER_LEG_BACK = 15
    RIGHT_UPPER_LEG_FRONT = 16
    RIGHT_UPPER_LEG_BACK = 17
    LEFT_LOWER_LEG_FRONT = 18
    LEFT_LOWER_LEG_BACK = 19
    RIGHT_LOWER_LEG_FRONT = 20
    RIGHT_LOWER_LEG_BACK = 21
    LEFT_FEET = 22
    RIGHT_FEET = 23


KEYPOINT_NAMES: List[str] = [kp.name for kp in PoseNetKeypoint]
PART_NAMES: List[str] = [part.name for part in BodyPart]

_NAME_TO_INDEX: Dict[str, int] = {kp.name: kp.value for kp in PoseNetKeypoint}


def get_keypoint_name(index: int) -> str:
    """
    Convenience function to get keypoint name.

    Args:
        index: Keypoint channel index

    Returns:
        Semantic name for the keypoint, or KEYPOINT_<index> when unknown
    """
    if 0 <= index < len(KEYPOINT_NAMES):
        return KEYPOINT_NAMES[index]
    return f"KEYPOINT_{index}"


def get_keypoint_index(name: str) -> Optional[int]:
    """Get the keypoint channel index for a body landmark name."""
    return _NAME_TO_INDEX.get(name.upper())


def get_part_name(index: int) -> str:
    """Get the body part name for a part channel index."""
    if 0 <= index < len(PART_NAMES):
        return PART_NAMES[index]
    return f"PART_{index}"
