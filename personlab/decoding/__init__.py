"""
Decoding stages from raw network buffers to poses and masks.
"""
from .candidates import Candidate, candidate_queue, extract_candidates, local_maximum_mask
from .config import DecoderConfig
from .decoder import PoseDecoder
from .errors import ConfigurationError, DecodingError, ShapeMismatchError
from .grid import grid_size, grid_to_pixel, nearest_grid_index, pixel_to_grid_map
from .instance_masks import BACKGROUND, decode_instance_mask, split_instance_masks, to_mask
from .multi_pose import decode_multiple_poses, is_duplicate_pose, pose_overlap
from .part_masks import decode_part_segmentation, decode_person_part_masks
from .pose_traversal import decode_pose, grow_pose, traverse_to_target_keypoint
from .single_pose import decode_single_pose

__all__ = [
    "Candidate",
    "candidate_queue",
    "extract_candidates",
    "local_maximum_mask",
    "DecoderConfig",
    "PoseDecoder",
    "ConfigurationError",
    "DecodingError",
    "ShapeMismatchError",
    "grid_size",
    "grid_to_pixel",
    "nearest_grid_index",
    "pixel_to_grid_map",
    "BACKGROUND",
    "decode_instance_mask",
    "split_instance_masks",
    "to_mask",
    "decode_multiple_poses",
    "is_duplicate_pose",
    "pose_overlap",
    "decode_part_segmentation",
    "decode_person_part_masks",
    "decode_pose",
    "grow_pose",
    "traverse_to_target_keypoint",
    "decode_single_pose",
]
