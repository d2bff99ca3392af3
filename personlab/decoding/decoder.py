"""
Stateless entry point tying the decoding stages together.

PoseDecoder holds only configuration and the skeleton; every call takes the
raw network buffers, validates them, and returns freshly allocated results.
"""
import logging
from typing import List, Optional

import numpy as np

from ..models.pose_data import PartSegmentation, PersonPartSegmentation, PersonSegmentation, Pose
from ..skeletons.keypoint_schema import PART_NAMES
from ..skeletons.skeleton import SkeletonTree
from ..skeletons.skeleton_registry import default_skeleton
from .config import DecoderConfig
from .errors import ShapeMismatchError
from .instance_masks import decode_instance_mask, to_mask
from .multi_pose import decode_multiple_poses
from .part_masks import decode_part_segmentation, decode_person_part_masks
from .single_pose import decode_single_pose
from .validation import (
    as_buffer,
    validate_part_buffers,
    validate_pose_buffers,
    validate_segmentation_buffers,
)

logger = logging.getLogger(__name__)


class PoseDecoder:
    def __init__(self, config: Optional[DecoderConfig] = None, skeleton: Optional[SkeletonTree] = None,
                 num_parts: Optional[int] = None):
        """
        Args:
            config: Decoder settings, validated on construction. Defaults to DecoderConfig()
            skeleton: Pose tree; defaults to the PoseNet 17-keypoint tree
            num_parts: Part heatmap channels; defaults to the 24 BodyPix parts
        """
        self.config = config if config is not None else DecoderConfig()
        self.config.validate()
        self.skeleton = skeleton if skeleton is not None else default_skeleton()
        self.num_parts = num_parts if num_parts is not None else len(PART_NAMES)

    def _segmentation_mask(self, segment_scores) -> np.ndarray:
        scores = np.asarray(segment_scores, dtype=np.float32)
        if scores.ndim == 3 and scores.shape[2] == 1:
            scores = scores[:, :, 0]
        if scores.ndim != 2:
            raise ShapeMismatchError(f"segment_scores must be 2D, got shape {scores.shape}")
        return to_mask(scores, self.config.segmentation_threshold)

    def decode_poses(self, heatmaps, offsets, displacements_fwd, displacements_bwd) -> List[Pose]:
        """
        Decode poses from the four pose heads.

        Returns:
            Poses in pixel space of the network input, highest score first.
            Filtering by min_pose_confidence is left to the caller.
        """
        scores = as_buffer(heatmaps, "heatmaps", 3)
        offsets = as_buffer(offsets, "offsets", 3)
        displacements_fwd = as_buffer(displacements_fwd, "displacements_fwd", 3)
        displacements_bwd = as_buffer(displacements_bwd, "displacements_bwd", 3)
        validate_pose_buffers(scores, offsets, displacements_fwd, displacements_bwd,
                              self.skeleton.num_joints, self.skeleton.num_edges)

        config = self.config
        if config.decoding_method == "single-person":
            poses = [decode_single_pose(scores, offsets, config.output_stride, self.skeleton.idx_to_name)]
        else:
            poses = decode_multiple_poses(
                scores, offsets, displacements_fwd, displacements_bwd,
                config.output_stride, self.skeleton,
                max_pose_detections=config.max_pose_detections,
                score_threshold=config.score_threshold,
                nms_radius=config.nms_radius,
                local_maximum_radius=config.local_maximum_radius,
                pose_overlap_threshold=config.pose_overlap_threshold,
            )

        logger.info(f"Decoded {len(poses)} pose(s) with {config.decoding_method} decoding")
        return poses

    def decode_instance_mask(self, segment_scores, long_offsets, poses: List[Pose]) -> np.ndarray:
        """Instance ids per pixel for already decoded poses; -1 on background."""
        mask = self._segmentation_mask(segment_scores)
        long_offsets = as_buffer(long_offsets, "long_offsets", 3)
        validate_segmentation_buffers(mask, long_offsets, self.skeleton.num_joints)
        return decode_instance_mask(
            mask, long_offsets, poses,
            min_keypoint_score=self.config.min_keypoint_score,
            refine_steps=self.config.refine_steps,
            num_keypoints_for_matching=self.config.num_keypoints_for_matching,
        )

    def estimate_person_segmentation(
        self, segment_scores, long_offsets, heatmaps, offsets, displacements_fwd, displacements_bwd
    ) -> PersonSegmentation:
        """Decode poses, then split the person mask into one instance per pose."""
        mask = self._segmentation_mask(segment_scores)
        long_offsets = as_buffer(long_offsets, "long_offsets", 3)
        validate_segmentation_buffers(mask, long_offsets, self.skeleton.num_joints)

        poses = self.decode_poses(heatmaps, offsets, displacements_fwd, displacements_bwd)
        data = decode_instance_mask(
            mask, long_offsets, poses,
            min_keypoint_score=self.config.min_keypoint_score,
            refine_steps=self.config.refine_steps,
            num_keypoints_for_matching=self.config.num_keypoints_for_matching,
        )
        height, width = mask.shape
        return PersonSegmentation(height=height, width=width, data=data, poses=poses)

    def estimate_part_segmentation(self, segment_scores, part_heatmaps) -> PartSegmentation:
        """Body-part id per foreground pixel; -1 on background."""
        mask = self._segmentation_mask(segment_scores)
        part_heatmaps = as_buffer(part_heatmaps, "part_heatmaps", 3)
        validate_part_buffers(mask, part_heatmaps, self.config.output_stride, self.num_parts)

        data = decode_part_segmentation(mask, part_heatmaps, self.config.output_stride)
        height, width = mask.shape
        logger.info(f"Decoded part segmentation for {int(mask.sum())} foreground pixels")
        return PartSegmentation(height=height, width=width, data=data)

    def estimate_person_part_segmentation(
        self, segment_scores, long_offsets, part_heatmaps, heatmaps, offsets, displacements_fwd, displacements_bwd
    ) -> PersonPartSegmentation:
        """Part maps split per person instance."""
        # Validate every buffer before any decoding starts
        mask = self._segmentation_mask(segment_scores)
        part_buffer = as_buffer(part_heatmaps, "part_heatmaps", 3)
        validate_part_buffers(mask, part_buffer, self.config.output_stride, self.num_parts)

        person = self.estimate_person_segmentation(
            segment_scores, long_offsets, heatmaps, offsets, displacements_fwd, displacements_bwd
        )
        parts = decode_part_segmentation(mask, part_buffer, self.config.output_stride)
        part_masks = decode_person_part_masks(person.data, parts, person.num_people)
        return PersonPartSegmentation(
            height=person.height, width=person.width, part_masks=part_masks, poses=person.poses
        )
