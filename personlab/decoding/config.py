"""
Decoder configuration.
Loaded from YAML the same way the inference pipeline reads its config.yaml.
"""
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "decoder.yaml"

VALID_OUTPUT_STRIDES = (8, 16, 32)
DECODING_METHODS = ("multi-person", "single-person")


def _is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class DecoderConfig:
    output_stride: int = 16
    decoding_method: str = "multi-person"
    max_pose_detections: int = 10
    score_threshold: float = 0.3
    nms_radius: float = 20.0
    local_maximum_radius: int = 1
    pose_overlap_threshold: float = 0.5
    min_pose_confidence: float = 0.3
    segmentation_threshold: float = 0.5
    min_keypoint_score: float = 0.3
    refine_steps: int = 1
    num_keypoints_for_matching: Optional[int] = None

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ConfigurationError on the first invalid field."""
        if self.output_stride not in VALID_OUTPUT_STRIDES:
            raise ConfigurationError(
                f"Invalid output_stride {self.output_stride}; expected one of {VALID_OUTPUT_STRIDES}"
            )
        if self.decoding_method not in DECODING_METHODS:
            raise ConfigurationError(
                f"Invalid decoding_method '{self.decoding_method}'; expected one of {DECODING_METHODS}"
            )
        for name in ("max_pose_detections", "local_maximum_radius", "refine_steps"):
            if not _is_integer(getattr(self, name)):
                raise ConfigurationError(f"{name} must be an integer, got {getattr(self, name)!r}")
        for name in ("score_threshold", "nms_radius", "pose_overlap_threshold", "min_pose_confidence",
                     "segmentation_threshold", "min_keypoint_score"):
            if not _is_number(getattr(self, name)):
                raise ConfigurationError(f"{name} must be a number, got {getattr(self, name)!r}")

        if self.max_pose_detections <= 0:
            raise ConfigurationError(
                f"max_pose_detections must be a positive integer, got {self.max_pose_detections}"
            )
        for name in ("score_threshold", "pose_overlap_threshold", "min_pose_confidence",
                     "segmentation_threshold", "min_keypoint_score"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}")
        if self.nms_radius <= 0:
            raise ConfigurationError(f"nms_radius must be positive, got {self.nms_radius}")
        if self.local_maximum_radius < 0:
            raise ConfigurationError(
                f"local_maximum_radius must be a non-negative integer, got {self.local_maximum_radius}"
            )
        if self.refine_steps < 1:
            raise ConfigurationError(f"refine_steps must be an integer >= 1, got {self.refine_steps}")
        if self.num_keypoints_for_matching is not None and (
            not _is_integer(self.num_keypoints_for_matching) or self.num_keypoints_for_matching < 1
        ):
            raise ConfigurationError(
                f"num_keypoints_for_matching must be null or a positive integer, "
                f"got {self.num_keypoints_for_matching}"
            )

    @property
    def effective_max_detections(self) -> int:
        """Single-person decoding always yields exactly one pose."""
        if self.decoding_method == "single-person":
            return 1
        return self.max_pose_detections

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DecoderConfig":
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown decoder config keys: {unknown}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, config_path) -> "DecoderConfig":
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)

        if data is not None and not isinstance(data, dict):
            raise ConfigurationError(f"Decoder config must be a mapping: {config_path}")

        config = cls.from_dict(data)
        logger.info(f"Loaded decoder config from {config_path}")
        return config

    @classmethod
    def load_default(cls) -> "DecoderConfig":
        return cls.from_yaml(DEFAULT_CONFIG_PATH)
