"""
Decoders turning PersonLab / BodyPix network outputs into poses and masks.
"""
from .decoding import (
    ConfigurationError,
    DecoderConfig,
    DecodingError,
    PoseDecoder,
    ShapeMismatchError,
)
from .models import Keypoint, PartSegmentation, PersonPartSegmentation, PersonSegmentation, Pose

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DecoderConfig",
    "DecodingError",
    "PoseDecoder",
    "ShapeMismatchError",
    "Keypoint",
    "PartSegmentation",
    "PersonPartSegmentation",
    "PersonSegmentation",
    "Pose",
]
