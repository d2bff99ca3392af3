import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .skeleton import SkeletonTree

logger = logging.getLogger(__name__)

DEFAULT_SKELETON_DIR = Path(__file__).resolve().parent.parent / "configs" / "skeletons"
DEFAULT_SKELETON_NAME = "posenet_17"


class SkeletonRegistry:
    """
    Central store for skeleton definitions.
    Loads/Saves pose-tree formats (PoseNet 17 + BodyPix parts) to JSON.
    """
    def __init__(self):
        # Internal cache of loaded configs
        self._registry: Dict[str, Dict[str, Any]] = {}

    def register(self, name: str, joints: List[str], bones: List[Tuple[str, str]],
                 parts: Optional[List[str]] = None):
        """Manually register a format in memory"""
        self._registry[name] = {
            "joints": list(joints),
            "bones": [tuple(b) for b in bones],
            "parts": list(parts) if parts is not None else [],
        }

    def save_to_json(self, name: str, file_path: str):
        """Exports a registered skeleton to a JSON file"""
        if name not in self._registry:
            raise ValueError(f"Skeleton '{name}' not found.")

        data = {
            "name": name,
            "joints": self._registry[name]["joints"],
            # JSON doesn't support tuples, convert to lists
            "bones": [list(b) for b in self._registry[name]["bones"]],
            "parts": self._registry[name]["parts"],
        }

        with open(file_path, 'w') as f:
            json.dump(data, f, indent=4)
        logger.info(f"Saved skeleton '{name}' to {file_path}")

    def load_from_json(self, file_path: str) -> str:
        """Loads a JSON file and registers it"""
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        with open(file_path, 'r') as f:
            data = json.load(f)

        name = data.get("name", "unknown")
        joints = data["joints"]
        # Convert lists back to tuples
        bones = [tuple(b) for b in data["bones"]]

        self.register(name, joints, bones, data.get("parts"))
        logger.debug(f"Loaded skeleton '{name}' from {file_path}")
        return name

    def get(self, name: str):
        """
        Returns the arguments needed to instantiate SkeletonTree
        """
        if name not in self._registry:
            raise ValueError(f"Skeleton '{name}' not found in registry.")

        config = self._registry[name]
        return config["joints"], config["bones"]

    def get_parts(self, name: str) -> List[str]:
        """Returns the segmentation part names registered with a skeleton"""
        if name not in self._registry:
            raise ValueError(f"Skeleton '{name}' not found in registry.")
        return self._registry[name]["parts"]

    def build(self, name: str) -> SkeletonTree:
        """Instantiate the SkeletonTree for a registered format"""
        joints, bones = self.get(name)
        return SkeletonTree(joints, bones)

    @property
    def names(self) -> List[str]:
        return sorted(self._registry)


def load_default_registry(config_dir: Optional[Path] = None) -> SkeletonRegistry:
    """Registry populated with every skeleton JSON shipped in configs/skeletons."""
    config_dir = Path(config_dir) if config_dir is not None else DEFAULT_SKELETON_DIR
    registry = SkeletonRegistry()
    for path in sorted(config_dir.glob("*.json")):
        registry.load_from_json(str(path))
    return registry


def default_skeleton() -> SkeletonTree:
    """The PoseNet 17-keypoint tree the decoders use when none is given."""
    return load_default_registry().build(DEFAULT_SKELETON_NAME)
