"""
Pose file loading for PoseKit

Unified interface for loading:
- PoseKit pose JSON ({"keypoints", "skeleton", "width", "height"})
- OpenPose JSON (detected by its "people" key)
- Batch operations with progress
- Error handling and validation
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

from tqdm import tqdm

from ..core.exceptions import DataLoadError, ValidationError
from ..pose.models import PoseData
from ..pose.validation import ensure_pose_data
from .openpose import from_openpose_format

logger = logging.getLogger(__name__)


class PoseLoader:
    """
    Pose JSON loading with validation at the boundary

    Everything read from disk passes through ensure_pose_data() before a
    PoseData is returned.
    """

    @staticmethod
    def read_json(json_path: str) -> Any:
        """
        Read a JSON file

        Raises:
            DataLoadError: If the file is missing or not valid JSON
        """
        path = Path(json_path)
        if not path.exists():
            raise DataLoadError(f"Pose file not found: {json_path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise DataLoadError(f"Invalid JSON in {json_path}: {e}")

    @staticmethod
    def parse(
        data: Any,
        source: str = "<data>",
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> PoseData:
        """
        Turn parsed JSON (PoseKit or OpenPose form) into PoseData

        Args:
            data: Parsed JSON
            source: Name used in error messages
            width: Frame width for OpenPose input
            height: Frame height for OpenPose input

        Raises:
            DataLoadError: If the data is neither form
        """
        if isinstance(data, dict) and 'people' in data:
            pose = from_openpose_format(data, width, height)
            if pose is None:
                raise DataLoadError(f"No usable OpenPose person in {source}")
            return pose

        try:
            return ensure_pose_data(data)
        except ValidationError as e:
            raise DataLoadError(f"Malformed pose data in {source}: {e}")

    @staticmethod
    def load(
        json_path: str,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> PoseData:
        """
        Load a single pose file

        Args:
            json_path: Path to PoseKit or OpenPose JSON
            width: Frame width for OpenPose input (default 768)
            height: Frame height for OpenPose input (default 768)

        Returns:
            PoseData

        Raises:
            DataLoadError: If the pose cannot be loaded

        Example:
            >>> from posekit.io import PoseLoader
            >>> pose = PoseLoader.load("standing_bride.json")
            >>> print(pose.num_keypoints)
            17
        """
        data = PoseLoader.read_json(json_path)
        return PoseLoader.parse(data, str(json_path), width, height)

    @staticmethod
    def load_batch(
        json_paths: List[str],
        show_progress: bool = True,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> List[Tuple[str, PoseData]]:
        """
        Load multiple pose files with progress tracking

        Args:
            json_paths: List of pose file paths
            show_progress: Show progress bar
            width: Frame width for OpenPose input
            height: Frame height for OpenPose input

        Returns:
            List of (file stem, PoseData), skipping files that fail to load
        """
        poses = []
        failed_count = 0

        iterator = tqdm(json_paths, desc="Loading poses") if show_progress else json_paths

        for path in iterator:
            try:
                poses.append((Path(path).stem, PoseLoader.load(path, width, height)))
            except DataLoadError as e:
                logger.warning("Skipping %s: %s", path, e)
                failed_count += 1
                continue

        if failed_count > 0:
            logger.warning("Failed to load %d pose files", failed_count)

        return poses

    @staticmethod
    def save(pose: PoseData, json_path: str) -> Path:
        """
        Write a pose in the PoseKit JSON form

        Returns:
            Path written
        """
        path = Path(json_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(pose.to_dict(), f, indent=2)
        return path
