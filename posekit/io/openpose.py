"""
OpenPose JSON interchange

Supports the single-person, body-only subset of the OpenPose output format:
https://github.com/CMU-Perceptual-Computing-Lab/openpose/blob/master/doc/02_output.md

OpenPose JSON has no image dimensions. Imported poses get a default
768x768 frame unless the caller supplies the real size.
"""

import json
import logging
from numbers import Real
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.constants import (
    COCO_KEYPOINT_NAMES,
    COCO_SKELETON_CONNECTIONS,
    DEFAULT_FRAME_HEIGHT,
    DEFAULT_FRAME_WIDTH,
    OPENPOSE_EMPTY_FIELDS,
    OPENPOSE_FORMAT_VERSION,
    OPENPOSE_MIN_POSE_VALUES,
    OPENPOSE_VALUES_PER_KEYPOINT,
)
from ..core.exceptions import DataLoadError
from ..pose.models import Keypoint, PoseData

logger = logging.getLogger(__name__)


def to_openpose_format(pose: PoseData) -> Dict[str, Any]:
    """
    Serialize a pose as a single-person OpenPose document

    Args:
        pose: Pose data

    Returns:
        Dict with "version" and one entry in "people"; face, hand and 3D
        arrays are empty

    Example:
        >>> doc = to_openpose_format(pose)
        >>> len(doc['people'][0]['pose_keypoints_2d'])
        51
    """
    flat: List[float] = []
    for kp in pose.keypoints:
        flat.extend(kp.to_triple())

    person: Dict[str, Any] = {
        'person_id': [-1],
        'pose_keypoints_2d': flat,
    }
    for name in OPENPOSE_EMPTY_FIELDS:
        person[name] = []

    return {
        'version': OPENPOSE_FORMAT_VERSION,
        'people': [person],
    }


def _keypoint_label(index: int) -> str:
    # Only reachable for documents carrying more than the 17 COCO points
    if index < len(COCO_KEYPOINT_NAMES):
        return COCO_KEYPOINT_NAMES[index]
    return f"keypoint_{index}"


def from_openpose_format(
    data: Any,
    width: Optional[float] = None,
    height: Optional[float] = None,
) -> Optional[PoseData]:
    """
    Rebuild a pose from the first person of an OpenPose document

    Args:
        data: Parsed OpenPose JSON
        width: Frame width of the source image (default 768)
        height: Frame height of the source image (default 768)

    Returns:
        PoseData with COCO labels and skeleton, or None when there is no
        person, no pose_keypoints_2d, fewer than 51 values, or
        non-numeric values

    Example:
        >>> pose = from_openpose_format(to_openpose_format(original))
        >>> (pose.width, pose.height)
        (768, 768)
    """
    if not isinstance(data, dict):
        return None

    people = data.get('people')
    if not isinstance(people, list) or not people or not isinstance(people[0], dict):
        return None

    values = people[0].get('pose_keypoints_2d')
    if not isinstance(values, list) or len(values) < OPENPOSE_MIN_POSE_VALUES:
        logger.debug("OpenPose document has no usable pose_keypoints_2d")
        return None

    if not all(isinstance(v, Real) and not isinstance(v, bool) for v in values):
        logger.warning("OpenPose pose_keypoints_2d contains non-numeric values")
        return None

    step = OPENPOSE_VALUES_PER_KEYPOINT
    keypoints = []
    # A trailing partial triple is dropped
    for i in range(0, len(values) - step + 1, step):
        x, y, conf = values[i:i + step]
        keypoints.append(Keypoint(float(x), float(y), float(conf), _keypoint_label(len(keypoints))))

    return PoseData(
        keypoints=keypoints,
        skeleton=COCO_SKELETON_CONNECTIONS,
        width=DEFAULT_FRAME_WIDTH if width is None else width,
        height=DEFAULT_FRAME_HEIGHT if height is None else height,
    )


def load_openpose_json(
    path: str,
    width: Optional[float] = None,
    height: Optional[float] = None,
) -> Optional[PoseData]:
    """
    Read an OpenPose JSON file

    Returns:
        PoseData, or None if the document holds no usable pose

    Raises:
        DataLoadError: If the file is missing or is not valid JSON
    """
    path = Path(path)
    if not path.exists():
        raise DataLoadError(f"OpenPose file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON in {path}: {e}")

    return from_openpose_format(data, width, height)


def save_openpose_json(pose: PoseData, path: str) -> Path:
    """
    Write a pose as an OpenPose JSON file

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(to_openpose_format(pose), f, indent=2)
    return path
