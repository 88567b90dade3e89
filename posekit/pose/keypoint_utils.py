"""
Keypoint utilities for pose data

Provides:
- Array and label-dict conversions
- Keypoint filtering and bounds checks
- Pose metrics computation
"""

import numpy as np
from typing import Dict, Tuple, Optional, List

from ..core.constants import COCO_SKELETON_CONNECTIONS
from .models import PoseData


def pose_to_array(pose: PoseData) -> np.ndarray:
    """
    Convert a pose to array format

    Args:
        pose: Pose data

    Returns:
        Array of shape (N, 3) with [x, y, conf] rows

    Example:
        >>> arr = pose_to_array(pose)
        >>> print(arr.shape)  # (17, 3)
    """
    if not pose.keypoints:
        return np.zeros((0, 3), dtype=np.float64)
    return np.array([kp.to_triple() for kp in pose.keypoints], dtype=np.float64)


def keypoints_to_dict(pose: PoseData) -> Dict[str, Tuple[float, float, float]]:
    """
    Map keypoint labels to (x, y, conf)

    Args:
        pose: Pose data

    Returns:
        Keypoint dict keyed by label

    Example:
        >>> keypoints_to_dict(pose)['nose']
        (384.0, 120.0, 0.9)
    """
    return {kp.label: kp.to_triple() for kp in pose.keypoints}


def filter_keypoints(pose: PoseData, conf_threshold: float = 0.3) -> List[int]:
    """
    Indices of keypoints at or above a confidence threshold

    Args:
        pose: Pose data
        conf_threshold: Minimum confidence

    Returns:
        Keypoint indices in pose order
    """
    return [i for i, kp in enumerate(pose.keypoints) if kp.confidence >= conf_threshold]


def get_skeleton_connections(pose: Optional[PoseData] = None) -> List[Tuple[int, int]]:
    """
    Skeleton connections as keypoint index pairs

    Args:
        pose: Pose whose skeleton to return (default: COCO skeleton)

    Returns:
        List of (keypoint_idx1, keypoint_idx2) tuples
    """
    if pose is None:
        return list(COCO_SKELETON_CONNECTIONS)
    return list(pose.skeleton)


def compute_keypoint_stats(pose: PoseData, conf_threshold: float = 0.0) -> Dict:
    """
    Compute statistics about the keypoints of a pose

    Args:
        pose: Pose data
        conf_threshold: Keypoints below this confidence are ignored

    Returns:
        Stats dict with num_valid, mean_confidence, bounds, center

    Example:
        >>> stats = compute_keypoint_stats(pose, conf_threshold=0.5)
        >>> print(stats['num_valid'])
    """
    valid = filter_keypoints(pose, conf_threshold)
    if not valid:
        return {
            "num_valid": 0,
            "mean_confidence": 0.0,
            "bounds": None,
            "center": None,
        }

    arr = pose_to_array(pose)[valid]
    coords = arr[:, :2]

    x_min, y_min = coords.min(axis=0)
    x_max, y_max = coords.max(axis=0)

    return {
        "num_valid": len(valid),
        "mean_confidence": float(np.mean(arr[:, 2])),
        "bounds": (float(x_min), float(y_min), float(x_max), float(y_max)),
        "center": (float((x_min + x_max) / 2), float((y_min + y_max) / 2)),
    }


def compute_pose_center(
    pose: PoseData,
    conf_threshold: float = 0.0
) -> Optional[Tuple[float, float]]:
    """
    Compute center of mass of keypoints

    Args:
        pose: Pose data
        conf_threshold: Keypoints below this confidence are ignored

    Returns:
        (center_x, center_y) or None if no valid keypoints
    """
    valid = filter_keypoints(pose, conf_threshold)
    if not valid:
        return None

    center = pose.coordinates()[valid].mean(axis=0)
    return float(center[0]), float(center[1])


def keypoints_in_bounds(pose: PoseData) -> bool:
    """
    Check that all keypoints lie inside the pose frame

    Rotation can push keypoints outside the frame; renderers clip them.

    Args:
        pose: Pose data

    Returns:
        True if every keypoint is within [0, width) x [0, height)
    """
    for kp in pose.keypoints:
        if kp.x < 0 or kp.x >= pose.width or kp.y < 0 or kp.y >= pose.height:
            return False
    return True
