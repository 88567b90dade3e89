"""
Tests for keypoint utilities
"""

import pytest

from posekit.core.constants import COCO_SKELETON_CONNECTIONS
from posekit.pose import (
    PoseData,
    compute_keypoint_stats,
    compute_pose_center,
    filter_keypoints,
    get_skeleton_connections,
    keypoints_in_bounds,
    keypoints_to_dict,
    pose_to_array,
    rotate_pose,
)


def test_pose_to_array(standing_pose):
    arr = pose_to_array(standing_pose)
    assert arr.shape == (17, 3)
    assert tuple(arr[0]) == (384.0, 160.0, 0.95)

    empty = PoseData(keypoints=[], skeleton=[], width=10, height=10)
    assert pose_to_array(empty).shape == (0, 3)


def test_keypoints_to_dict(standing_pose):
    d = keypoints_to_dict(standing_pose)
    assert len(d) == 17
    assert d['right_wrist'] == (520.0, 590.0, 0.30)


def test_filter_keypoints(standing_pose):
    assert filter_keypoints(standing_pose, 0.5) == [i for i in range(17) if i not in (3, 10)]
    assert len(filter_keypoints(standing_pose, 0.0)) == 17
    assert filter_keypoints(standing_pose, 0.99) == []


def test_skeleton_connections(standing_pose):
    assert get_skeleton_connections() == list(COCO_SKELETON_CONNECTIONS)
    custom = PoseData(keypoints=standing_pose.keypoints, skeleton=[(0, 1)], width=1, height=1)
    assert get_skeleton_connections(custom) == [(0, 1)]


def test_keypoint_stats(standing_pose):
    stats = compute_keypoint_stats(standing_pose)

    assert stats['num_valid'] == 17
    assert stats['bounds'] == (250.0, 148.0, 520.0, 750.0)
    assert stats['center'] == (385.0, 449.0)
    assert 0.0 < stats['mean_confidence'] < 1.0

    empty = compute_keypoint_stats(standing_pose, conf_threshold=1.1)
    assert empty['num_valid'] == 0
    assert empty['bounds'] is None


def test_pose_center(standing_pose):
    cx, cy = compute_pose_center(standing_pose)
    assert cx == pytest.approx(sum(kp.x for kp in standing_pose.keypoints) / 17)
    assert cy == pytest.approx(sum(kp.y for kp in standing_pose.keypoints) / 17)
    assert compute_pose_center(standing_pose, conf_threshold=1.1) is None


def test_keypoints_in_bounds(standing_pose):
    assert keypoints_in_bounds(standing_pose)
    # Every point lies within 384px of the center, so a quarter turn stays inside
    assert keypoints_in_bounds(rotate_pose(standing_pose, 90))
    tight = PoseData(standing_pose.keypoints, standing_pose.skeleton, width=400, height=400)
    assert not keypoints_in_bounds(tight)
