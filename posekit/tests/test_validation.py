"""
Tests for structural pose validation
"""

import numpy as np
import pytest

from posekit.core.exceptions import ValidationError
from posekit.pose import Keypoint, PoseData, ensure_pose_data, validate_pose_data


def test_valid_inputs(standing_pose, pose_dict):
    assert validate_pose_data(standing_pose)
    assert validate_pose_data(pose_dict)
    assert validate_pose_data({'keypoints': [], 'skeleton': [], 'width': 0, 'height': 0})


@pytest.mark.parametrize("value", [
    None,
    42,
    'pose',
    b'pose',
    [],
    {'keypoints': 'not-an-array'},
    {'keypoints': [], 'skeleton': [], 'width': '768', 'height': 768},
    {'keypoints': [], 'skeleton': [], 'width': 768},
    {'keypoints': [], 'skeleton': None, 'width': 768, 'height': 768},
    {'keypoints': [], 'skeleton': [], 'width': True, 'height': 768},
])
def test_invalid_inputs(value):
    assert validate_pose_data(value) is False


@pytest.mark.parametrize("keypoint", [
    {'x': 1, 'y': 2, 'confidence': 0.5},
    {'x': 1, 'y': 2, 'confidence': 0.5, 'label': 3},
    {'x': '1', 'y': 2, 'confidence': 0.5, 'label': 'nose'},
    {'x': 1, 'y': None, 'confidence': 0.5, 'label': 'nose'},
    [1, 2, 0.5, 'nose'],
])
def test_invalid_keypoint_rejects_pose(keypoint):
    value = {'keypoints': [keypoint], 'skeleton': [], 'width': 10, 'height': 10}
    assert validate_pose_data(value) is False


def test_numpy_numbers_are_accepted():
    value = {
        'keypoints': [{'x': np.float64(1.5), 'y': np.float32(2.0), 'confidence': 1, 'label': 'a'}],
        'skeleton': [],
        'width': np.int64(10),
        'height': 10.0,
    }
    assert validate_pose_data(value)


def test_ensure_builds_pose(pose_dict, standing_pose):
    pose = ensure_pose_data(pose_dict)
    assert isinstance(pose, PoseData)
    assert pose == standing_pose
    assert ensure_pose_data(standing_pose) is standing_pose


def test_ensure_raises_on_malformed():
    with pytest.raises(ValidationError):
        ensure_pose_data({'keypoints': 'not-an-array'})
    # ValidationError is also a ValueError
    with pytest.raises(ValueError):
        ensure_pose_data(None)


@pytest.mark.parametrize("skeleton", [
    [(0, 2)],
    [(-1, 0)],
    [(0,)],
    [(0, 1, 1)],
    [(0, 1.0)],
    [(0, True)],
    ['ab'],
])
def test_ensure_checks_skeleton_indices(skeleton):
    value = {
        'keypoints': [Keypoint(0, 0, 1, 'a'), Keypoint(1, 1, 1, 'b')],
        'skeleton': skeleton,
        'width': 10,
        'height': 10,
    }
    with pytest.raises(ValidationError):
        ensure_pose_data(value)


def test_ensure_accepts_numpy_skeleton_indices():
    value = {
        'keypoints': [Keypoint(0, 0, 1, 'a'), Keypoint(1, 1, 1, 'b')],
        'skeleton': [(np.int64(0), np.int64(1))],
        'width': 10,
        'height': 10,
    }
    assert ensure_pose_data(value).skeleton == ((0, 1),)
