"""
Shared fixtures for PoseKit tests
"""

import pytest

from posekit.pose import PoseData

# Standing pose in a 768x768 frame, COCO order (x, y, conf)
STANDING_POSE = [
    (384, 160, 0.95),   # nose
    (372, 148, 0.93),   # left_eye
    (396, 148, 0.92),   # right_eye
    (358, 156, 0.40),   # left_ear (occluded)
    (410, 156, 0.88),   # right_ear
    (300, 400, 0.97),   # left_shoulder
    (468, 400, 0.96),   # right_shoulder
    (270, 500, 0.90),   # left_elbow
    (500, 500, 0.91),   # right_elbow
    (250, 590, 0.85),   # left_wrist
    (520, 590, 0.30),   # right_wrist (low confidence)
    (330, 600, 0.94),   # left_hip
    (438, 600, 0.93),   # right_hip
    (320, 690, 0.90),   # left_knee
    (448, 690, 0.89),   # right_knee
    (315, 750, 0.87),   # left_ankle
    (453, 750, 0.86),   # right_ankle
]


@pytest.fixture
def standing_pose() -> PoseData:
    return PoseData.from_coco(STANDING_POSE, width=768, height=768)


@pytest.fixture
def wide_pose() -> PoseData:
    """Same skeleton in a non-square 1024x512 frame"""
    points = [(x * 1024 / 768, y * 512 / 768, c) for x, y, c in STANDING_POSE]
    return PoseData.from_coco(points, width=1024, height=512)


@pytest.fixture
def pose_dict(standing_pose) -> dict:
    return standing_pose.to_dict()
