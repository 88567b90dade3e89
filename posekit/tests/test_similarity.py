"""
Tests for pose similarity scoring and search
"""

from dataclasses import replace

import numpy as np
import pytest

from posekit.core.config import SimilarityConfig
from posekit.pose import (
    Keypoint,
    PoseCandidate,
    PoseData,
    calculate_pose_similarity,
    find_similar_poses,
    mirror_pose,
    rotate_pose,
)


def _shifted(pose, dx, dy=0.0):
    return pose.with_coordinates(pose.coordinates() + np.array([dx, dy]))


def _with_confidence(pose, confidence):
    return PoseData(
        keypoints=[replace(kp, confidence=confidence) for kp in pose.keypoints],
        skeleton=pose.skeleton,
        width=pose.width,
        height=pose.height,
    )


def test_identical_poses_score_one(standing_pose):
    assert calculate_pose_similarity(standing_pose, standing_pose) == 1.0


def test_uniform_shift_score(standing_pose):
    shifted = _shifted(standing_pose, 10)
    expected = 1 - 5 * 10 / np.hypot(768, 768)
    assert calculate_pose_similarity(standing_pose, shifted) == pytest.approx(expected)


def test_low_confidence_keypoints_are_ignored(standing_pose):
    # Move only right_wrist (conf 0.30); it is excluded so the score stays 1
    coords = standing_pose.coordinates()
    coords[10] += [300, 100]
    moved = standing_pose.with_coordinates(coords)
    assert calculate_pose_similarity(standing_pose, moved) == 1.0


def test_confidence_exactly_at_threshold_is_excluded(standing_pose):
    half = _with_confidence(standing_pose, 0.5)
    assert calculate_pose_similarity(half, half) == 0.0
    assert calculate_pose_similarity(standing_pose, half) == 0.0


def test_all_low_confidence_scores_zero(standing_pose):
    faint = _with_confidence(standing_pose, 0.1)
    assert calculate_pose_similarity(faint, faint) == 0.0


def test_keypoint_count_mismatch_scores_zero(standing_pose):
    short = PoseData(
        keypoints=standing_pose.keypoints[:5],
        skeleton=[(0, 1)],
        width=768,
        height=768,
    )
    assert calculate_pose_similarity(standing_pose, short) == 0.0
    assert calculate_pose_similarity(short, standing_pose) == 0.0


def test_zero_frame_scores_zero():
    pose = PoseData(keypoints=[Keypoint(0, 0, 1.0, 'nose')], skeleton=[], width=0, height=0)
    assert calculate_pose_similarity(pose, pose) == 0.0


def test_empty_poses_score_zero():
    empty = PoseData(keypoints=[], skeleton=[], width=100, height=100)
    assert calculate_pose_similarity(empty, empty) == 0.0


def test_far_apart_poses_clamp_to_zero(standing_pose):
    far = _shifted(standing_pose, 700, 700)
    assert calculate_pose_similarity(standing_pose, far) == 0.0


def test_symmetry_and_bounds(standing_pose):
    rng = np.random.default_rng(7)
    for _ in range(20):
        noise = rng.normal(scale=25.0, size=(standing_pose.num_keypoints, 2))
        other = standing_pose.with_coordinates(standing_pose.coordinates() + noise)
        ab = calculate_pose_similarity(standing_pose, other)
        ba = calculate_pose_similarity(other, standing_pose)
        assert 0.0 <= ab <= 1.0
        assert ab == pytest.approx(ba)


def test_transformed_pose_scores_below_one(standing_pose):
    assert calculate_pose_similarity(standing_pose, rotate_pose(standing_pose, 15)) < 1.0
    assert calculate_pose_similarity(standing_pose, mirror_pose(standing_pose)) < 1.0


def test_sensitivity_parameter(standing_pose):
    shifted = _shifted(standing_pose, 10)
    gentle = calculate_pose_similarity(standing_pose, shifted, sensitivity=1.0)
    assert gentle == pytest.approx(1 - 10 / np.hypot(768, 768))


def test_find_similar_ordering_and_ties(standing_pose):
    candidates = [
        PoseCandidate('b', _shifted(standing_pose, 10)),
        PoseCandidate('a', standing_pose),
        PoseCandidate('c', _shifted(standing_pose, 400, 300)),
        PoseCandidate('dup', standing_pose),
    ]
    hits = find_similar_poses(standing_pose, candidates)

    assert [hit.candidate.id for hit in hits] == ['a', 'dup', 'b']
    assert hits[0].similarity == 1.0
    assert hits[1].similarity == 1.0
    assert hits[2].similarity < 1.0
    print("✓ Similar poses ranked best first")


def test_find_similar_threshold_and_cap(standing_pose):
    candidates = PoseCandidate.from_pairs(
        (f"p{i}", _shifted(standing_pose, i * 5)) for i in range(10)
    )

    capped = find_similar_poses(standing_pose, candidates, threshold=0.0, max_results=3)
    assert [hit.candidate.id for hit in capped] == ['p0', 'p1', 'p2']

    strict = find_similar_poses(standing_pose, candidates, threshold=0.99, max_results=10)
    assert [hit.candidate.id for hit in strict] == ['p0']

    assert find_similar_poses(standing_pose, [], threshold=0.0) == []


def test_find_similar_config_overrides_arguments(standing_pose):
    candidates = PoseCandidate.from_pairs(
        (f"p{i}", _shifted(standing_pose, i * 5)) for i in range(10)
    )
    config = SimilarityConfig(threshold=0.0, max_results=2)
    hits = find_similar_poses(standing_pose, candidates, threshold=0.99, max_results=10, config=config)
    assert len(hits) == 2


def test_find_similar_rejects_negative_cap(standing_pose):
    candidates = [PoseCandidate('a', standing_pose)]
    with pytest.raises(ValueError):
        find_similar_poses(standing_pose, candidates, max_results=-1)

    assert find_similar_poses(standing_pose, candidates, max_results=0) == []
