"""
Pose similarity scoring and nearest-neighbour search
"""

import logging
from typing import Iterable, List, Optional

import numpy as np

from ..core.config import SimilarityConfig
from ..core.constants import (
    SIMILARITY_CONFIDENCE_THRESHOLD,
    SIMILARITY_SENSITIVITY,
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_MAX_SIMILAR_RESULTS,
)
from .models import PoseCandidate, PoseData, SimilarPose

logger = logging.getLogger(__name__)


def calculate_pose_similarity(
    pose1: PoseData,
    pose2: PoseData,
    confidence_threshold: float = SIMILARITY_CONFIDENCE_THRESHOLD,
    sensitivity: float = SIMILARITY_SENSITIVITY,
) -> float:
    """
    Similarity of two poses in [0, 1], 1 meaning identical

    Only indices where both keypoints are above `confidence_threshold`
    are compared. Distances are normalized by the diagonal of pose1's
    frame, averaged, and mapped to max(0, 1 - avg * sensitivity).

    Args:
        pose1: Reference pose (its frame sets the normalization)
        pose2: Pose to compare
        confidence_threshold: Keypoints at or below this are skipped
        sensitivity: Distance multiplier

    Returns:
        Similarity score; 0.0 when the poses differ in length or no
        keypoint pair qualifies

    Example:
        >>> calculate_pose_similarity(pose, pose)
        1.0
    """
    if pose1.num_keypoints != pose2.num_keypoints:
        logger.debug(
            "Keypoint count mismatch (%d vs %d), similarity is 0",
            pose1.num_keypoints, pose2.num_keypoints,
        )
        return 0.0

    diagonal = pose1.diagonal
    if pose1.num_keypoints == 0 or diagonal <= 0:
        return 0.0

    conf1 = np.array([kp.confidence for kp in pose1.keypoints])
    conf2 = np.array([kp.confidence for kp in pose2.keypoints])
    mask = (conf1 > confidence_threshold) & (conf2 > confidence_threshold)

    valid_points = int(mask.sum())
    if valid_points == 0:
        return 0.0

    deltas = pose1.coordinates()[mask] - pose2.coordinates()[mask]
    distances = np.hypot(deltas[:, 0], deltas[:, 1]) / diagonal
    avg_distance = float(distances.mean())

    return max(0.0, 1.0 - avg_distance * sensitivity)


def find_similar_poses(
    target: PoseData,
    candidates: Iterable[PoseCandidate],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    max_results: int = DEFAULT_MAX_SIMILAR_RESULTS,
    config: Optional[SimilarityConfig] = None,
) -> List[SimilarPose]:
    """
    Rank candidates by similarity to a target pose

    Candidates scoring below `threshold` are dropped. Ties keep input
    order.

    Args:
        target: Pose to match
        candidates: Catalog poses with identifiers
        threshold: Minimum similarity to keep
        max_results: Result cap
        config: When given, overrides threshold, max_results and the
            scoring parameters

    Returns:
        List of SimilarPose, best first

    Raises:
        ValueError: If max_results is negative

    Example:
        >>> hits = find_similar_poses(target, [PoseCandidate("a", p1), PoseCandidate("b", p2)])
        >>> [(hit.candidate.id, round(hit.similarity, 2)) for hit in hits]
    """
    confidence_threshold = SIMILARITY_CONFIDENCE_THRESHOLD
    sensitivity = SIMILARITY_SENSITIVITY
    if config is not None:
        threshold = config.threshold
        max_results = config.max_results
        confidence_threshold = config.confidence_threshold
        sensitivity = config.sensitivity
    if max_results < 0:
        raise ValueError(f"max_results must be >= 0, got {max_results}")

    scored = [
        SimilarPose(
            candidate,
            calculate_pose_similarity(target, candidate.pose, confidence_threshold, sensitivity),
        )
        for candidate in candidates
    ]
    kept = [hit for hit in scored if hit.similarity >= threshold]
    # sorted() is stable, so equal scores keep candidate order
    kept = sorted(kept, key=lambda hit: hit.similarity, reverse=True)

    logger.debug("%d of %d candidates above threshold %.2f", len(kept), len(scored), threshold)
    return kept[:max_results]
