"""
Pose module - keypoint skeletons and their geometry

Provides:
- Keypoint / PoseData value types
- Mirror, scale, rotate and composed transforms
- Similarity scoring and nearest-neighbour search
- Variation generation and variant collections
- Structural validation
- Keypoint utilities
"""

from .models import Keypoint, PoseData, PoseCandidate, SimilarPose
from .transforms import (
    TransformSpec,
    get_mirror_partner,
    mirror_pose,
    scale_pose,
    rotate_pose,
    transform_pose,
)
from .similarity import calculate_pose_similarity, find_similar_poses
from .variations import (
    PoseVariation,
    VariantCollection,
    generate_pose_variations,
    create_custom_variant,
)
from .validation import validate_pose_data, ensure_pose_data
from .keypoint_utils import (
    pose_to_array,
    keypoints_to_dict,
    filter_keypoints,
    get_skeleton_connections,
    compute_keypoint_stats,
    compute_pose_center,
    keypoints_in_bounds,
)

__all__ = [
    # Models
    "Keypoint",
    "PoseData",
    "PoseCandidate",
    "SimilarPose",
    # Transforms
    "TransformSpec",
    "get_mirror_partner",
    "mirror_pose",
    "scale_pose",
    "rotate_pose",
    "transform_pose",
    # Similarity
    "calculate_pose_similarity",
    "find_similar_poses",
    # Variations
    "PoseVariation",
    "VariantCollection",
    "generate_pose_variations",
    "create_custom_variant",
    # Validation
    "validate_pose_data",
    "ensure_pose_data",
    # Keypoint utilities
    "pose_to_array",
    "keypoints_to_dict",
    "filter_keypoints",
    "get_skeleton_connections",
    "compute_keypoint_stats",
    "compute_pose_center",
    "keypoints_in_bounds",
]
