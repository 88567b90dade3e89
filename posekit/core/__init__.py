"""
Core module - Configuration, constants, and exceptions for PoseKit
"""

from .config import (
    PoseKitConfig,
    SimilarityConfig,
    VariantConfig,
    SearchConfig,
    InterchangeConfig,
    ImageConfig,
    PathConfig,
    LoggingConfig,
)
from .constants import (
    COCO_KEYPOINT_NAMES,
    COCO_SKELETON_CONNECTIONS,
    MIRROR_MAPPING,
    OPENPOSE_FORMAT_VERSION,
    DEFAULT_FRAME_WIDTH,
    DEFAULT_FRAME_HEIGHT,
)
from .exceptions import (
    PoseKitException,
    DataLoadError,
    ConfigError,
    ValidationError,
    TransformError,
    ImageProcessingError,
    ExportError,
    handle_posekit_exception,
)

__all__ = [
    "PoseKitConfig",
    "SimilarityConfig",
    "VariantConfig",
    "SearchConfig",
    "InterchangeConfig",
    "ImageConfig",
    "PathConfig",
    "LoggingConfig",
    "COCO_KEYPOINT_NAMES",
    "COCO_SKELETON_CONNECTIONS",
    "MIRROR_MAPPING",
    "OPENPOSE_FORMAT_VERSION",
    "DEFAULT_FRAME_WIDTH",
    "DEFAULT_FRAME_HEIGHT",
    "PoseKitException",
    "DataLoadError",
    "ConfigError",
    "ValidationError",
    "TransformError",
    "ImageProcessingError",
    "ExportError",
    "handle_posekit_exception",
]
