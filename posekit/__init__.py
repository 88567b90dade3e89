"""
PoseKit - pose reference toolkit for a photography pose catalog

A Python package for:
- 2D keypoint skeleton transforms (mirror, scale, rotate)
- Pose similarity scoring and search
- Pose variation generation
- OpenPose JSON interchange
- Catalog export, search and reference image processing
"""

__version__ = "0.1.0"
__author__ = "PoseKit Team"

# Core imports (numpy / pyyaml only)
from .core.config import (
    PoseKitConfig,
    SimilarityConfig,
    VariantConfig,
    SearchConfig,
    ImageConfig,
    PathConfig,
)
from .core.constants import (
    COCO_KEYPOINT_NAMES,
    COCO_SKELETON_CONNECTIONS,
    MIRROR_MAPPING,
)
from .core.exceptions import (
    PoseKitException,
    DataLoadError,
    ConfigError,
    ValidationError,
    TransformError,
    ImageProcessingError,
    ExportError,
)
from .pose import (
    Keypoint,
    PoseData,
    PoseCandidate,
    SimilarPose,
    TransformSpec,
    mirror_pose,
    scale_pose,
    rotate_pose,
    transform_pose,
    calculate_pose_similarity,
    find_similar_poses,
    PoseVariation,
    VariantCollection,
    generate_pose_variations,
    create_custom_variant,
    validate_pose_data,
    ensure_pose_data,
)


# Lazy imports for modules with heavier dependencies
def __getattr__(name):
    """Lazy loading for modules with external dependencies"""
    if name in ("to_openpose_format", "from_openpose_format",
                "load_openpose_json", "save_openpose_json"):
        from .io import openpose
        return getattr(openpose, name)
    elif name == "PoseLoader":
        from .io.data_loader import PoseLoader
        return PoseLoader
    elif name == "ImageProcessor":
        from .io.image_processor import ImageProcessor
        return ImageProcessor
    elif name in ("PoseExportRecord", "export_poses_to_json",
                  "export_poses_to_csv", "export_pose_archive"):
        from .io import export
        return getattr(export, name)
    elif name in ("CatalogItem", "CatalogSearch", "SearchFilters", "SearchResult"):
        from .catalog import search
        return getattr(search, name)
    elif name in ("render_pose", "draw_pose_skeleton", "draw_variation_sheet"):
        from .visualization import drawer
        return getattr(drawer, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Config
    "PoseKitConfig",
    "SimilarityConfig",
    "VariantConfig",
    "SearchConfig",
    "ImageConfig",
    "PathConfig",
    # Constants
    "COCO_KEYPOINT_NAMES",
    "COCO_SKELETON_CONNECTIONS",
    "MIRROR_MAPPING",
    # Exceptions
    "PoseKitException",
    "DataLoadError",
    "ConfigError",
    "ValidationError",
    "TransformError",
    "ImageProcessingError",
    "ExportError",
    # Pose
    "Keypoint",
    "PoseData",
    "PoseCandidate",
    "SimilarPose",
    "TransformSpec",
    "mirror_pose",
    "scale_pose",
    "rotate_pose",
    "transform_pose",
    "calculate_pose_similarity",
    "find_similar_poses",
    "PoseVariation",
    "VariantCollection",
    "generate_pose_variations",
    "create_custom_variant",
    "validate_pose_data",
    "ensure_pose_data",
    # IO
    "to_openpose_format",
    "from_openpose_format",
    "load_openpose_json",
    "save_openpose_json",
    "PoseLoader",
    "ImageProcessor",
    "PoseExportRecord",
    "export_poses_to_json",
    "export_poses_to_csv",
    "export_pose_archive",
    # Catalog
    "CatalogItem",
    "CatalogSearch",
    "SearchFilters",
    "SearchResult",
    # Visualization
    "render_pose",
    "draw_pose_skeleton",
    "draw_variation_sheet",
]
