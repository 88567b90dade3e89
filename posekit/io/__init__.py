"""
IO module - Pose interchange, loading, export and image processing

Provides unified interfaces for:
- OpenPose JSON import/export
- Pose JSON loading with validation
- Catalog export (JSON, CSV, ZIP)
- Reference image processing
"""

from .openpose import (
    to_openpose_format,
    from_openpose_format,
    load_openpose_json,
    save_openpose_json,
)
from .data_loader import PoseLoader
from .export import (
    PoseExportRecord,
    export_poses_to_json,
    export_poses_to_csv,
    export_pose_archive,
)
from .image_processor import ImageProcessor, ProcessedImage, BatchProgress

__all__ = [
    "to_openpose_format",
    "from_openpose_format",
    "load_openpose_json",
    "save_openpose_json",
    "PoseLoader",
    "PoseExportRecord",
    "export_poses_to_json",
    "export_poses_to_csv",
    "export_pose_archive",
    "ImageProcessor",
    "ProcessedImage",
    "BatchProgress",
]
