"""
Custom exceptions for PoseKit

Provides specific exception types for:
- Pose data loading errors
- Pose validation errors
- Transform precondition errors
- Image processing and export errors
- Configuration errors
"""

import logging

logger = logging.getLogger(__name__)


class PoseKitException(Exception):
    """
    Base exception class for all PoseKit exceptions

    All custom exceptions should inherit from this class so callers
    (the CLI in particular) can catch everything PoseKit raises at once.
    """
    pass


class DataLoadError(PoseKitException):
    """
    Raised when pose or catalog files fail to load

    Applicable to:
    - Pose JSON files
    - OpenPose JSON files
    - Batches of pose files

    Example:
        >>> from posekit.core.exceptions import DataLoadError
        >>> from posekit.io import PoseLoader
        >>> try:
        ...     pose = PoseLoader.load("missing.json")
        ... except DataLoadError as e:
        ...     print(f"Failed to load pose: {e}")
    """
    pass


class ConfigError(PoseKitException, ValueError):
    """
    Raised when configuration is invalid or missing

    Reasons:
    - Configuration value is out of valid range
    - Invalid configuration file format
    - Unknown image format or log level
    """
    pass


class ValidationError(PoseKitException, ValueError):
    """
    Raised when externally supplied data does not have the shape of PoseData

    Raised by ensure_pose_data(), the guarded entry point used before
    handing user-provided JSON to any transform.

    Example:
        >>> from posekit.pose import ensure_pose_data
        >>> try:
        ...     pose = ensure_pose_data({"keypoints": "not-an-array"})
        ... except ValidationError as e:
        ...     print(e)
    """
    pass


class TransformError(PoseKitException, ValueError):
    """
    Raised when a transform precondition is violated

    Reasons:
    - Scaling a pose whose source width or height is not positive
    """
    pass


class ImageProcessingError(PoseKitException):
    """
    Raised when a reference image cannot be decoded, resized or written

    Example:
        >>> from posekit.io import ImageProcessor
        >>> processor = ImageProcessor("uploads")
        >>> try:
        ...     processor.process_image(b"not an image", "broken.jpg")
        ... except ImageProcessingError as e:
        ...     print(e)
    """
    pass


class ExportError(PoseKitException):
    """
    Raised when a catalog export cannot be written
    """
    pass


def handle_posekit_exception(e: PoseKitException, verbose: bool = True) -> str:
    """
    Handle PoseKit exceptions with formatted error message

    Args:
        e: The PoseKitException instance
        verbose: If True, log the error message

    Returns:
        Formatted error message string
    """
    error_type = type(e).__name__
    error_msg = str(e)
    formatted_msg = f"[{error_type}] {error_msg}"

    if verbose:
        logger.error(formatted_msg)

    return formatted_msg
