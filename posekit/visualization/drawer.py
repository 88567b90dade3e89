"""
Drawing utilities for pose skeleton overlays

Provides:
- Draw pose skeleton and keypoints
- Render a pose on a blank canvas
- Variation contact sheets
- Color management

Coordinates are drawn as-is in the y-down image frame, so a pose rotated
by a positive angle appears turned clockwise.
"""

import numpy as np
from typing import List, Optional, Sequence, Tuple

from ..core.constants import VARIANT_COLORS
from ..pose.models import PoseData
from ..pose.transforms import scale_pose


def generate_variant_color(index: int) -> Tuple[int, int, int]:
    """
    Generate consistent color for a variant position

    Args:
        index: Variant index (int)

    Returns:
        (B, G, R) color tuple

    Example:
        >>> color = generate_variant_color(0)
        >>> print(color)  # (0, 0, 255) red
    """
    if 0 <= index < len(VARIANT_COLORS):
        return VARIANT_COLORS[index]
    # Seeded so the same index always gets the same color
    rng = np.random.default_rng(index)
    return tuple(int(c) for c in rng.integers(0, 255, 3))


def _visible_points(pose: PoseData, conf_threshold: float) -> List[Optional[Tuple[int, int, float]]]:
    points = []
    for kp in pose.keypoints:
        if kp.confidence >= conf_threshold and np.isfinite(kp.x) and np.isfinite(kp.y):
            points.append((int(round(kp.x)), int(round(kp.y)), kp.confidence))
        else:
            points.append(None)
    return points


def draw_pose_skeleton(
    image: np.ndarray,
    pose: PoseData,
    color: Tuple[int, int, int] = (0, 0, 255),
    conf_threshold: float = 0.3,
    line_thickness: int = 2,
    point_radius: int = 4
) -> np.ndarray:
    """
    Draw pose skeleton on image

    Args:
        image: Input image (H, W, 3) BGR, in the pose's frame
        pose: Pose data; its own skeleton pairs are drawn
        color: (B, G, R) keypoint color
        conf_threshold: Minimum confidence for visualization
        line_thickness: Skeleton line thickness
        point_radius: Keypoint circle radius

    Returns:
        Modified image with skeleton drawn

    Example:
        >>> image = draw_pose_skeleton(image, pose, color=(255, 0, 0))
    """
    import cv2

    # Brighter line color
    line_color = tuple(min(255, int(c * 1.3)) for c in color)

    points = _visible_points(pose, conf_threshold)

    for idx1, idx2 in pose.skeleton:
        if idx1 >= len(points) or idx2 >= len(points):
            continue
        if points[idx1] is not None and points[idx2] is not None:
            pt1 = (points[idx1][0], points[idx1][1])
            pt2 = (points[idx2][0], points[idx2][1])
            cv2.line(image, pt1, pt2, line_color, line_thickness, cv2.LINE_AA)

    for point in points:
        if point is not None:
            x, y, conf = point
            # Radius scales with confidence
            radius = max(1, int(point_radius * (0.5 + conf * 0.5)))
            cv2.circle(image, (x, y), radius, color, -1)
            cv2.circle(image, (x, y), radius, (255, 255, 255), 1)  # White border

    return image


def draw_keypoints(
    image: np.ndarray,
    pose: PoseData,
    color: Tuple[int, int, int] = (0, 255, 0),
    conf_threshold: float = 0.3,
    radius: int = 3
) -> np.ndarray:
    """
    Draw keypoint circles only (no skeleton)

    Args:
        image: Input image
        pose: Pose data
        color: (B, G, R) color
        conf_threshold: Minimum confidence
        radius: Circle radius

    Returns:
        Modified image with keypoints drawn
    """
    import cv2

    for point in _visible_points(pose, conf_threshold):
        if point is not None:
            x, y, _ = point
            cv2.circle(image, (x, y), radius, color, -1)
            cv2.circle(image, (x, y), radius, (255, 255, 255), 1)

    return image


def render_pose(
    pose: PoseData,
    color: Tuple[int, int, int] = (0, 0, 255),
    background: Tuple[int, int, int] = (0, 0, 0),
    conf_threshold: float = 0.3,
    line_thickness: int = 2,
    point_radius: int = 4
) -> np.ndarray:
    """
    Render a pose on a blank canvas the size of its frame

    Args:
        pose: Pose data with positive width and height
        color: (B, G, R) skeleton color
        background: (B, G, R) canvas color

    Returns:
        Image of shape (round(height), round(width), 3)
    """
    height = max(1, int(round(pose.height)))
    width = max(1, int(round(pose.width)))
    canvas = np.zeros((height, width, 3), dtype=np.uint8)
    canvas[:] = background
    return draw_pose_skeleton(canvas, pose, color, conf_threshold, line_thickness, point_radius)


def overlay_pose(
    image: np.ndarray,
    pose: PoseData,
    color: Tuple[int, int, int] = (0, 0, 255),
    alpha: float = 0.6,
    conf_threshold: float = 0.3
) -> np.ndarray:
    """
    Blend a skeleton over a reference image

    The pose is rescaled to the image size first.

    Args:
        image: Reference image (H, W, 3) BGR
        pose: Pose data
        color: (B, G, R) skeleton color
        alpha: Skeleton opacity
        conf_threshold: Minimum confidence

    Returns:
        New blended image
    """
    h, w = image.shape[:2]
    if (pose.width, pose.height) != (w, h):
        pose = scale_pose(pose, w, h)

    layer = image.copy()
    draw_pose_skeleton(layer, pose, color, conf_threshold)
    return overlay_alpha(image, layer, alpha)


def draw_variation_sheet(
    variations: Sequence,
    tile_size: int = 256,
    conf_threshold: float = 0.3,
    background: Tuple[int, int, int] = (32, 32, 32)
) -> np.ndarray:
    """
    Tile variations side by side, each with its title

    Each pose is scaled uniformly to fit a square tile, so scaled
    variants look the same size and differ only in placement.

    Args:
        variations: PoseVariation objects (id, title, pose)
        tile_size: Tile edge in pixels
        conf_threshold: Minimum keypoint confidence
        background: (B, G, R) tile color

    Returns:
        Image of shape (tile_size, tile_size * len(variations), 3)
    """
    tiles = []
    for i, variation in enumerate(variations):
        tile = np.zeros((tile_size, tile_size, 3), dtype=np.uint8)
        tile[:] = background

        pose = variation.pose
        if pose is not None and pose.width > 0 and pose.height > 0:
            factor = tile_size / max(pose.width, pose.height)
            fitted = scale_pose(pose, pose.width * factor, pose.height * factor)
            draw_pose_skeleton(
                tile, fitted, generate_variant_color(i), conf_threshold,
                line_thickness=1, point_radius=3,
            )

        add_text_label(tile, variation.title, position=(6, 18), font_scale=0.45)
        tiles.append(tile)

    if not tiles:
        return np.zeros((tile_size, 0, 3), dtype=np.uint8)
    return np.hstack(tiles)


def add_text_label(
    image: np.ndarray,
    text: str,
    position: Tuple[int, int] = (10, 30),
    font_scale: float = 0.6,
    thickness: int = 1,
    color: Tuple[int, int, int] = (255, 255, 255),
    bg_color: Optional[Tuple[int, int, int]] = (0, 0, 0)
) -> np.ndarray:
    """
    Add text label to image

    Args:
        image: Input image
        text: Text to display
        position: (x, y) position
        font_scale: Font size
        thickness: Text thickness
        color: (B, G, R) text color
        bg_color: Background color (None for no background)

    Returns:
        Modified image
    """
    import cv2

    # Hershey fonts are ASCII-only
    text = text.replace('°', ' deg').encode('ascii', 'replace').decode('ascii')

    font = cv2.FONT_HERSHEY_SIMPLEX
    (text_w, text_h), baseline = cv2.getTextSize(text, font, font_scale, thickness)

    x, y = position

    if bg_color is not None:
        cv2.rectangle(
            image,
            (x - 2, y - text_h - baseline - 2),
            (x + text_w + 2, y + baseline + 2),
            bg_color,
            -1
        )

    cv2.putText(image, text, (x, y), font, font_scale, color, thickness, cv2.LINE_AA)

    return image


def overlay_alpha(
    image: np.ndarray,
    overlay: np.ndarray,
    alpha: float = 0.3
) -> np.ndarray:
    """
    Overlay transparent image on top of base image

    Args:
        image: Base image (H, W, 3)
        overlay: Overlay image (H, W, 3) or (H, W, 4) with alpha channel
        alpha: Transparency (0.0 = fully transparent, 1.0 = fully opaque)

    Returns:
        Blended image
    """
    if overlay.shape[2] == 4:
        overlay_rgb = overlay[:, :, :3]
        overlay_mask = overlay[:, :, 3:4] / 255.0
        blended = image.astype(np.float32) * (1 - alpha) + overlay_rgb.astype(np.float32) * alpha * overlay_mask
    else:
        blended = image.astype(np.float32) * (1 - alpha) + overlay.astype(np.float32) * alpha

    return np.clip(blended, 0, 255).astype(np.uint8)
