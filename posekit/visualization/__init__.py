"""
Visualization module - Rendering pose skeletons

Provides:
- Skeleton and keypoint drawing
- Blank-canvas rendering and overlays
- Variation contact sheets
- Color management
"""

from .drawer import (
    generate_variant_color,
    draw_pose_skeleton,
    draw_keypoints,
    render_pose,
    overlay_pose,
    draw_variation_sheet,
    add_text_label,
    overlay_alpha,
)

__all__ = [
    # Color
    "generate_variant_color",
    # Drawing
    "draw_pose_skeleton",
    "draw_keypoints",
    "render_pose",
    "overlay_pose",
    "draw_variation_sheet",
    "add_text_label",
    "overlay_alpha",
]
