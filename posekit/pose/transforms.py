"""
Geometric pose transforms

Provides:
- mirror_pose: horizontal flip with left/right slot swap
- scale_pose: resize into a new frame
- rotate_pose: rotation about the frame center
- transform_pose: fixed-order composition (mirror -> scale -> rotate)

Transforms trust their input. Run validate_pose_data() / ensure_pose_data()
on anything that did not come from this package.
"""

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import numpy as np

from ..core.constants import MIRROR_MAPPING
from ..core.exceptions import TransformError
from .models import PoseData

logger = logging.getLogger(__name__)


def get_mirror_partner(index: int, num_keypoints: Optional[int] = None) -> int:
    """
    Index whose values land in `index` when the pose is mirrored

    Args:
        index: Keypoint position
        num_keypoints: Pose length; partners outside it fall back to `index`

    Returns:
        Partner index, or `index` itself for midline / unmapped points

    Example:
        >>> get_mirror_partner(5)   # left_shoulder
        6
        >>> get_mirror_partner(0)   # nose
        0
    """
    partner = MIRROR_MAPPING.get(index, index)
    if num_keypoints is not None and partner >= num_keypoints:
        return index
    return partner


def mirror_pose(pose: PoseData) -> PoseData:
    """
    Flip a pose about the vertical centerline of its frame

    Slot i receives the values of its mirror partner with x replaced by
    width - x. Labels stay with their slot, so index -> anatomy holds.

    Mirroring twice restores integer coordinates exactly; fractional
    coordinates come back within floating point rounding of width - x.

    Args:
        pose: Source pose

    Returns:
        New mirrored PoseData

    Example:
        >>> mirrored = mirror_pose(pose)
        >>> mirrored.keypoints[5].label == pose.keypoints[5].label
        True
    """
    n = pose.num_keypoints
    keypoints = []
    for i, slot in enumerate(pose.keypoints):
        source = pose.keypoints[get_mirror_partner(i, n)]
        keypoints.append(replace(source, x=pose.width - source.x, label=slot.label))

    return PoseData(
        keypoints=keypoints,
        skeleton=pose.skeleton,
        width=pose.width,
        height=pose.height,
    )


def scale_pose(pose: PoseData, new_width: float, new_height: float) -> PoseData:
    """
    Rescale a pose into a frame of a different size

    Args:
        pose: Source pose
        new_width: Target frame width
        new_height: Target frame height

    Returns:
        New PoseData in the target frame

    Raises:
        TransformError: If the source width or height is not positive
    """
    if pose.width <= 0 or pose.height <= 0:
        raise TransformError(
            f"Cannot scale pose with non-positive frame {pose.width}x{pose.height}"
        )

    factors = np.array([new_width / pose.width, new_height / pose.height])
    coords = pose.coordinates() * factors
    return pose.with_coordinates(coords, width=new_width, height=new_height)


def rotate_pose(pose: PoseData, angle: float) -> PoseData:
    """
    Rotate a pose about the center of its frame

    Uses x' = dx*cos - dy*sin, y' = dx*sin + dy*cos. In y-down image
    coordinates a positive angle turns the pose clockwise on screen.

    Args:
        pose: Source pose
        angle: Rotation in degrees

    Returns:
        New rotated PoseData, same frame
    """
    center = np.array([pose.width / 2, pose.height / 2])
    radians = np.deg2rad(angle)
    cos, sin = np.cos(radians), np.sin(radians)
    rotation = np.array([[cos, -sin], [sin, cos]])

    relative = pose.coordinates() - center
    coords = relative @ rotation.T + center
    return pose.with_coordinates(coords)


@dataclass(frozen=True)
class TransformSpec:
    """
    Requested combination of transforms

    Application order is fixed: mirror, then scale, then rotate.
    """
    mirror: bool = False
    scale: Optional[Tuple[float, float]] = None
    rotation: Optional[float] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "TransformSpec":
        """
        Create from {"mirror": bool, "scale": {"width", "height"}, "rotation": deg}

        Missing keys are omitted steps.
        """
        scale = d.get('scale')
        if isinstance(scale, Mapping):
            scale = (float(scale['width']), float(scale['height']))
        elif scale is not None:
            scale = (float(scale[0]), float(scale[1]))

        rotation = d.get('rotation')
        return cls(
            mirror=bool(d.get('mirror', False)),
            scale=scale,
            rotation=None if rotation is None else float(rotation),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the mapping form, omitting unused steps"""
        d: Dict[str, Any] = {}
        if self.mirror:
            d['mirror'] = True
        if self.scale is not None:
            d['scale'] = {'width': self.scale[0], 'height': self.scale[1]}
        if self.rotation is not None:
            d['rotation'] = self.rotation
        return d

    def describe(self) -> str:
        """
        Transformation tag for a custom variant

        Example:
            >>> TransformSpec(mirror=True, rotation=15).describe()
            'mirror:true,rotation:15'
        """
        parts = []
        for key, value in self.to_dict().items():
            if isinstance(value, dict):
                parts.append(f"{key}:{json.dumps(_compact_numbers(value), separators=(',', ':'))}")
            elif isinstance(value, bool):
                parts.append(f"{key}:{'true' if value else 'false'}")
            else:
                parts.append(f"{key}:{_format_number(value)}")
        return ','.join(parts)


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _compact_numbers(d: Dict[str, float]) -> Dict[str, Union[int, float]]:
    return {k: int(v) if float(v).is_integer() else v for k, v in d.items()}


def transform_pose(
    pose: PoseData,
    transformations: Union[TransformSpec, Mapping[str, Any]],
) -> PoseData:
    """
    Apply mirror, scale and rotation in that fixed order

    Args:
        pose: Source pose
        transformations: TransformSpec or its mapping form

    Returns:
        Transformed PoseData (the input itself when nothing is requested)

    Example:
        >>> out = transform_pose(pose, {"mirror": True, "rotation": 15})
    """
    if not isinstance(transformations, TransformSpec):
        transformations = TransformSpec.from_dict(transformations)

    result = pose
    if transformations.mirror:
        result = mirror_pose(result)
    if transformations.scale is not None:
        result = scale_pose(result, *transformations.scale)
    if transformations.rotation is not None:
        result = rotate_pose(result, transformations.rotation)

    logger.debug("Applied transforms: %s", transformations.describe() or "none")
    return result
