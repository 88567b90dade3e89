"""
Structural validation of pose data

validate_pose_data() is a boolean type guard for untrusted input (parsed
JSON, API payloads). ensure_pose_data() runs the guard and returns a
PoseData, raising ValidationError instead of returning False.
"""

import logging
from collections.abc import Mapping
from numbers import Integral, Real
from typing import Any

from ..core.exceptions import ValidationError
from .models import Keypoint, PoseData

logger = logging.getLogger(__name__)

_MISSING = object()


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name, _MISSING)
    return getattr(value, name, _MISSING)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_keypoint(kp: Any) -> bool:
    return (
        _is_number(_field(kp, 'x'))
        and _is_number(_field(kp, 'y'))
        and _is_number(_field(kp, 'confidence'))
        and isinstance(_field(kp, 'label'), str)
    )


def validate_pose_data(value: Any) -> bool:
    """
    Check that a value has the shape of PoseData

    Requires list/tuple `keypoints` and `skeleton`, numeric `width` and
    `height`, and numeric x/y/confidence plus a string label on every
    keypoint. Works on mappings and on objects with attributes.

    Args:
        value: Anything

    Returns:
        True only if every condition holds. Never raises.

    Example:
        >>> validate_pose_data({"keypoints": "not-an-array"})
        False
        >>> validate_pose_data(pose.to_dict())
        True
    """
    if value is None or isinstance(value, (str, bytes)):
        return False

    keypoints = _field(value, 'keypoints')
    skeleton = _field(value, 'skeleton')
    return (
        _is_sequence(keypoints)
        and _is_sequence(skeleton)
        and _is_number(_field(value, 'width'))
        and _is_number(_field(value, 'height'))
        and all(_is_keypoint(kp) for kp in keypoints)
    )


def _check_skeleton(skeleton: Any, num_keypoints: int) -> None:
    for pair in skeleton:
        if not _is_sequence(pair) or len(pair) != 2:
            raise ValidationError(f"Skeleton entry is not an index pair: {pair!r}")
        for idx in pair:
            if isinstance(idx, bool) or not isinstance(idx, Integral):
                raise ValidationError(f"Skeleton index is not an integer: {idx!r}")
            if idx < 0 or idx >= num_keypoints:
                raise ValidationError(
                    f"Skeleton index {idx} out of range for {num_keypoints} keypoints"
                )


def ensure_pose_data(value: Any) -> PoseData:
    """
    Validate untrusted input and build a PoseData from it

    On top of validate_pose_data(), every skeleton pair must reference
    existing keypoint positions.

    Args:
        value: PoseData, a mapping in the JSON object form, or an object
            with the same attributes

    Returns:
        PoseData

    Raises:
        ValidationError: If the input is malformed
    """
    if not validate_pose_data(value):
        logger.warning("Rejected malformed pose data of type %s", type(value).__name__)
        raise ValidationError("Value does not have the shape of PoseData")

    keypoints = _field(value, 'keypoints')
    skeleton = _field(value, 'skeleton')
    _check_skeleton(skeleton, len(keypoints))

    if isinstance(value, PoseData):
        return value

    return PoseData(
        keypoints=[
            kp if isinstance(kp, Keypoint) else Keypoint(
                x=float(_field(kp, 'x')),
                y=float(_field(kp, 'y')),
                confidence=float(_field(kp, 'confidence')),
                label=_field(kp, 'label'),
            )
            for kp in keypoints
        ],
        skeleton=skeleton,
        width=_field(value, 'width'),
        height=_field(value, 'height'),
    )
