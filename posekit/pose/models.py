"""
Pose value types

Provides:
- Keypoint: one labeled 2D landmark with a detector confidence
- PoseData: ordered keypoints, skeleton connectivity and the frame size
- PoseCandidate / SimilarPose: inputs and results of similarity search

All types are frozen. Transforms build new instances instead of mutating.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..core.constants import COCO_KEYPOINT_NAMES, COCO_SKELETON_CONNECTIONS


@dataclass(frozen=True)
class Keypoint:
    """A labeled 2D point in the pose frame"""
    x: float
    y: float
    confidence: float = 1.0
    label: str = ""

    @classmethod
    def from_dict(cls, d: Dict) -> "Keypoint":
        """Create instance from dictionary"""
        return cls(
            x=float(d['x']),
            y=float(d['y']),
            confidence=float(d['confidence']),
            label=str(d['label']),
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return {
            'x': self.x,
            'y': self.y,
            'confidence': self.confidence,
            'label': self.label,
        }

    def to_triple(self) -> Tuple[float, float, float]:
        """Convert to (x, y, confidence)"""
        return (self.x, self.y, self.confidence)


@dataclass(frozen=True)
class PoseData:
    """
    A skeleton expressed in the pixel space of its reference image

    Positional index is anatomical identity: keypoints[5] is always the
    left shoulder slot in the COCO layout, whatever values it holds.

    Example:
        >>> pose = PoseData.from_coco([(100, 80)] * 17, width=768, height=768)
        >>> len(pose.keypoints)
        17
    """
    keypoints: Tuple[Keypoint, ...]
    skeleton: Tuple[Tuple[int, int], ...] = field(
        default_factory=lambda: tuple(COCO_SKELETON_CONNECTIONS)
    )
    width: float = 0.0
    height: float = 0.0

    def __post_init__(self):
        # Accept lists from callers, store tuples
        object.__setattr__(self, 'keypoints', tuple(self.keypoints))
        object.__setattr__(
            self, 'skeleton', tuple((int(i), int(j)) for i, j in self.skeleton)
        )

    @property
    def num_keypoints(self) -> int:
        return len(self.keypoints)

    @property
    def labels(self) -> List[str]:
        return [kp.label for kp in self.keypoints]

    @property
    def diagonal(self) -> float:
        """Length of the frame diagonal"""
        return float(np.hypot(self.width, self.height))

    def coordinates(self) -> np.ndarray:
        """
        Keypoint coordinates as an (N, 2) float array

        Returns:
            Array of [x, y] rows in keypoint order
        """
        if not self.keypoints:
            return np.zeros((0, 2), dtype=np.float64)
        return np.array([(kp.x, kp.y) for kp in self.keypoints], dtype=np.float64)

    def with_coordinates(
        self,
        coords: np.ndarray,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> "PoseData":
        """
        Build a new pose with replaced coordinates

        Confidence and label of every keypoint are kept. Frame size is kept
        unless a new one is given.

        Args:
            coords: (N, 2) array, same N as this pose
            width: New frame width (optional)
            height: New frame height (optional)

        Returns:
            New PoseData
        """
        keypoints = tuple(
            replace(kp, x=float(x), y=float(y))
            for kp, (x, y) in zip(self.keypoints, coords)
        )
        return PoseData(
            keypoints=keypoints,
            skeleton=self.skeleton,
            width=self.width if width is None else width,
            height=self.height if height is None else height,
        )

    @classmethod
    def from_dict(cls, d: Dict) -> "PoseData":
        """Create instance from the JSON object form"""
        return cls(
            keypoints=[Keypoint.from_dict(kp) for kp in d['keypoints']],
            skeleton=[tuple(pair) for pair in d['skeleton']],
            width=d['width'],
            height=d['height'],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON object form"""
        return {
            'keypoints': [kp.to_dict() for kp in self.keypoints],
            'skeleton': [list(pair) for pair in self.skeleton],
            'width': self.width,
            'height': self.height,
        }

    @classmethod
    def from_coco(
        cls,
        points: Sequence[Sequence[float]],
        width: float,
        height: float,
        confidence: float = 1.0,
    ) -> "PoseData":
        """
        Build a 17-point COCO pose from (x, y) or (x, y, conf) rows

        Args:
            points: One row per COCO keypoint, in COCO order
            width: Frame width
            height: Frame height
            confidence: Confidence used for rows without a third value

        Returns:
            PoseData labeled with COCO keypoint names and the COCO skeleton
        """
        keypoints = []
        for i, row in enumerate(points):
            label = COCO_KEYPOINT_NAMES[i] if i < len(COCO_KEYPOINT_NAMES) else f"keypoint_{i}"
            conf = row[2] if len(row) > 2 else confidence
            keypoints.append(Keypoint(float(row[0]), float(row[1]), float(conf), label))
        return cls(
            keypoints=keypoints,
            skeleton=COCO_SKELETON_CONNECTIONS,
            width=width,
            height=height,
        )


@dataclass(frozen=True)
class PoseCandidate:
    """A catalog pose carrying an opaque identifier"""
    id: str
    pose: PoseData

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, PoseData]]) -> List["PoseCandidate"]:
        """Wrap (id, pose) pairs"""
        return [cls(id=str(pose_id), pose=pose) for pose_id, pose in pairs]


class SimilarPose(NamedTuple):
    """A search hit: the matched candidate and its similarity in [0, 1]"""
    candidate: PoseCandidate
    similarity: float
