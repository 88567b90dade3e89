"""
Pose variation generation and variant collections

Provides:
- generate_pose_variations: the fixed six-entry variation recipe
- create_custom_variant: one variant from an arbitrary TransformSpec
- VariantCollection: an ordered, capped list of variants with a cursor
"""

import copy
import logging
import uuid
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..core.config import VariantConfig
from ..core.constants import (
    DEFAULT_MAX_VARIANTS,
    TRANSFORMATION_OPTIONS,
    VARIATION_ROTATION_DEGREES,
    VARIATION_SCALE_LARGE,
    VARIATION_SCALE_SMALL,
)
from ..core.exceptions import TransformError, ValidationError
from .models import PoseData
from .transforms import TransformSpec, mirror_pose, rotate_pose, scale_pose, transform_pose
from .validation import ensure_pose_data, validate_pose_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoseVariation:
    """A named derived pose"""
    id: str
    title: str
    pose: Optional[PoseData]
    transformation: str
    is_generated: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'title': self.title,
            'pose': self.pose.to_dict() if self.pose is not None else None,
            'transformation': self.transformation,
            'is_generated': self.is_generated,
        }


def generate_pose_variations(pose: PoseData) -> List[PoseVariation]:
    """
    Build the standard variation set for a pose

    Always returns, in order: original, mirrored, scaled-small (80%),
    scaled-large (120%), rotated-15 and rotated--15. The recipe is fixed
    in code.

    Args:
        pose: Source pose

    Returns:
        List of six PoseVariation

    Example:
        >>> [v.id for v in generate_pose_variations(pose)]
        ['original', 'mirrored', 'scaled-small', 'scaled-large', 'rotated-15', 'rotated--15']
    """
    small, large = VARIATION_SCALE_SMALL, VARIATION_SCALE_LARGE
    angle = VARIATION_ROTATION_DEGREES

    return [
        PoseVariation('original', 'Original', pose, 'none'),
        PoseVariation('mirrored', 'Mirrored', mirror_pose(pose), 'mirror'),
        PoseVariation(
            'scaled-small', 'Scaled 80%',
            scale_pose(pose, pose.width * small, pose.height * small),
            f'scale-{small}',
        ),
        PoseVariation(
            'scaled-large', 'Scaled 120%',
            scale_pose(pose, pose.width * large, pose.height * large),
            f'scale-{large}',
        ),
        PoseVariation(
            f'rotated-{angle}', f'Rotated {angle}°',
            rotate_pose(pose, angle), f'rotate-{angle}',
        ),
        PoseVariation(
            f'rotated--{angle}', f'Rotated -{angle}°',
            rotate_pose(pose, -angle), f'rotate--{angle}',
        ),
    ]


def create_custom_variant(
    pose: PoseData,
    transformations: Union[TransformSpec, Mapping[str, Any]],
    title: Optional[str] = None,
    variant_id: Optional[str] = None,
) -> PoseVariation:
    """
    Build a variant from an arbitrary transform combination

    Args:
        pose: Source pose
        transformations: TransformSpec or its mapping form
        title: Display title (default: "Custom (<tag>)")
        variant_id: Identifier (default: "custom_<random hex>")

    Returns:
        PoseVariation tagged with TransformSpec.describe()
    """
    if not isinstance(transformations, TransformSpec):
        transformations = TransformSpec.from_dict(transformations)

    tag = transformations.describe()
    return PoseVariation(
        id=variant_id or f"custom_{uuid.uuid4().hex[:12]}",
        title=title or f"Custom ({tag})",
        pose=transform_pose(pose, transformations),
        transformation=tag,
    )


class VariantCollection:
    """
    Ordered variants of one base pose, capped at `max_variants`

    Provided (non-generated) variants come first. Generated variants can
    be refreshed from a new base pose without touching provided ones.
    A cursor tracks the variant currently shown.

    Example:
        >>> variants = VariantCollection.from_pose(pose)
        >>> variants.current.id
        'original'
        >>> variants.next().id
        'mirrored'
    """

    def __init__(
        self,
        variants: Optional[Sequence[PoseVariation]] = None,
        base_pose: Optional[PoseData] = None,
        max_variants: int = DEFAULT_MAX_VARIANTS,
    ):
        if max_variants < 1:
            raise ValueError("max_variants must be >= 1")
        self.max_variants = max_variants
        self.base_pose = base_pose
        self._variants: List[PoseVariation] = list(variants or [])[:max_variants]
        self._index = 0

    @classmethod
    def from_pose(
        cls,
        base_pose: Any,
        provided: Optional[Sequence[PoseVariation]] = None,
        max_variants: int = DEFAULT_MAX_VARIANTS,
    ) -> "VariantCollection":
        """
        Provided variants followed by the generated recipe, truncated to the cap

        Invalid base pose data yields a collection of the provided
        variants only.
        """
        provided = list(provided or [])
        if not validate_pose_data(base_pose):
            logger.warning("Invalid pose data, skipping variant generation")
            return cls(provided, None, max_variants)

        try:
            base_pose = _as_pose(base_pose)
            generated = generate_pose_variations(base_pose)
        except (ValidationError, TransformError) as e:
            logger.warning("Cannot generate variants: %s", e)
            return cls(provided, None, max_variants)

        return cls(provided + generated, base_pose, max_variants)

    @classmethod
    def from_config(
        cls,
        config: VariantConfig,
        base_pose: Any = None,
        provided: Optional[Sequence[PoseVariation]] = None,
    ) -> "VariantCollection":
        """
        Build a collection sized and populated by a VariantConfig

        With `auto_generate` off only the provided variants are kept;
        a valid base pose is still stored for later regenerate() or
        create_custom() calls.
        """
        if config.auto_generate:
            return cls.from_pose(base_pose, provided, config.max_variants)

        stored = None
        if base_pose is not None and validate_pose_data(base_pose):
            try:
                stored = _as_pose(base_pose)
            except ValidationError as e:
                logger.warning("Ignoring base pose: %s", e)
        return cls(provided, stored, config.max_variants)

    # --- state ---

    @property
    def variants(self) -> List[PoseVariation]:
        return list(self._variants)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current(self) -> Optional[PoseVariation]:
        if not self._variants:
            return None
        if self._index < len(self._variants):
            return self._variants[self._index]
        return self._variants[0]

    def __len__(self) -> int:
        return len(self._variants)

    def __iter__(self):
        return iter(list(self._variants))

    def navigation(self) -> Dict[str, Any]:
        """Cursor state summary"""
        return {
            'can_go_previous': len(self._variants) > 1,
            'can_go_next': len(self._variants) > 1,
            'current_index': self._index,
            'total_variants': len(self._variants),
            'current_variant': self.current,
        }

    # --- navigation ---

    def go_to(self, index: int) -> Optional[PoseVariation]:
        """Move the cursor; out-of-range indices are ignored"""
        if 0 <= index < len(self._variants):
            self._index = index
        return self.current

    def next(self) -> Optional[PoseVariation]:
        if self._variants:
            self._index = (self._index + 1) % len(self._variants)
        return self.current

    def previous(self) -> Optional[PoseVariation]:
        if self._variants:
            self._index = (self._index - 1) % len(self._variants)
        return self.current

    def first(self) -> Optional[PoseVariation]:
        self._index = 0
        return self.current

    def last(self) -> Optional[PoseVariation]:
        self._index = max(0, len(self._variants) - 1)
        return self.current

    # --- management ---

    def add(self, variant: PoseVariation) -> bool:
        """
        Append a variant

        Returns:
            False if the collection is full and the variant was dropped
        """
        if len(self._variants) >= self.max_variants:
            logger.debug("Variant collection full, dropping %s", variant.id)
            return False
        self._variants.append(variant)
        return True

    def remove(self, variant_id: str) -> bool:
        """Remove by id, clamping the cursor into range"""
        before = len(self._variants)
        self._variants = [v for v in self._variants if v.id != variant_id]
        if self._index >= len(self._variants):
            self._index = max(0, len(self._variants) - 1)
        return len(self._variants) != before

    def update(self, variant_id: str, **changes: Any) -> Optional[PoseVariation]:
        """Replace fields of the variant with `variant_id`"""
        for i, variant in enumerate(self._variants):
            if variant.id == variant_id:
                self._variants[i] = replace(variant, **changes)
                return self._variants[i]
        return None

    def regenerate(self, base_pose: Any = None) -> bool:
        """
        Replace generated variants with a fresh recipe

        Provided variants are kept in front. Generated ids get a
        "generated_" prefix so they do not collide with provided ones.

        Args:
            base_pose: New base pose (default: the current base pose)

        Returns:
            False if no valid base pose is available
        """
        pose_data = base_pose if base_pose is not None else self.base_pose
        if pose_data is None or not validate_pose_data(pose_data):
            logger.warning("Invalid pose data provided for variant generation")
            return False

        try:
            base_pose = _as_pose(pose_data)
            recipe = generate_pose_variations(base_pose)
        except (ValidationError, TransformError) as e:
            logger.warning("Cannot regenerate variants: %s", e)
            return False

        self.base_pose = base_pose
        suffix = uuid.uuid4().hex[:8]
        generated = [replace(v, id=f"generated_{v.id}_{suffix}") for v in recipe]
        provided = [v for v in self._variants if not v.is_generated]
        self._variants = (provided + generated)[:self.max_variants]
        self._index = 0
        return True

    def create_custom(
        self,
        transformations: Union[TransformSpec, Mapping[str, Any]],
        title: Optional[str] = None,
    ) -> Optional[PoseVariation]:
        """
        Add a custom variant derived from the base pose

        Returns:
            The new variant, or None without a base pose or when the
            collection is full
        """
        if self.base_pose is None:
            logger.warning("No valid base pose data available for custom variant")
            return None
        variant = create_custom_variant(self.base_pose, transformations, title)
        return variant if self.add(variant) else None

    @staticmethod
    def transformation_options() -> List[Dict[str, Any]]:
        """Adjustable transforms and their ranges"""
        return copy.deepcopy(TRANSFORMATION_OPTIONS)


def _as_pose(value: Any) -> PoseData:
    if isinstance(value, PoseData):
        return value
    return ensure_pose_data(value)
