"""
Catalog export for PoseKit

Provides:
- PoseExportRecord: one catalog pose as exported
- JSON export with a versioned envelope
- CSV export (every cell quoted)
- ZIP archive bundling JSON, CSV and per-pose OpenPose files
"""

import csv
import io
import json
import logging
import zipfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..core.constants import CSV_EXPORT_COLUMNS, EXPORT_FORMAT_VERSION
from ..core.exceptions import ExportError, TransformError, ValidationError
from ..pose.models import PoseData
from ..pose.validation import ensure_pose_data, validate_pose_data
from ..pose.variations import generate_pose_variations
from .openpose import to_openpose_format

logger = logging.getLogger(__name__)


@dataclass
class PoseExportRecord:
    """Dataclass for an exported catalog pose"""
    id: str
    title: str
    slug: str
    theme: str
    preview_url: Optional[str] = None
    keypoints: Optional[Union[PoseData, Dict[str, Any]]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict) -> "PoseExportRecord":
        """Create instance from dictionary"""
        return cls(
            id=str(d['id']),
            title=d['title'],
            slug=d['slug'],
            theme=d['theme'],
            preview_url=d.get('preview_url', d.get('previewUrl')),
            keypoints=d.get('keypoints'),
            metadata=d.get('metadata') or {},
        )

    def pose(self) -> Optional[PoseData]:
        """Keypoints as PoseData, or None when they are not pose data"""
        if self.keypoints is None or not validate_pose_data(self.keypoints):
            return None
        try:
            return ensure_pose_data(self.keypoints)
        except ValidationError:
            return None

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        keypoints = self.keypoints
        if isinstance(keypoints, PoseData):
            keypoints = keypoints.to_dict()
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'theme': self.theme,
            'preview_url': self.preview_url,
            'keypoints': keypoints,
            'metadata': self.metadata,
        }

    def to_row(self) -> List[str]:
        """Convert to a CSV row"""
        return [self.id, self.title, self.slug, self.theme, self.preview_url or '']


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def build_export_document(records: Sequence[PoseExportRecord]) -> Dict[str, Any]:
    """Versioned JSON envelope for a list of records"""
    return {
        'version': EXPORT_FORMAT_VERSION,
        'exported_at': _utc_timestamp(),
        'count': len(records),
        'poses': [record.to_dict() for record in records],
    }


def export_poses_to_json(
    records: Sequence[PoseExportRecord],
    output_path: Optional[str] = None,
) -> str:
    """
    Export records as a JSON document

    Args:
        records: Poses to export
        output_path: File to write (optional)

    Returns:
        The JSON text

    Example:
        >>> text = export_poses_to_json([record])
        >>> json.loads(text)['count']
        1
    """
    text = json.dumps(build_export_document(records), indent=2, ensure_ascii=False)
    if output_path is not None:
        _write_text(output_path, text)
    return text


def export_poses_to_csv(
    records: Sequence[PoseExportRecord],
    output_path: Optional[str] = None,
) -> str:
    """
    Export records as CSV with every cell quoted

    Columns: ID, Title, Slug, Theme, Preview URL

    Returns:
        The CSV text
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(CSV_EXPORT_COLUMNS)
    for record in records:
        writer.writerow(record.to_row())

    text = buffer.getvalue()
    if output_path is not None:
        _write_text(output_path, text)
    return text


def export_pose_archive(
    records: Sequence[PoseExportRecord],
    output_path: str,
    include_variations: bool = False,
) -> Path:
    """
    Bundle records into a ZIP archive

    Layout:
        poses.json
        poses.csv
        openpose/<slug>.json        (records with valid pose data)
        variations/<slug>.json      (when include_variations is set)

    Args:
        records: Poses to export
        output_path: Archive path
        include_variations: Add the generated variation set per pose

    Returns:
        Path of the archive

    Raises:
        ExportError: If the archive cannot be written
    """
    output_path = Path(output_path)
    skipped = 0

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(output_path, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
            zf.writestr('poses.json', export_poses_to_json(records))
            zf.writestr('poses.csv', export_poses_to_csv(records))

            for record in records:
                pose = record.pose()
                if pose is None:
                    skipped += 1
                    continue
                zf.writestr(
                    f'openpose/{record.slug}.json',
                    json.dumps(to_openpose_format(pose), indent=2),
                )
                if include_variations:
                    try:
                        variations = [v.to_dict() for v in generate_pose_variations(pose)]
                    except TransformError as e:
                        logger.warning("No variations for %s: %s", record.slug, e)
                        continue
                    zf.writestr(
                        f'variations/{record.slug}.json',
                        json.dumps(variations, indent=2, ensure_ascii=False),
                    )
    except OSError as e:
        if output_path.is_file():
            output_path.unlink()
        raise ExportError(f"Failed to write archive {output_path}: {e}")

    if skipped:
        logger.warning("%d records had no valid pose data, OpenPose files skipped", skipped)

    logger.info("Exported %d poses to %s", len(records), output_path)
    return output_path


def _write_text(output_path: str, text: str) -> None:
    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}")
