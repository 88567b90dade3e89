"""
Tests for catalog export (JSON, CSV, ZIP)
"""

import json
import zipfile

import pytest

from posekit.core.exceptions import ExportError
from posekit.io import (
    PoseExportRecord,
    export_pose_archive,
    export_poses_to_csv,
    export_poses_to_json,
)


@pytest.fixture
def records(standing_pose, pose_dict):
    return [
        PoseExportRecord(
            id='1',
            title='Standing bride',
            slug='standing-bride',
            theme='wedding',
            preview_url='/uploads/a.webp',
            keypoints=standing_pose,
        ),
        PoseExportRecord.from_dict({
            'id': 2,
            'title': 'Couple, "close"',
            'slug': 'couple-close',
            'theme': 'couple',
            'previewUrl': None,
            'keypoints': pose_dict,
        }),
        PoseExportRecord(id='3', title='Draft', slug='draft', theme='misc'),
    ]


def test_json_export_envelope(records, tmp_path):
    path = tmp_path / 'out' / 'poses.json'
    text = export_poses_to_json(records, path)
    doc = json.loads(text)

    assert doc['version'] == '1.0'
    assert doc['count'] == 3
    assert doc['exported_at'].endswith('Z')
    assert [p['slug'] for p in doc['poses']] == ['standing-bride', 'couple-close', 'draft']
    assert doc['poses'][0]['keypoints']['width'] == 768
    assert doc['poses'][2]['keypoints'] is None
    assert path.read_text(encoding='utf-8') == text


def test_csv_export_quotes_every_cell(records):
    text = export_poses_to_csv(records)
    assert text == (
        '"ID","Title","Slug","Theme","Preview URL"\n'
        '"1","Standing bride","standing-bride","wedding","/uploads/a.webp"\n'
        '"2","Couple, ""close""","couple-close","couple",""\n'
        '"3","Draft","draft","misc",""\n'
    )


def test_csv_export_empty():
    assert export_poses_to_csv([]) == '"ID","Title","Slug","Theme","Preview URL"\n'


def test_record_pose(records, standing_pose):
    assert records[0].pose() is standing_pose
    assert records[1].pose() == standing_pose
    assert records[2].pose() is None

    broken = PoseExportRecord('4', 'Broken', 'broken', 'misc', keypoints={
        'keypoints': [], 'skeleton': [(0, 1)], 'width': 10, 'height': 10,
    })
    assert broken.pose() is None


def test_archive_contents(records, tmp_path):
    path = export_pose_archive(records, tmp_path / 'catalog.zip', include_variations=True)

    with zipfile.ZipFile(path) as zf:
        names = set(zf.namelist())
        assert names == {
            'poses.json',
            'poses.csv',
            'openpose/standing-bride.json',
            'openpose/couple-close.json',
            'variations/standing-bride.json',
            'variations/couple-close.json',
        }
        openpose = json.loads(zf.read('openpose/standing-bride.json'))
        assert len(openpose['people'][0]['pose_keypoints_2d']) == 51

        variations = json.loads(zf.read('variations/couple-close.json'))
        assert [v['id'] for v in variations][-1] == 'rotated--15'
        assert len(variations) == 6


def test_archive_without_variations(records, tmp_path):
    path = export_pose_archive(records, tmp_path / 'catalog.zip')
    with zipfile.ZipFile(path) as zf:
        assert not any(name.startswith('variations/') for name in zf.namelist())


def test_archive_skips_variations_for_zero_frame(tmp_path):
    record = PoseExportRecord('5', 'No frame', 'no-frame', 'misc', keypoints={
        'keypoints': [{'x': 1, 'y': 1, 'confidence': 1, 'label': 'nose'}],
        'skeleton': [],
        'width': 0,
        'height': 0,
    })
    path = export_pose_archive([record], tmp_path / 'catalog.zip', include_variations=True)
    with zipfile.ZipFile(path) as zf:
        assert 'openpose/no-frame.json' in zf.namelist()
        assert 'variations/no-frame.json' not in zf.namelist()


def test_archive_write_failure(records, tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('file, not a directory')
    with pytest.raises(ExportError):
        export_pose_archive(records, blocker / 'catalog.zip')


def test_archive_removed_when_writing_fails(records, tmp_path, monkeypatch):
    def fail(pose):
        raise OSError("disk full")

    monkeypatch.setattr('posekit.io.export.to_openpose_format', fail)
    path = tmp_path / 'catalog.zip'

    with pytest.raises(ExportError):
        export_pose_archive(records, path)
    assert not path.exists()
