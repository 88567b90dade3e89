"""
Tests for the posekit command line interface
"""

import json
import math

import pytest
import yaml
from PIL import Image

from posekit.cli import build_parser, main
from posekit.io import PoseLoader, load_openpose_json, save_openpose_json
from posekit.pose import PoseData


@pytest.fixture
def pose_file(tmp_path, standing_pose):
    return str(PoseLoader.save(standing_pose, tmp_path / 'pose.json'))


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_variants_to_stdout(pose_file, capsys):
    assert main(['variants', pose_file]) == 0
    variations = json.loads(capsys.readouterr().out)
    assert [v['id'] for v in variations][:2] == ['original', 'mirrored']
    assert len(variations) == 6


def test_transform_to_file(pose_file, tmp_path, standing_pose):
    out = tmp_path / 'out' / 'mirrored.json'
    assert main(['transform', pose_file, '--mirror', '--scale', '384', '384', '-o', str(out)]) == 0

    result = PoseData.from_dict(json.loads(out.read_text()))
    assert (result.width, result.height) == (384, 384)
    assert result.keypoints[5].x == pytest.approx(150.0)


def test_transform_missing_file_returns_error(tmp_path):
    assert main(['transform', str(tmp_path / 'missing.json'), '--mirror']) == 1


def test_similar(pose_file, tmp_path, standing_pose, capsys):
    far = standing_pose.with_coordinates(standing_pose.coordinates() + 300)
    far_file = PoseLoader.save(far, tmp_path / 'far.json')
    same_file = PoseLoader.save(standing_pose, tmp_path / 'same.json')

    assert main(['similar', pose_file, str(far_file), str(same_file), '--quiet']) == 0
    hits = json.loads(capsys.readouterr().out)
    assert hits == [{'id': 'same', 'similarity': 1.0}]


def test_similar_invalid_threshold_returns_error(pose_file):
    assert main(['similar', pose_file, pose_file, '--threshold', '3', '--quiet']) == 1


def test_convert_round_trip(pose_file, tmp_path, standing_pose):
    openpose = tmp_path / 'openpose.json'
    native = tmp_path / 'native.json'

    assert main(['convert', pose_file, '--to', 'openpose', '-o', str(openpose)]) == 0
    assert load_openpose_json(openpose) == standing_pose

    assert main(['convert', str(openpose), '--to', 'posekit', '-o', str(native),
                 '--width', '1024', '--height', '512']) == 0
    restored = PoseLoader.load(native)
    assert (restored.width, restored.height) == (1024, 512)


def test_render(pose_file, tmp_path):
    out = tmp_path / 'render.png'
    assert main(['render', pose_file, '-o', str(out)]) == 0
    with Image.open(out) as image:
        assert image.size == (768, 768)

    sheet = tmp_path / 'sheet.png'
    assert main(['render', pose_file, '--variations', '--tile-size', '128', '-o', str(sheet)]) == 0
    with Image.open(sheet) as image:
        assert image.size == (128 * 6, 128)


def test_export_formats(tmp_path, pose_dict):
    catalog = tmp_path / 'catalog.json'
    catalog.write_text(json.dumps({'poses': [
        {'id': 1, 'title': 'One', 'slug': 'one', 'theme': 'misc', 'keypoints': pose_dict},
    ]}))

    csv_out = tmp_path / 'poses.csv'
    assert main(['export', str(catalog), '--format', 'csv', '-o', str(csv_out)]) == 0
    assert csv_out.read_text().splitlines()[1] == '"1","One","one","misc",""'

    zip_out = tmp_path / 'poses.zip'
    assert main(['export', str(catalog), '--format', 'zip', '--variations', '-o', str(zip_out)]) == 0
    assert zip_out.exists()


def test_export_malformed_catalog(tmp_path):
    catalog = tmp_path / 'catalog.json'
    catalog.write_text(json.dumps([{'title': 'no id'}]))
    assert main(['export', str(catalog), '-o', str(tmp_path / 'out.json')]) == 1


def test_images(tmp_path, capsys):
    source = tmp_path / 'photo.png'
    Image.new('RGB', (1536, 768), (90, 90, 90)).save(source)
    uploads = tmp_path / 'uploads'

    assert main(['images', str(source), '--upload-dir', str(uploads),
                 '--format', 'png', '--thumbnail', '--quiet']) == 0
    results = json.loads(capsys.readouterr().out)
    assert results[0]['width'] == 768
    assert results[0]['height'] == 384
    assert len(list(uploads.iterdir())) == 2


def test_config_file(pose_file, tmp_path, standing_pose, capsys):
    config = tmp_path / 'posekit.yaml'
    config.write_text(yaml.safe_dump({'similarity': {'threshold': 0.0, 'max_results': 1}}))
    shifted = PoseLoader.save(
        standing_pose.with_coordinates(standing_pose.coordinates() + 20), tmp_path / 'shifted.json'
    )

    assert main(['--config', str(config), 'similar', pose_file, str(shifted), pose_file, '--quiet']) == 0
    hits = json.loads(capsys.readouterr().out)
    assert [hit['id'] for hit in hits] == ['pose']


def test_bad_config_file_returns_error(pose_file, tmp_path):
    assert main(['--config', str(tmp_path / 'missing.yaml'), 'variants', pose_file]) == 1


def test_openpose_input_for_variants(tmp_path, standing_pose, capsys):
    path = save_openpose_json(standing_pose, tmp_path / 'op.json')
    assert main(['variants', str(path)]) == 0
    variations = json.loads(capsys.readouterr().out)
    assert variations[0]['pose']['width'] == 768


def test_variants_capped_by_environment(pose_file, monkeypatch, capsys):
    monkeypatch.setenv('POSEKIT_MAX_VARIANTS', '3')
    assert main(['variants', pose_file]) == 0
    variations = json.loads(capsys.readouterr().out)
    assert [v['id'] for v in variations] == ['original', 'mirrored', 'scaled-small']


def test_similar_uses_configured_frame_for_openpose(tmp_path, wide_pose, capsys):
    target = save_openpose_json(wide_pose, tmp_path / 'target.json')
    shifted = save_openpose_json(
        wide_pose.with_coordinates(wide_pose.coordinates() + [20, 0]), tmp_path / 'shifted.json'
    )
    config = tmp_path / 'posekit.yaml'
    config.write_text(yaml.safe_dump({
        'interchange': {'default_width': 1024, 'default_height': 512},
        'similarity': {'threshold': 0.0},
    }))

    assert main(['--config', str(config), 'similar', str(target), str(shifted), '--quiet']) == 0
    hits = json.loads(capsys.readouterr().out)

    # Distances are normalized by the 1024x512 diagonal, not the 768x768 default
    expected = 1 - 20 / math.hypot(1024, 512) * 5
    assert hits[0]['similarity'] == pytest.approx(expected, abs=1e-6)


def test_search(tmp_path, capsys):
    catalog = tmp_path / 'catalog.json'
    catalog.write_text(json.dumps({'poses': [
        {'id': 1, 'title': 'Bride by the window', 'theme': 'wedding', 'tags': ['bride']},
        {'id': 2, 'title': 'Couple walking on beach', 'theme': 'couple', 'tags': ['beach']},
        {'id': 3, 'title': 'Wedding bouquet toss', 'theme': 'wedding', 'category': 'action'},
    ]}))

    assert main(['search', str(catalog), 'weding']) == 0
    assert [r['id'] for r in json.loads(capsys.readouterr().out)] == ['3', '1']

    assert main(['search', str(catalog), '--theme', 'couple']) == 0
    assert [r['id'] for r in json.loads(capsys.readouterr().out)] == ['2']

    assert main(['search', str(catalog), 'bea', '--suggest']) == 0
    assert json.loads(capsys.readouterr().out) == ['Couple walking on beach', 'beach']

    assert main(['search', str(catalog), '--list-filters']) == 0
    assert json.loads(capsys.readouterr().out)['categories'] == ['action']


def test_search_malformed_catalog(tmp_path):
    catalog = tmp_path / 'catalog.json'
    catalog.write_text(json.dumps([{'id': 1, 'title': 'No theme'}]))
    assert main(['search', str(catalog), 'bride']) == 1
