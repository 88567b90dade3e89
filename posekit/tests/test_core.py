"""
Tests for configuration, constants and exceptions
"""

import logging

import pytest
import yaml

from posekit.core import (
    ConfigError,
    ImageConfig,
    PathConfig,
    PoseKitConfig,
    SearchConfig,
    SimilarityConfig,
    VariantConfig,
)
from posekit.core.config import LoggingConfig
from posekit.core.constants import (
    COCO_KEYPOINT_NAMES,
    COCO_NUM_KEYPOINTS,
    COCO_SKELETON_CONNECTIONS,
    MIRROR_MAPPING,
    OPENPOSE_MIN_POSE_VALUES,
)
from posekit.core.exceptions import (
    DataLoadError,
    PoseKitException,
    TransformError,
    ValidationError,
    handle_posekit_exception,
)


def test_default_config():
    config = PoseKitConfig()

    assert config.similarity.threshold == 0.7
    assert config.similarity.max_results == 5
    assert config.similarity.confidence_threshold == 0.5
    assert config.similarity.sensitivity == 5.0
    assert config.variants.max_variants == 8
    assert config.search.threshold == 0.3
    assert config.search.limit == 100
    assert config.interchange.default_width == 768
    assert config.image.format == 'webp'
    assert config.image.quality == 90
    assert config.logging.level == 'INFO'
    print("✓ Default config values correct")


@pytest.mark.parametrize("factory", [
    lambda: SimilarityConfig(threshold=1.5),
    lambda: SimilarityConfig(confidence_threshold=-0.1),
    lambda: SimilarityConfig(sensitivity=0),
    lambda: SimilarityConfig(max_results=0),
    lambda: VariantConfig(max_variants=0),
    lambda: SearchConfig(threshold=1.5),
    lambda: SearchConfig(limit=0),
    lambda: SearchConfig(min_match_char_length=0),
    lambda: ImageConfig(format='gif'),
    lambda: ImageConfig(quality=0),
    lambda: LoggingConfig(level='chatty'),
])
def test_invalid_config_values(factory):
    with pytest.raises(ConfigError):
        factory()


def test_logging_level_is_normalized():
    assert LoggingConfig(level='debug').level == 'DEBUG'


def test_path_config_env_substitution(monkeypatch):
    monkeypatch.delenv('POSEKIT_UPLOAD_DIR', raising=False)
    assert PathConfig().upload_dir == 'uploads'

    monkeypatch.setenv('POSEKIT_UPLOAD_DIR', '/srv/poses')
    assert PathConfig().upload_dir == '/srv/poses'
    assert PathConfig(upload_dir='custom').upload_dir == 'custom'


def test_yaml_round_trip(tmp_path):
    config = PoseKitConfig()
    config.similarity.threshold = 0.8
    config.variants.max_variants = 4

    path = tmp_path / 'configs' / 'posekit.yaml'
    config.to_yaml(path)
    loaded = PoseKitConfig.from_yaml(path)

    assert loaded.similarity.threshold == 0.8
    assert loaded.variants.max_variants == 4
    assert loaded.to_dict() == config.to_dict()


def test_yaml_partial_file(tmp_path):
    path = tmp_path / 'partial.yaml'
    path.write_text(yaml.safe_dump({'image': {'format': 'png'}}))
    config = PoseKitConfig.from_yaml(path)
    assert config.image.format == 'png'
    assert config.similarity.threshold == 0.7


def test_yaml_errors(tmp_path):
    with pytest.raises(ConfigError):
        PoseKitConfig.from_yaml(tmp_path / 'missing.yaml')

    bad = tmp_path / 'bad.yaml'
    bad.write_text('similarity: [unclosed')
    with pytest.raises(ConfigError):
        PoseKitConfig.from_yaml(bad)

    unknown = tmp_path / 'unknown.yaml'
    unknown.write_text(yaml.safe_dump({'similarity': {'radius': 3}}))
    with pytest.raises(ConfigError):
        PoseKitConfig.from_yaml(unknown)

    scalar = tmp_path / 'scalar.yaml'
    scalar.write_text('42')
    with pytest.raises(ConfigError):
        PoseKitConfig.from_yaml(scalar)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv('POSEKIT_SIMILARITY_THRESHOLD', '0.9')
    monkeypatch.setenv('POSEKIT_MAX_VARIANTS', '3')
    monkeypatch.setenv('POSEKIT_IMAGE_FORMAT', 'jpeg')
    monkeypatch.setenv('POSEKIT_LOG_LEVEL', 'warning')

    config = PoseKitConfig.from_env()
    assert config.similarity.threshold == 0.9
    assert config.variants.max_variants == 3
    assert config.image.format == 'jpeg'
    assert config.logging.level == 'WARNING'


def test_env_overrides_are_validated(monkeypatch):
    monkeypatch.setenv('POSEKIT_SIMILARITY_THRESHOLD', 'high')
    with pytest.raises(ConfigError):
        PoseKitConfig.from_env()

    monkeypatch.setenv('POSEKIT_SIMILARITY_THRESHOLD', '2.0')
    with pytest.raises(ConfigError):
        PoseKitConfig.from_env()


def test_config_str_is_yaml():
    data = yaml.safe_load(str(PoseKitConfig()))
    assert data['variants']['max_variants'] == 8


def test_constants():
    assert COCO_NUM_KEYPOINTS == 17
    assert len(COCO_KEYPOINT_NAMES) == 17
    assert OPENPOSE_MIN_POSE_VALUES == 51
    assert len(COCO_SKELETON_CONNECTIONS) == 16
    for i, j in COCO_SKELETON_CONNECTIONS:
        assert 0 <= i < 17 and 0 <= j < 17

    # Partner table is a symmetric involution that never touches the nose
    for left, right in MIRROR_MAPPING.items():
        assert MIRROR_MAPPING[right] == left
        assert left != right
    assert 0 not in MIRROR_MAPPING
    for i, j in MIRROR_MAPPING.items():
        assert COCO_KEYPOINT_NAMES[i].split('_', 1)[1] == COCO_KEYPOINT_NAMES[j].split('_', 1)[1]


def test_exception_hierarchy():
    for exc in (ConfigError, ValidationError, TransformError, DataLoadError):
        assert issubclass(exc, PoseKitException)
    for exc in (ConfigError, ValidationError, TransformError):
        assert issubclass(exc, ValueError)


def test_handle_posekit_exception(caplog):
    with caplog.at_level(logging.ERROR):
        message = handle_posekit_exception(DataLoadError("missing.json"))
    assert message == "[DataLoadError] missing.json"
    assert "missing.json" in caplog.text

    assert handle_posekit_exception(TransformError("zero frame"), verbose=False) == \
        "[TransformError] zero frame"
