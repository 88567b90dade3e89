"""
Configuration management for PoseKit

Central configuration system supporting:
- Dataclass-based configs
- YAML file loading
- Environment variable substitution
- Runtime modification
"""

import os
import logging
import yaml
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any

from .constants import (
    SIMILARITY_CONFIDENCE_THRESHOLD,
    SIMILARITY_SENSITIVITY,
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_MAX_SIMILAR_RESULTS,
    DEFAULT_MAX_VARIANTS,
    DEFAULT_FRAME_WIDTH,
    DEFAULT_FRAME_HEIGHT,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_IMAGE_FORMAT,
    DEFAULT_THUMBNAIL_SIZE,
    IMAGE_FORMATS,
    SEARCH_THRESHOLD,
    SEARCH_MIN_MATCH_CHAR_LENGTH,
    SEARCH_RESULT_LIMIT,
)
from .exceptions import ConfigError


@dataclass
class SimilarityConfig:
    """Configuration for pose similarity scoring and search"""
    confidence_threshold: float = SIMILARITY_CONFIDENCE_THRESHOLD
    sensitivity: float = SIMILARITY_SENSITIVITY
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    max_results: int = DEFAULT_MAX_SIMILAR_RESULTS

    def __post_init__(self):
        """Validate configuration"""
        if self.confidence_threshold < 0 or self.confidence_threshold > 1:
            raise ConfigError("confidence_threshold must be between 0 and 1")
        if self.threshold < 0 or self.threshold > 1:
            raise ConfigError("threshold must be between 0 and 1")
        if self.sensitivity <= 0:
            raise ConfigError("sensitivity must be > 0")
        if self.max_results < 1:
            raise ConfigError("max_results must be >= 1")


@dataclass
class VariantConfig:
    """Configuration for variant collections"""
    max_variants: int = DEFAULT_MAX_VARIANTS
    auto_generate: bool = True

    def __post_init__(self):
        """Validate configuration"""
        if self.max_variants < 1:
            raise ConfigError("max_variants must be >= 1")


@dataclass
class SearchConfig:
    """Configuration for catalog search"""
    threshold: float = SEARCH_THRESHOLD
    enable_fuzzy: bool = True
    min_match_char_length: int = SEARCH_MIN_MATCH_CHAR_LENGTH
    limit: int = SEARCH_RESULT_LIMIT

    def __post_init__(self):
        """Validate configuration"""
        if self.threshold < 0 or self.threshold > 1:
            raise ConfigError("threshold must be between 0 and 1")
        if self.min_match_char_length < 1:
            raise ConfigError("min_match_char_length must be >= 1")
        if self.limit < 1:
            raise ConfigError("limit must be >= 1")


@dataclass
class InterchangeConfig:
    """Configuration for OpenPose import"""
    default_width: float = DEFAULT_FRAME_WIDTH
    default_height: float = DEFAULT_FRAME_HEIGHT

    def __post_init__(self):
        """Validate configuration"""
        if self.default_width <= 0 or self.default_height <= 0:
            raise ConfigError("default frame dimensions must be > 0")


@dataclass
class ImageConfig:
    """Configuration for reference image processing"""
    target_width: Optional[int] = DEFAULT_IMAGE_SIZE[0]
    target_height: Optional[int] = DEFAULT_IMAGE_SIZE[1]
    quality: int = DEFAULT_IMAGE_QUALITY
    format: str = DEFAULT_IMAGE_FORMAT
    generate_thumbnail: bool = False
    thumbnail_size: int = DEFAULT_THUMBNAIL_SIZE

    def __post_init__(self):
        """Validate configuration"""
        if self.format not in IMAGE_FORMATS:
            raise ConfigError(f"format must be one of {list(IMAGE_FORMATS)}")
        if self.quality < 1 or self.quality > 100:
            raise ConfigError("quality must be between 1 and 100")
        if self.thumbnail_size < 1:
            raise ConfigError("thumbnail_size must be >= 1")


@dataclass
class PathConfig:
    """Configuration for upload paths with environment variable support"""
    upload_dir: str = "${POSEKIT_UPLOAD_DIR:uploads}"
    base_url: str = "${POSEKIT_CDN_BASE_URL:/uploads}"

    def resolve(self) -> None:
        """Resolve environment variables in paths"""
        for field_name in ['upload_dir', 'base_url']:
            value = getattr(self, field_name)
            if value.startswith('${') and ':' in value:
                var_name, default = value[2:-1].split(':', 1)
                resolved_value = os.getenv(var_name, default)
                setattr(self, field_name, resolved_value)

    def __post_init__(self):
        """Resolve paths on initialization"""
        self.resolve()


@dataclass
class LoggingConfig:
    """Configuration for log output"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"

    def __post_init__(self):
        """Validate configuration"""
        self.level = self.level.upper()
        if not isinstance(logging.getLevelName(self.level), int):
            raise ConfigError(f"Unknown log level: {self.level}")

    def apply(self) -> None:
        """Configure the root logger"""
        logging.basicConfig(level=self.level, format=self.format)


@dataclass
class PoseKitConfig:
    """Master configuration class combining all subconfigs"""
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)
    variants: VariantConfig = field(default_factory=VariantConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    interchange: InterchangeConfig = field(default_factory=InterchangeConfig)
    image: ImageConfig = field(default_factory=ImageConfig)
    paths: PathConfig = field(default_factory=PathConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "PoseKitConfig":
        """
        Load configuration from YAML file

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            PoseKitConfig instance

        Raises:
            ConfigError: If the file is missing or the YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise ConfigError(f"Config file not found: {yaml_path}")

        try:
            with open(yaml_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML format in {yaml_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping: {yaml_path}")

        try:
            return cls(
                similarity=SimilarityConfig(**data.get('similarity', {})),
                variants=VariantConfig(**data.get('variants', {})),
                search=SearchConfig(**data.get('search', {})),
                interchange=InterchangeConfig(**data.get('interchange', {})),
                image=ImageConfig(**data.get('image', {})),
                paths=PathConfig(**data.get('paths', {})),
                logging=LoggingConfig(**data.get('logging', {})),
            )
        except TypeError as e:
            raise ConfigError(f"Unknown configuration key in {yaml_path}: {e}")

    @classmethod
    def from_env(cls, base_config: Optional["PoseKitConfig"] = None) -> "PoseKitConfig":
        """
        Create config from environment variables

        Supports environment variables like:
        - POSEKIT_SIMILARITY_THRESHOLD
        - POSEKIT_MAX_VARIANTS
        - POSEKIT_IMAGE_FORMAT

        Args:
            base_config: Base configuration to override (default: new config)

        Returns:
            PoseKitConfig instance with environment overrides
        """
        if base_config is None:
            config = cls()
        else:
            config = base_config

        try:
            # Override similarity config
            if 'POSEKIT_SIMILARITY_THRESHOLD' in os.environ:
                config.similarity.threshold = float(
                    os.environ['POSEKIT_SIMILARITY_THRESHOLD']
                )
            if 'POSEKIT_SIMILARITY_SENSITIVITY' in os.environ:
                config.similarity.sensitivity = float(
                    os.environ['POSEKIT_SIMILARITY_SENSITIVITY']
                )

            # Override variant config
            if 'POSEKIT_MAX_VARIANTS' in os.environ:
                config.variants.max_variants = int(os.environ['POSEKIT_MAX_VARIANTS'])

            # Override image config
            if 'POSEKIT_IMAGE_QUALITY' in os.environ:
                config.image.quality = int(os.environ['POSEKIT_IMAGE_QUALITY'])
            if 'POSEKIT_IMAGE_FORMAT' in os.environ:
                config.image.format = os.environ['POSEKIT_IMAGE_FORMAT']
        except ValueError as e:
            raise ConfigError(f"Invalid environment override: {e}")

        if 'POSEKIT_LOG_LEVEL' in os.environ:
            config.logging.level = os.environ['POSEKIT_LOG_LEVEL']

        # Re-run validation on the overridden values
        config.similarity.__post_init__()
        config.variants.__post_init__()
        config.search.__post_init__()
        config.image.__post_init__()
        config.logging.__post_init__()

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)

    def to_yaml(self, yaml_path: str) -> None:
        """
        Save configuration to YAML file

        Args:
            yaml_path: Path to save YAML configuration
        """
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        with open(yaml_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def __str__(self) -> str:
        """String representation of config"""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)
