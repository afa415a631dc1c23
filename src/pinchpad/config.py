"""
Config loader for PinchPad.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


class ConfigError(ValueError):
    """Raised when the configuration file cannot be used."""


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30
    mirror: bool = True
    automatic_selection: bool = True
    max_read_failures: int = 30


@dataclass
class MediaPipeConfig:
    model_path: Optional[str] = None
    min_detection_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    use_gpu: bool = False


@dataclass
class GestureConfig:
    confidence_threshold: float = 0.7  # Keypoints must score strictly above this
    pinch_threshold: float = 0.05      # Thumb-index distance, normalized image units
    sensitivity: float = 1.2           # Finger delta -> cursor delta gain
    dead_zone: float = 0.001           # Per-axis jitter floor (after gain)

    def __post_init__(self):
        for name in ("confidence_threshold", "pinch_threshold", "sensitivity", "dead_zone"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"gestures.{name} must be a number, got {value!r}")
        for name in ("confidence_threshold", "pinch_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"gestures.{name} must be within [0, 1], got {value}")
        if self.sensitivity <= 0.0:
            raise ConfigError(f"gestures.sensitivity must be positive, got {self.sensitivity}")
        if self.dead_zone < 0.0:
            raise ConfigError(f"gestures.dead_zone must not be negative, got {self.dead_zone}")


@dataclass
class CursorConfig:
    enabled: bool = True


@dataclass
class UIConfig:
    show_preview: bool = True
    show_feedback: bool = True
    preview_fps: int = 15


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    cursor: CursorConfig = field(default_factory=CursorConfig)
    ui: UIConfig = field(default_factory=UIConfig)


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config.yaml"


def _dict_to_dataclass(cls, data: Optional[dict]):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping for {cls.__name__}, got {type(data).__name__}")
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.

    Raises:
        ConfigError: If the file cannot be read or parsed, or a value is
            invalid.
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        cursor=_dict_to_dataclass(CursorConfig, data.get('cursor')),
        ui=_dict_to_dataclass(UIConfig, data.get('ui')),
    )
