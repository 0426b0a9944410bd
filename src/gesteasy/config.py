"""
Config loader for GestEasy.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field, fields
import math
from pathlib import Path
from typing import Optional, Tuple
import yaml


class ConfigError(ValueError):
    """Raised when a configuration value is outside its sane range."""


@dataclass
class SmoothingConfig:
    process_noise: float = 0.1        # Q: how fast the fingertip is expected to move
    measurement_noise: float = 0.01   # R: how noisy the landmark model is
    seed_from_first_measurement: bool = True


@dataclass
class GestureConfig:
    # Thresholds are in source-frame pixels / degrees, tuned for 640x480
    v_index_angle_range: Tuple[float, float] = (-110.0, -90.0)
    v_middle_angle_range: Tuple[float, float] = (-100.0, -80.0)
    v_distance_range: Tuple[float, float] = (40.0, 100.0)
    pinch_distance_threshold: float = 30.0


@dataclass
class DebounceConfig:
    confirm_frame_threshold: int = 5
    confirm_cooldown_ms: float = 300.0
    click_suppression_ms: float = 300.0
    pointer_click_suppression_ms: float = 300.0


@dataclass
class CursorConfig:
    source_frame_size: Tuple[int, int] = (640, 480)
    output_size: Tuple[int, int] = (1920, 1080)


@dataclass
class CameraConfig:
    device_id: int = 0
    fps: int = 30
    mirror: bool = True


@dataclass
class MediaPipeConfig:
    max_num_hands: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass
class LoggingConfig:
    debug: bool = False
    log_file: Optional[str] = None


@dataclass
class Config:
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    debounce: DebounceConfig = field(default_factory=DebounceConfig)
    cursor: CursorConfig = field(default_factory=CursorConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> "Config":
        """
        Check every section and raise ConfigError on the first bad value.

        Returns:
            self, so calls can be chained.
        """
        validate_smoothing(self.smoothing)
        validate_gestures(self.gestures)
        validate_debounce(self.debounce)
        validate_cursor(self.cursor)

        if not _finite(self.camera.fps) or self.camera.fps <= 0:
            raise ConfigError(f"camera.fps must be positive, got {self.camera.fps!r}")
        for name in ("min_detection_confidence", "min_tracking_confidence"):
            value = getattr(self.mediapipe, name)
            if not _finite(value) or not 0.0 <= value <= 1.0:
                raise ConfigError(f"mediapipe.{name} must be within [0, 1], got {value!r}")
        if not isinstance(self.mediapipe.max_num_hands, int) or self.mediapipe.max_num_hands < 1:
            raise ConfigError(
                f"mediapipe.max_num_hands must be an integer >= 1, got {self.mediapipe.max_num_hands!r}"
            )
        return self


def _finite(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _is_pair(value) -> bool:
    return isinstance(value, (tuple, list)) and len(value) == 2


def _check_range(name: str, value, allow_negative: bool = True) -> None:
    if not _is_pair(value) or not all(_finite(v) for v in value):
        raise ConfigError(f"{name} must be a pair of finite numbers, got {value!r}")
    low, high = value
    if low > high:
        raise ConfigError(f"{name} is inverted: {low} > {high}")
    if not allow_negative and low < 0:
        raise ConfigError(f"{name} must not be negative, got {value!r}")


def validate_smoothing(cfg: SmoothingConfig) -> None:
    for name in ("process_noise", "measurement_noise"):
        value = getattr(cfg, name)
        if not _finite(value) or value <= 0:
            raise ConfigError(f"smoothing.{name} must be a positive number, got {value!r}")


def validate_gestures(cfg: GestureConfig) -> None:
    _check_range("gestures.v_index_angle_range", cfg.v_index_angle_range)
    _check_range("gestures.v_middle_angle_range", cfg.v_middle_angle_range)
    _check_range("gestures.v_distance_range", cfg.v_distance_range, allow_negative=False)
    for name in ("v_index_angle_range", "v_middle_angle_range"):
        low, high = getattr(cfg, name)
        if low < -180 or high > 180:
            raise ConfigError(f"gestures.{name} must lie within [-180, 180]")
    if not _finite(cfg.pinch_distance_threshold) or cfg.pinch_distance_threshold < 0:
        raise ConfigError(
            f"gestures.pinch_distance_threshold must not be negative, "
            f"got {cfg.pinch_distance_threshold!r}"
        )


def validate_debounce(cfg: DebounceConfig) -> None:
    if not isinstance(cfg.confirm_frame_threshold, int) or cfg.confirm_frame_threshold < 1:
        raise ConfigError(
            f"debounce.confirm_frame_threshold must be an integer >= 1, "
            f"got {cfg.confirm_frame_threshold!r}"
        )
    for name in ("confirm_cooldown_ms", "click_suppression_ms", "pointer_click_suppression_ms"):
        value = getattr(cfg, name)
        if not _finite(value) or value < 0:
            raise ConfigError(f"debounce.{name} must not be negative, got {value!r}")


def _check_size(name: str, size) -> None:
    if not _is_pair(size) or not all(_finite(v) and v > 0 for v in size):
        raise ConfigError(f"{name} must be two positive numbers, got {size!r}")


def validate_cursor(cfg: CursorConfig) -> None:
    _check_size("cursor.source_frame_size", cfg.source_frame_size)
    _check_size("cursor.output_size", cfg.output_size)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"Section for {cls.__name__} must be a mapping, got {type(data).__name__}")
    field_names = {f.name for f in fields(cls)}
    filtered = {}
    for key, value in data.items():
        if key not in field_names:
            continue
        # YAML has no tuples; ranges and sizes arrive as lists
        if isinstance(value, list):
            value = tuple(value)
        filtered[key] = value
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Validated Config dataclass with all settings.

    Raises:
        ConfigError: if any value is outside its sane range.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping of sections")

    config = Config(
        smoothing=_dict_to_dataclass(SmoothingConfig, data.get('smoothing')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        debounce=_dict_to_dataclass(DebounceConfig, data.get('debounce')),
        cursor=_dict_to_dataclass(CursorConfig, data.get('cursor')),
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        logging=_dict_to_dataclass(LoggingConfig, data.get('logging')),
    )
    return config.validate()
