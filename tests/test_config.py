import pytest
from pinchpad.config import Config, ConfigError, GestureConfig, load_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.yaml")
    assert config == Config()
    assert config.gestures.confidence_threshold == 0.7
    assert config.gestures.pinch_threshold == 0.05
    assert config.gestures.sensitivity == 1.2
    assert config.gestures.dead_zone == 0.001


def test_partial_file_overrides_and_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "camera:\n"
        "  device_id: 2\n"
        "  lens: wide\n"
        "gestures:\n"
        "  sensitivity: 2.5\n"
        "unknown_section:\n"
        "  foo: 1\n"
    )

    config = load_config(path)

    assert config.camera.device_id == 2
    assert config.camera.width == 1280
    assert config.gestures.sensitivity == 2.5
    assert config.gestures.pinch_threshold == 0.05


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == Config()


def test_shipped_config_matches_defaults():
    assert load_config().gestures == GestureConfig()


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("gestures: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(path)


def test_non_mapping_section_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("gestures: 3\n")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize("kwargs", [
    {"confidence_threshold": 1.5},
    {"pinch_threshold": -0.1},
    {"sensitivity": 0.0},
    {"dead_zone": -0.001},
])
def test_out_of_range_gesture_values_raise(kwargs):
    with pytest.raises(ConfigError):
        GestureConfig(**kwargs)


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


@pytest.mark.parametrize("line", [
    "sensitivity: fast",
    "confidence_threshold: high",
    "dead_zone: [0.1]",
    "pinch_threshold: true",
])
def test_non_numeric_gesture_values_raise(tmp_path, line):
    path = tmp_path / "config.yaml"
    path.write_text(f"gestures:\n  {line}\n")
    with pytest.raises(ConfigError):
        load_config(path)


def test_unreadable_path_raises(tmp_path):
    # A directory exists but cannot be opened as a file
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_main_exits_with_status_2_on_bad_config(tmp_path):
    from pinchpad.cli import main

    path = tmp_path / "config.yaml"
    path.write_text("gestures:\n  confidence_threshold: high\n")

    assert main(["--config", str(path), "--debug"]) == 2
