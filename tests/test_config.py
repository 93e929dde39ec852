from pathlib import Path

import pytest

from hue_group_cli.config import BridgeConfig, ColorPreset, load_config
from hue_group_cli.errors import ConfigParseError, ConfigReadError, PresetLookupError


def test_load_well_formed_config(write_config) -> None:
    path = write_config(
        {
            "ip": "10.0.0.1",
            "user": "abc123",
            "colors": [{"name": "warm", "x": 0.5, "y": 0.4}],
        }
    )

    config = load_config(path, environ={})

    assert config.ip == "10.0.0.1"
    assert config.user_key == "abc123"
    assert config.color_presets == (ColorPreset(name="warm", x=0.5, y=0.4),)


def test_colors_default_to_empty(write_config) -> None:
    config = load_config(write_config({"ip": "10.0.0.1", "user": "abc123"}), environ={})
    assert config.color_presets == ()


def test_integer_coordinates_are_accepted(write_config) -> None:
    path = write_config({"ip": "h", "user": "u", "colors": [{"name": "edge", "x": 0, "y": 1}]})
    preset = load_config(path, environ={}).find_preset("edge")
    assert (preset.x, preset.y) == (0.0, 1.0)


def test_missing_ip_is_parse_error(write_config) -> None:
    with pytest.raises(ConfigParseError, match="ip"):
        load_config(write_config({"user": "abc123"}), environ={})


def test_missing_user_is_parse_error(write_config) -> None:
    with pytest.raises(ConfigParseError, match="user"):
        load_config(write_config({"ip": "10.0.0.1"}), environ={})


@pytest.mark.parametrize(
    "data",
    [
        "{not json",
        "[1, 2]",
        {"ip": "", "user": "abc123"},
        {"ip": "10.0.0.1", "user": 42},
        {"ip": "10.0.0.1", "user": "abc123", "colors": {"warm": [0.5, 0.4]}},
        {"ip": "10.0.0.1", "user": "abc123", "colors": [{"name": "warm", "x": "0.5", "y": 0.4}]},
        {"ip": "10.0.0.1", "user": "abc123", "colors": [{"name": "warm", "x": True, "y": 0.4}]},
        {"ip": "10.0.0.1", "user": "abc123", "colors": [{"x": 0.5, "y": 0.4}]},
        '{"ip": "10.0.0.1", "user": "abc123", "colors": [{"name": "w", "x": NaN, "y": 0.4}]}',
        '{"ip": "10.0.0.1", "user": "abc123", "colors": [{"name": "w", "x": 0.3, "y": Infinity}]}',
        '{"ip": "10.0.0.1", "user": "abc123", "colors": [{"name": "w", "x": -Infinity, "y": 0.4}]}',
    ],
)
def test_malformed_config_is_parse_error(write_config, data) -> None:
    with pytest.raises(ConfigParseError):
        load_config(write_config(data), environ={})


def test_missing_file_is_read_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigReadError, match="not found"):
        load_config(tmp_path / "absent.json", environ={})


def test_directory_is_read_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigReadError):
        load_config(tmp_path, environ={})


def test_default_path_is_home_config(tmp_path: Path) -> None:
    home = tmp_path / "home"
    home.mkdir()
    (home / "hueconfig.json").write_text('{"ip": "10.0.0.9", "user": "home-user"}', encoding="utf-8")

    config = load_config(environ={})

    assert config.ip == "10.0.0.9"


def test_hue_config_env_selects_file(write_config) -> None:
    path = write_config({"ip": "10.0.0.2", "user": "env-path"}, name="other.json")
    config = load_config(environ={"HUE_CONFIG": str(path)})
    assert config.user_key == "env-path"


def test_env_credentials_override_file(write_config) -> None:
    path = write_config(
        {"ip": "10.0.0.1", "user": "abc123", "colors": [{"name": "warm", "x": 0.5, "y": 0.4}]}
    )

    config = load_config(path, environ={"IP_ADDR": "192.168.1.5", "USER_KEY": "from-env"})

    assert config.ip == "192.168.1.5"
    assert config.user_key == "from-env"
    assert config.find_preset("warm").x == 0.5


def test_env_credentials_without_file(tmp_path: Path) -> None:
    config = load_config(
        tmp_path / "absent.json",
        environ={"IP_ADDR": "192.168.1.5", "USER_KEY": "from-env"},
    )
    assert config == BridgeConfig(ip="192.168.1.5", user_key="from-env")


def test_single_env_credential_still_needs_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigReadError):
        load_config(tmp_path / "absent.json", environ={"IP_ADDR": "192.168.1.5"})


def test_find_preset_first_match_wins() -> None:
    config = BridgeConfig(
        ip="10.0.0.1",
        user_key="abc123",
        color_presets=(
            ColorPreset(name="warm", x=0.5, y=0.4),
            ColorPreset(name="warm", x=0.6, y=0.3),
        ),
    )
    assert config.find_preset("warm") == ColorPreset(name="warm", x=0.5, y=0.4)


def test_find_preset_missing_raises() -> None:
    config = BridgeConfig(ip="10.0.0.1", user_key="abc123")
    with pytest.raises(PresetLookupError, match="cold"):
        config.find_preset("cold")


def test_preset_lookup_is_case_sensitive() -> None:
    config = BridgeConfig(
        ip="10.0.0.1", user_key="abc123", color_presets=(ColorPreset(name="warm", x=0.5, y=0.4),)
    )
    with pytest.raises(LookupError):
        config.find_preset("Warm")


def test_logging_dict_masks_user_key() -> None:
    config = BridgeConfig(ip="10.0.0.1", user_key="secret")
    logged = config.logging_dict()
    assert logged["user_key"] == "***REDACTED***"
    assert "secret" not in str(logged)
