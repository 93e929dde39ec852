"""Configuration loading for the Hue group CLI."""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .errors import ConfigParseError, ConfigReadError, PresetLookupError
from .logging import get_logger, redact_mapping


CONFIG_ENV_PREFIX = "HUE_"
CONFIG_FILENAME = "hueconfig.json"
IP_ENV_VAR = "IP_ADDR"
USER_KEY_ENV_VAR = "USER_KEY"

logger = get_logger("hue.config")


def default_config_path() -> Path:
    return Path.home() / CONFIG_FILENAME


@dataclass(frozen=True)
class ColorPreset:
    """Named point in CIE xy color space."""

    name: str
    x: float
    y: float


@dataclass(frozen=True)
class BridgeConfig:
    """Bridge connection details and the user's color presets."""

    ip: str
    user_key: str
    color_presets: Tuple[ColorPreset, ...] = ()

    def __post_init__(self) -> None:
        _validate_required("ip", self.ip)
        _validate_required("user", self.user_key)

    def find_preset(self, name: str) -> ColorPreset:
        """Return the first preset called `name`."""

        for preset in self.color_presets:
            if preset.name == name:
                return preset
        raise PresetLookupError(f"No such preset: {name!r}")

    def logging_dict(self) -> Dict[str, Any]:
        """Return a sanitized mapping suitable for structured logging."""

        return redact_mapping(
            {
                "ip": self.ip,
                "user_key": self.user_key,
                "color_presets": [preset.name for preset in self.color_presets],
            }
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BridgeConfig":
        if "ip" not in data:
            raise ConfigParseError("Missing required field 'ip'")
        if "user" not in data:
            raise ConfigParseError("Missing required field 'user'")
        return cls(
            ip=data["ip"],
            user_key=data["user"],
            color_presets=_parse_presets(data.get("colors", [])),
        )


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> BridgeConfig:
    """Load the bridge configuration from file and environment (in that order).

    The file location is `path` when given, else ``$HUE_CONFIG``, else
    ``~/hueconfig.json``. ``IP_ADDR`` and ``USER_KEY`` override the file's
    credentials; when both are set the file may be absent.
    """

    env = os.environ if environ is None else environ
    config_path = path or _coerce_path(env.get(f"{CONFIG_ENV_PREFIX}CONFIG")) or default_config_path()
    env_overrides = _load_env_config(env)

    if not config_path.exists() and env_overrides.keys() >= {"ip", "user"}:
        logger.debug(
            "Config file not found; using credentials from environment",
            extra={"path": str(config_path)},
        )
        return BridgeConfig.from_mapping(env_overrides)

    data = dict(_load_file_config(config_path))
    data.update(env_overrides)
    config = BridgeConfig.from_mapping(data)
    logger.debug("Loaded configuration", extra={"path": str(config_path), **config.logging_dict()})
    return config


def _load_file_config(path: Path) -> Mapping[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigReadError(f"Config file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigReadError(f"Failed to read config file {path}: {exc}") from exc
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(parsed, Mapping):
        raise ConfigParseError("Configuration file must contain a JSON object.")
    return parsed


def _load_env_config(env: Mapping[str, str]) -> Dict[str, Any]:
    mapping: Dict[str, Any] = {}
    if env.get(IP_ENV_VAR):
        mapping["ip"] = env[IP_ENV_VAR]
    if env.get(USER_KEY_ENV_VAR):
        mapping["user"] = env[USER_KEY_ENV_VAR]
    return mapping


def _parse_presets(raw: Any) -> Tuple[ColorPreset, ...]:
    if not isinstance(raw, Sequence) or isinstance(raw, str):
        raise ConfigParseError("'colors' must be a list of presets")
    presets = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            raise ConfigParseError(f"colors[{index}] must be an object")
        name = entry.get("name")
        if not isinstance(name, str):
            raise ConfigParseError(f"colors[{index}].name must be a string")
        presets.append(
            ColorPreset(
                name=name,
                x=_coerce_coordinate(f"colors[{index}].x", entry.get("x")),
                y=_coerce_coordinate(f"colors[{index}].y", entry.get("y")),
            )
        )
    return tuple(presets)


def _coerce_coordinate(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigParseError(f"{name} must be a number; got {value!r}")
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number):
        raise ConfigParseError(f"{name} must be finite; got {value!r}")
    return number


def _validate_required(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise ConfigParseError(f"{name} must be a non-empty string")


def _coerce_path(value: Optional[str]) -> Optional[Path]:
    if value is None or value == "":
        return None
    return Path(value).expanduser()
