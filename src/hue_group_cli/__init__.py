"""Hue Group CLI - toggle and color Hue light groups from the command line.

This package provides a small CLI that reads bridge credentials and color
presets from ~/hueconfig.json and sends one group action to the bridge's
HTTP API per invocation.
"""

__version__ = "0.3.0"

from .cli import main
from .client import HueClient
from .config import BridgeConfig, ColorPreset, load_config

__all__ = ["BridgeConfig", "ColorPreset", "HueClient", "load_config", "main", "__version__"]
