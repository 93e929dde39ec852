import json
import logging
from pathlib import Path
from typing import Any, Callable

import pytest


_ENV_VARS = (
    "IP_ADDR",
    "USER_KEY",
    "HUE_CONFIG",
    "HUE_TIMEOUT",
    "HUE_OUTPUT",
    "HUE_LOG_LEVEL",
    "HUE_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    yield
    # main() reconfigures logging; hand records back to caplog afterwards.
    for name in ("hue", "httpx"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    def _write(data: Any, name: str = "hueconfig.json") -> Path:
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
