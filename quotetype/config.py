from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_root": "~/.quotetype",
    "quotes_dir": None,
    "timer": {
        "tick_ms": 200,
    },
    "session": {
        "auto_advance": True,
    },
    "shortcuts": {
        "focus": "Shift+Space",
        "new_quote": "Shift+Enter",
        "backspace": "Backspace",
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("QUOTETYPE_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("config.yaml"),
        Path.home() / ".quotetype" / "config.yaml",
    ])
    return paths


def load_config() -> Dict[str, Any]:
    config = copy.deepcopy(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if path.exists():
            try:
                with path.open("r", encoding="utf-8") as handle:
                    data = yaml.safe_load(handle) or {}
            except (yaml.YAMLError, OSError) as e:
                logger.warning("Ignoring unreadable config %s: %s", path, e)
                break
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            break
    return config
