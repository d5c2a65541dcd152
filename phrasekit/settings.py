#!/usr/bin/env python3
"""Settings loader for PhraseKit (configs/app.yaml)."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any
import os

import yaml

PACKAGE_ROOT = Path(__file__).resolve().parent
CONFIG_DIR = PACKAGE_ROOT / "configs"
APP_CONFIG_PATH = CONFIG_DIR / "app.yaml"
LEXICON_DIR = PACKAGE_ROOT / "lexicon"


def app_config_path() -> Path:
    """The app config in use; PHRASEKIT_CONFIG overrides the bundled one."""
    override = os.environ.get("PHRASEKIT_CONFIG")
    return Path(override).expanduser() if override else APP_CONFIG_PATH


@lru_cache(maxsize=4)
def _load(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Missing app config: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return data or {}


def load_app_config() -> dict:
    return _load(app_config_path())


def get_setting(path: str, default: Any = None) -> Any:
    """Get nested setting by dotted path."""
    data = load_app_config()
    current: Any = data
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def resolve_path(value: str, base: Path | None = None) -> Path:
    """Resolve a path string relative to the lexicon directory (unless absolute)."""
    if value is None:
        raise ValueError("path value is required")
    expanded = os.path.expanduser(str(value))
    path = Path(expanded)
    if not path.is_absolute():
        base = base or LEXICON_DIR
        path = (base / path).resolve()
    return path


__all__ = [
    "load_app_config",
    "get_setting",
    "resolve_path",
    "app_config_path",
    "PACKAGE_ROOT",
    "APP_CONFIG_PATH",
    "LEXICON_DIR",
]
