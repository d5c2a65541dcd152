#!/usr/bin/env python3
"""
Lexicon Loader
==============
Loads the bundled word lists, templates and mutator presets from YAML.

Usage:
    from phrasekit.lexicon import load_lexicon, load_templates, load_mutators

    lexicon = load_lexicon()
    templates = load_templates()
    mutators = load_mutators()

Every call builds fresh, read-only objects; only the raw YAML is cached.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union
from functools import lru_cache

from ..errors import ConfigurationError
from ..mutator import MutatorRegistry
from ..settings import LEXICON_DIR
from ..templates import TemplateRegistry
from ..words import Lexicon


PathLike = Union[str, Path]


@lru_cache(maxsize=16)
def _load_yaml(filepath: Path) -> Dict[str, Any]:
    """Load a YAML mapping."""
    if not filepath.exists():
        raise FileNotFoundError(f"Missing lexicon file: {filepath}")
    with open(filepath, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("expected a mapping at top level", str(filepath))
    return data


def _path(path: Optional[PathLike], default: str) -> Path:
    if path is None:
        return LEXICON_DIR / default
    return Path(path).expanduser().resolve()


# =============================================================================
# Loaders
# =============================================================================

def load_words(path: Optional[PathLike] = None) -> Dict[str, Any]:
    """Raw word lists, keyed by pool category."""
    return _load_yaml(_path(path, 'words.yaml'))


def load_lexicon(path: Optional[PathLike] = None) -> Lexicon:
    """Build all word pools."""
    return Lexicon.from_dict(load_words(path))


def load_templates(path: Optional[PathLike] = None) -> TemplateRegistry:
    """Predefined sentence templates and collections."""
    return TemplateRegistry.from_dict(_load_yaml(_path(path, 'templates.yaml')))


def load_mutators(path: Optional[PathLike] = None) -> MutatorRegistry:
    """Predefined mutator presets."""
    data = _load_yaml(_path(path, 'mutators.yaml'))
    return MutatorRegistry(data.get('mutators') or {})


__all__ = [
    'LEXICON_DIR',
    'load_words',
    'load_lexicon',
    'load_templates',
    'load_mutators',
]
