#!/usr/bin/env python3
"""
Generator Configuration
=======================
Defaults for PhraseKit, read from configs/app.yaml.

Fields left as None are filled from settings; explicit values win.

Usage:
    config = GeneratorConfig(default_template='strong')
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .settings import get_setting, resolve_path


@dataclass
class GeneratorConfig:
    """Configuration for phrase generation."""
    default_template: Optional[str] = None
    default_mutator: Optional[str] = None
    count: Optional[int] = None
    retries: Optional[int] = None

    # Data files
    words_path: Optional[Path] = None
    templates_path: Optional[Path] = None
    mutators_path: Optional[Path] = None

    def __post_init__(self):
        cfg = get_setting("generation", {}) or {}
        if self.default_template is None:
            self.default_template = cfg.get("default_template", "random")
        if self.default_mutator is None:
            self.default_mutator = cfg.get("default_mutator")
        if self.count is None:
            self.count = int(cfg.get("count", 5))
        if self.retries is None:
            self.retries = int(cfg.get("retries", 0))

        lexicon = get_setting("lexicon", {}) or {}
        if self.words_path is None:
            self.words_path = resolve_path(lexicon.get("words", "words.yaml"))
        if self.templates_path is None:
            self.templates_path = resolve_path(lexicon.get("templates", "templates.yaml"))
        if self.mutators_path is None:
            self.mutators_path = resolve_path(lexicon.get("mutators", "mutators.yaml"))

        self.words_path = Path(self.words_path)
        self.templates_path = Path(self.templates_path)
        self.mutators_path = Path(self.mutators_path)
