#!/usr/bin/env python3
"""
PhraseKit Errors
================
Two kinds of failure can come out of generation:

- ConfigurationError: a malformed template, clause, factor or mutator.
  Never retried, re-randomizing cannot fix a structural problem.
- ExhaustionError: a word pool could not satisfy the duplicate-avoidance
  rule. Callers may retry the whole generation with a fresh session.
"""

from typing import Optional


class PhraseKitError(Exception):
    """Base class for all phrasekit errors."""


class ConfigurationError(PhraseKitError, ValueError):
    """A template, clause, factor or mutator specification is malformed."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class ExhaustionError(PhraseKitError, RuntimeError):
    """A pool ran out of unused words."""

    def __init__(self, category: str, attempts: int, message: Optional[str] = None):
        self.category = category
        self.attempts = attempts
        if message is None:
            message = f"Exceeded {attempts} attempts picking an unused '{category}' word"
        super().__init__(message)


__all__ = ["PhraseKitError", "ConfigurationError", "ExhaustionError"]
