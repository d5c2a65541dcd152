#!/usr/bin/env python3
"""
Phrase Mutator
==============
Adds uppercase letters and digits to a finished phrase.

Two independent passes, each configured by a technique and a count
(count 0 = pick a random count when mutating):

    upper:   StartOfWord, WholeWord, Anywhere, RunOfLetters, random
    numbers: StartOfWord, EndOfWord, StartOrEndOfWord, EndOfPhrase,
             Anywhere, random

Case changes never hit the same word twice; digits may stack on a word.

The entropy estimate assumes an average phrase of 9 words of 5 letters.
That is an approximation kept so figures stay comparable across
templates; it does not look at the actual template.
"""

import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Union

from .errors import ConfigurationError
from .randomness import random_int, randomness

logger = logging.getLogger(__name__)

UPPER_TECHNIQUES = ('StartOfWord', 'WholeWord', 'Anywhere', 'RunOfLetters')
NUMBER_TECHNIQUES = ('StartOfWord', 'EndOfWord', 'StartOrEndOfWord', 'EndOfPhrase', 'Anywhere')

AVERAGE_WORDS = 9
AVERAGE_WORD_LENGTH = 5
MAX_RANDOM_DIGITS = 5


# =============================================================================
# Specification
# =============================================================================

@dataclass(frozen=True)
class MutatorSpec:
    """One pass: a technique name and a count (0 = random)."""
    type: str = 'none'
    count: int = 0

    @property
    def enabled(self) -> bool:
        return self.type != 'none'


def _parse_pass(raw: Any, techniques, field: str) -> MutatorSpec:
    if raw is None:
        return MutatorSpec()
    if isinstance(raw, str):
        technique, count = raw, 0
    elif isinstance(raw, (list, tuple)) and raw:
        technique = raw[0]
        count = raw[1] if len(raw) > 1 else 0
    elif isinstance(raw, Mapping):
        technique = raw.get('type', 'none')
        count = raw.get('count', 0)
    elif isinstance(raw, MutatorSpec):
        technique, count = raw.type, raw.count
    else:
        raise ConfigurationError(f"invalid mutator pass {raw!r}", field)

    if technique == 'none':
        return MutatorSpec()
    if technique != 'random' and technique not in techniques:
        raise ConfigurationError(
            f"unknown technique '{technique}'; expected one of "
            f"{list(techniques) + ['random']}", field)

    if not isinstance(count, Real) or isinstance(count, bool) or count < 1:
        count = 0
    return MutatorSpec(type=technique, count=int(count))


# =============================================================================
# Mutator
# =============================================================================

class Mutator:
    """
    Case and digit mutation with a matching entropy estimate.

    Usage:
        mutator = Mutator({'upper': ['WholeWord', 1], 'numbers': ['EndOfWord', 2]})
        mutator.mutate('the cat sat on the mat')
        mutator.entropy_bits()
    """

    def __init__(self, spec: Union[None, Mapping[str, Any], 'Mutator'] = None):
        if isinstance(spec, Mutator):
            self.upper, self.numbers = spec.upper, spec.numbers
            return
        spec = spec or {}
        if not isinstance(spec, Mapping):
            raise ConfigurationError(f"invalid mutator {spec!r}", 'mutator')
        unknown = set(spec) - {'upper', 'numbers'}
        if unknown:
            raise ConfigurationError(f"unknown mutator passes {sorted(unknown)}", 'mutator')
        self.upper = _parse_pass(spec.get('upper'), UPPER_TECHNIQUES, 'mutator.upper')
        self.numbers = _parse_pass(spec.get('numbers'), NUMBER_TECHNIQUES, 'mutator.numbers')

    @property
    def enabled(self) -> bool:
        return self.upper.enabled or self.numbers.enabled

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {
            'upper': {'type': self.upper.type, 'count': self.upper.count},
            'numbers': {'type': self.numbers.type, 'count': self.numbers.count},
        }

    def __repr__(self) -> str:
        return f"Mutator({self.to_dict()!r})"

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def mutate(self, phrase: str) -> str:
        words = phrase.split()
        if not words:
            return phrase
        if self.upper.enabled:
            self._apply_upper(words)
        if self.numbers.enabled:
            self._apply_numbers(words)
        return ' '.join(words)

    def _apply_upper(self, words: List[str]):
        count = self.upper.count or (random_int(len(words)) + 1)
        count = min(count, len(words))

        available = list(range(len(words)))
        chosen = [available.pop(random_int(len(available))) for _ in range(count)]

        for index in chosen:
            word = words[index]
            technique = self.upper.type
            if technique == 'random':
                technique = UPPER_TECHNIQUES[random_int(len(UPPER_TECHNIQUES))]

            start, end = 0, 0
            if technique == 'StartOfWord':
                end = 1
            elif technique == 'WholeWord':
                end = len(word)
            elif technique == 'Anywhere':
                start = random_int(len(word))
                end = start + 1
            elif technique == 'RunOfLetters':
                start = random_int(len(word) - 1)
                end = start + 2 + random_int(len(word) - start)
            else:
                raise ConfigurationError(f"unknown technique '{technique}'", 'mutator.upper')

            words[index] = word[:start] + word[start:end].upper() + word[end:]

    def _apply_numbers(self, words: List[str]):
        count = self.numbers.count or (random_int(MAX_RANDOM_DIGITS) + 1)
        for _ in range(count):
            technique = self.numbers.type
            if technique == 'StartOrEndOfWord':
                technique = 'StartOfWord' if randomness(2) >= 1 else 'EndOfWord'

            if technique == 'EndOfPhrase':
                index = len(words) - 1
            else:
                index = random_int(len(words))
            word = words[index]
            digit = str(random_int(10))

            if technique == 'StartOfWord':
                word = digit + word
            elif technique in ('EndOfWord', 'EndOfPhrase'):
                word = word + digit
            elif technique in ('Anywhere', 'random'):
                position = random_int(len(word))
                word = word[:position] + digit + word[position:]
            else:
                raise ConfigurationError(f"unknown technique '{technique}'", 'mutator.numbers')

            words[index] = word

    # -------------------------------------------------------------------------
    # Entropy
    # -------------------------------------------------------------------------

    def upper_entropy_bits(self) -> float:
        if not self.upper.enabled:
            return 0.0
        count = self.upper.count or AVERAGE_WORDS // 2
        bits = math.log2(AVERAGE_WORDS)

        technique = self.upper.type
        if technique in ('StartOfWord', 'WholeWord'):
            pass
        elif technique == 'Anywhere':
            bits += math.log2(AVERAGE_WORD_LENGTH)
        elif technique == 'RunOfLetters':
            bits += 2 * math.log2(AVERAGE_WORD_LENGTH)
        elif technique == 'random':
            # 2 bits for the technique, then roughly the mix of their positions
            bits += 2 + math.log2(AVERAGE_WORD_LENGTH) * 3 / 5
        else:
            raise ConfigurationError(f"unknown technique '{technique}'", 'mutator.upper')
        return bits * count

    def number_entropy_bits(self) -> float:
        if not self.numbers.enabled:
            return 0.0
        # expected value of random_int(MAX_RANDOM_DIGITS) + 1
        count = self.numbers.count or (MAX_RANDOM_DIGITS + 1) / 2
        bits = math.log2(10)

        technique = self.numbers.type
        if technique in ('StartOfWord', 'EndOfWord'):
            bits += math.log2(AVERAGE_WORDS)
        elif technique == 'StartOrEndOfWord':
            bits += math.log2(AVERAGE_WORDS) + 1
        elif technique == 'EndOfPhrase':
            pass
        elif technique in ('Anywhere', 'random'):
            bits += math.log2(AVERAGE_WORDS) + math.log2(AVERAGE_WORD_LENGTH)
        else:
            raise ConfigurationError(f"unknown technique '{technique}'", 'mutator.numbers')
        return bits * count

    def entropy_bits(self) -> float:
        """Estimated bits added by this mutator."""
        return self.upper_entropy_bits() + self.number_entropy_bits()


# =============================================================================
# Registry
# =============================================================================

MutatorRef = Union[None, str, Mapping[str, Any], Mutator]


class MutatorRegistry:
    """Named mutator presets, owned by the caller."""

    def __init__(self, presets: Optional[Mapping[str, Any]] = None):
        self._presets: Dict[str, Mutator] = {}
        for name, spec in (presets or {}).items():
            self.register(name, spec)

    def register(self, name: str, spec: Any) -> Mutator:
        mutator = Mutator(spec)
        self._presets[name] = mutator
        return mutator

    def __contains__(self, name: str) -> bool:
        return name in self._presets

    def names(self) -> List[str]:
        return list(self._presets)

    def get(self, name: str) -> Mutator:
        if name not in self._presets:
            available = ', '.join(sorted(self._presets))
            raise ConfigurationError(f"unknown mutator. Available: {available}", name)
        return self._presets[name]

    def resolve(self, mutator: MutatorRef) -> Optional[Mutator]:
        """Name, mapping or Mutator -> Mutator; None stays None."""
        if mutator is None:
            return None
        if isinstance(mutator, Mutator):
            return mutator
        if isinstance(mutator, str):
            return self.get(mutator)
        return Mutator(mutator)


__all__ = [
    'Mutator',
    'MutatorSpec',
    'MutatorRegistry',
    'MutatorRef',
    'UPPER_TECHNIQUES',
    'NUMBER_TECHNIQUES',
    'AVERAGE_WORDS',
    'AVERAGE_WORD_LENGTH',
]
