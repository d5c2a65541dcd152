"""
Shared fixtures
===============
Scripted randomness and a bundled PhraseKit instance.
"""

import sys
from pathlib import Path

import pytest

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from phrasekit.randomness import reset_randomness, set_randomness


class ScriptedRandomness:
    """
    Randomness source that returns a fixed sequence of values.

    Values are returned as-is (they must already lie in [0, multiplier)).
    The multipliers requested are recorded in `calls`.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def __call__(self, multiplier=1):
        self.calls.append(multiplier)
        if not self.values:
            raise AssertionError(f"scripted randomness exhausted (call {len(self.calls)})")
        value = self.values.pop(0)
        assert 0 <= value < multiplier, f"scripted {value} outside [0, {multiplier})"
        return value


@pytest.fixture(autouse=True)
def _restore_randomness():
    yield
    reset_randomness()


@pytest.fixture
def scripted():
    """Install a scripted source: `source = scripted(1.5, 0.2, ...)`."""
    def install(*values):
        source = ScriptedRandomness(values)
        set_randomness(source)
        return source
    return install


@pytest.fixture(scope="session")
def kit():
    from phrasekit import PhraseKit
    return PhraseKit()


@pytest.fixture(scope="session")
def words_data():
    from phrasekit.lexicon import load_words
    return load_words()


@pytest.fixture
def small_words():
    """A tiny word list with power-of-two pool sizes."""
    return {
        'nouns': ['cat', 'dog', 'owl', 'hen', 'ant', 'eel', 'elk', 'yak'],
        'verbs': ['chase', 'greet', 'kick', 'help'],
        'intransitiveVerbs': ['sleep', 'jump', 'laugh', 'wait'],
        'adjectives': ['red', 'big', 'odd', 'shy'],
        'adverbs': ['slowly', 'boldly'],
        'articles': [{'definite': 'the', 'indefinite': 'a', 'indefiniteBeforeVowel': 'an'}],
        'prepositions': ['on', 'under'],
        'conjunctions': ['and', 'or', 'but', 'yet'],
        'properNouns': ['Ada', 'Bob', 'Cleo', 'Dan', 'Eve', 'Fay', 'Gus', 'Hal',
                        'Ida', 'Jo', 'Kim', 'Lou', 'Max', 'Ned', 'Oz', 'Pam'],
        'speechVerbs': ['said', 'sang', 'cried', 'asked', 'told', 'wrote', 'yelled', 'sighed'],
        'demonstratives': [['this', 'these'], ['that', 'those']],
        'personalPronouns': [['my', 'our'], ['your', 'your']],
        'interrogatives': [['why does', 'why do'], ['can', 'can']],
        'indefinitePronouns': [
            {'singular': 'one', 'plural': 'ones', 'personal': True},
            {'singular': 'thing', 'plural': 'things', 'personal': False},
        ],
        'numbers': {'start': 1, 'end': 9},
    }


@pytest.fixture
def small_lexicon(small_words):
    from phrasekit.words import Lexicon
    return Lexicon.from_dict(small_words)
