#!/usr/bin/env python3
"""
Word Pools
==========
Tagged words and the pools that supply them under grammatical constraints.

Pool variants:
- WordPool: flat list, uniform choice
- PluralWordPool: singular/plural pairs
- VerbPool: 14 tense/plurality variants per verb
- ArticlePool: definite / indefinite (with pre-vowel alternate)
- IndefinitePronounPool: personal vs impersonal, singular vs plural
- NumberPool: '1' for singular nouns, an integer range for plural ones

Pools are immutable after construction and can be shared across any
number of generations. Duplicate avoidance takes a `used` set of surface
forms and retries up to MAX_ATTEMPTS draws before raising ExhaustionError.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from .errors import ConfigurationError, ExhaustionError
from .factors import evaluate
from .randomness import random_int

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 100


# =============================================================================
# Tagged Word
# =============================================================================

@dataclass(frozen=True)
class TaggedWord:
    """A generated token: surface text plus grammatical tags."""
    value: str
    tags: FrozenSet[str] = field(default_factory=frozenset)
    before_vowel: Optional[str] = None  # indefinite articles only

    def has_tags(self, *tags: str) -> bool:
        """True if every requested tag is present."""
        return all(tag in self.tags for tag in tags)

    def __str__(self) -> str:
        return self.value


def _word(value: str, *tags: str, before_vowel: Optional[str] = None) -> TaggedWord:
    return TaggedWord(value=value, tags=frozenset(tags), before_vowel=before_vowel)


def _pick_unused(category: str, draw: Callable[[], Optional[str]],
                 used: Optional[Iterable[str]]) -> str:
    """Draw until a non-empty, unused value comes up."""
    for _ in range(MAX_ATTEMPTS):
        value = draw()
        if value and (not used or value not in used):
            return value
    logger.debug(f"Pool '{category}' exhausted after {MAX_ATTEMPTS} attempts")
    raise ExhaustionError(category, MAX_ATTEMPTS)


# =============================================================================
# Plain and Plural Pools
# =============================================================================

class WordPool:
    """Uniform choice over a flat list of words."""

    def __init__(self, category: str, words: Iterable[str]):
        self.category = category
        self.words: Tuple[str, ...] = tuple(words)
        if not self.words:
            raise ConfigurationError("word pool is empty", category)
        for word in self.words:
            if not isinstance(word, str) or not word:
                raise ConfigurationError(f"invalid word {word!r}", category)

    def __len__(self) -> int:
        return len(self.words)

    def random_word(self, used: Optional[Iterable[str]] = None) -> TaggedWord:
        value = _pick_unused(
            self.category, lambda: self.words[random_int(len(self.words))], used)
        return _word(value, self.category)


class PluralWordPool:
    """
    Pool of (singular, plural) pairs.

    A bare string entry is pluralized by appending 's'. Either slot of a
    pair may be empty, meaning the word has no form for that number; such
    draws are skipped and retried.
    """

    def __init__(self, category: str, entries: Iterable[Any]):
        self.category = category
        pairs = []
        for entry in entries:
            if isinstance(entry, str):
                pairs.append((entry, entry + 's'))
            elif isinstance(entry, (list, tuple)) and len(entry) == 2:
                singular, plural = entry
                pairs.append((singular or None, plural or None))
            else:
                raise ConfigurationError(f"invalid singular/plural entry {entry!r}", category)
        if not pairs:
            raise ConfigurationError("word pool is empty", category)
        self.pairs: Tuple[Tuple[Optional[str], Optional[str]], ...] = tuple(pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def random_word(self, plural: bool = False,
                    used: Optional[Iterable[str]] = None) -> TaggedWord:
        slot = 1 if plural else 0
        value = _pick_unused(
            self.category, lambda: self.pairs[random_int(len(self.pairs))][slot], used)
        return _word(value, self.category, 'plural' if plural else 'singular')


# =============================================================================
# Verbs
# =============================================================================

TENSES = (
    'presentPlural', 'presentSingular',
    'futurePlural', 'futureSingular',
    'pastContinuousPlural', 'pastContinuousSingular',
    'pastPlural', 'pastSingular',
    'perfectPlural', 'perfectSingular',
    'presentContinuousPlural', 'presentContinuousSingular',
    'subjunctivePlural', 'subjunctiveSingular',
)

# {base} is the verb as given; {stem} drops a final 'e' after a consonant
DEFAULT_FORMS = (
    '{base}', '{base}s',
    'will {base}', 'will {base}',
    'were {stem}ing', 'was {stem}ing',
    '{stem}ed', '{stem}ed',
    'have {stem}ed', 'has {stem}ed',
    'are {stem}ing', 'is {stem}ing',
    'might {base}', 'might {base}',
)

BASE_TENSES = ('present', 'future', 'past', 'perfect', 'subjunctive')

# Tense names a verb clause may ask for, besides the full variant names
TENSE_SELECTORS = BASE_TENSES + ('continuous', 'continuousPast')

VOWELS = 'aeiou'


@dataclass(frozen=True)
class TenseSpec:
    """Compiled description of one verb variant."""
    name: str
    tense: str
    plural: bool
    continuous: bool
    default_form: str

    @property
    def tags(self) -> Tuple[str, ...]:
        tags = (self.name, self.tense, 'plural' if self.plural else 'singular')
        if self.continuous:
            tags += ('continuous',)
        return tags


def compile_tenses() -> Tuple[TenseSpec, ...]:
    """Turn the tense names into structured descriptors."""
    specs = []
    for name, form in zip(TENSES, DEFAULT_FORMS):
        tense = next(t for t in BASE_TENSES if name.startswith(t))
        specs.append(TenseSpec(
            name=name,
            tense=tense,
            plural=name.endswith('Plural'),
            continuous='Continuous' in name,
            default_form=form,
        ))
    return tuple(specs)


TENSE_SPECS = compile_tenses()


def verb_stem(base: str) -> str:
    """'dance' -> 'danc', 'see' -> 'see', 'walk' -> 'walk'."""
    if len(base) > 2 and base.endswith('e') and base[-2] not in VOWELS:
        return base[:-1]
    return base


def conjugate(base: str, form: str) -> str:
    return form.replace('{stem}', verb_stem(base)).replace('{base}', base)


def _selection_keys(spec: TenseSpec) -> List[Tuple[Optional[str], Optional[bool]]]:
    """Every (tense, plural) request a variant satisfies."""
    tenses = [None, spec.name, spec.tense]
    if spec.continuous:
        tenses.append('continuous')
        if spec.tense == 'past':
            tenses.append('continuousPast')
    return [(tense, plural) for tense in tenses for plural in (None, spec.plural)]


class VerbPool:
    """
    Pool of conjugated verbs for one transitivity.

    Each entry is a base verb, or overrides for some variants: a list in
    TENSES order or a mapping of variant name to form. A missing/None slot
    uses the default form, False means the verb has no such variant.
    """

    def __init__(self, transitivity: str, entries: Iterable[Any]):
        self.category = 'verb'
        self.transitivity = transitivity
        self.size = 0
        words = []
        index: Dict[Tuple[Optional[str], Optional[bool]], List[TaggedWord]] = {}
        for entry in entries:
            self.size += 1
            for value, spec in self._expand(entry):
                word = _word(value, 'verb', transitivity, *spec.tags)
                words.append(word)
                for key in _selection_keys(spec):
                    index.setdefault(key, []).append(word)
        if not words:
            raise ConfigurationError("verb pool is empty", transitivity)
        self.words: Tuple[TaggedWord, ...] = tuple(words)
        # (tense selector, plural) -> candidates; None in either slot means "any"
        self._index = {key: tuple(found) for key, found in index.items()}

    def _expand(self, entry: Any) -> List[Tuple[str, TenseSpec]]:
        if isinstance(entry, str):
            base, overrides = entry, {}
        elif isinstance(entry, (list, tuple)) and entry:
            base = entry[0]
            overrides = {TENSES[i]: form for i, form in enumerate(entry[:len(TENSES)])
                         if form is not None and form != ''}
            overrides.pop(TENSES[0], None)
        elif isinstance(entry, Mapping) and entry.get('base'):
            base = entry['base']
            overrides = {k: v for k, v in entry.items() if k != 'base'}
            unknown = set(overrides) - set(TENSES)
            if unknown:
                raise ConfigurationError(
                    f"unknown verb variants {sorted(unknown)} for '{base}'", self.transitivity)
        else:
            raise ConfigurationError(f"invalid verb entry {entry!r}", self.transitivity)

        if not isinstance(base, str) or not base:
            raise ConfigurationError(f"invalid verb base {base!r}", self.transitivity)

        expanded = []
        for spec in TENSE_SPECS:
            form = overrides.get(spec.name)
            if form is False:
                continue
            if not form:
                form = spec.default_form
            expanded.append((conjugate(base, form), spec))
        return expanded

    def __len__(self) -> int:
        """Number of verbs (not variants)."""
        return self.size

    def random_word(self, tense: Optional[str] = None, plural: Optional[bool] = None,
                    used: Optional[Iterable[str]] = None) -> TaggedWord:
        """
        Pick a verb matching the tense and plurality.

        Parameters
        ----------
        tense : str, optional
            A selector from TENSE_SELECTORS or a full variant name
            such as 'pastSingular'. None accepts any tense.
        plural : bool, optional
            None accepts either number.
        used : set, optional
            Surface forms to avoid.
        """
        if tense and tense not in TENSE_SELECTORS and tense not in TENSES:
            raise ConfigurationError(f"unknown tense '{tense}'", 'verb.subtype')
        if plural is not None:
            plural = bool(plural)

        matches = self._index.get((tense or None, plural), ())
        if not matches:
            raise ConfigurationError(
                f"no {self.transitivity} verb has tense {tense!r} (plural={plural})",
                'verb.subtype')

        options = [w for w in matches if not used or w.value not in used]
        if not options:
            raise ExhaustionError(
                self.transitivity, len(matches),
                f"All {len(matches)} {self.transitivity} verbs for tense {tense!r} "
                f"(plural={plural}) are already used")
        return options[random_int(len(options))]


# =============================================================================
# Articles, Pronouns and Numbers
# =============================================================================

class ArticlePool:
    """
    Pool of articles, each {definite, indefinite, indefiniteBeforeVowel}.

    An indefinite draw carries its pre-vowel alternate; the sentence
    applies it once the following word is known.
    """

    def __init__(self, entries: Iterable[Mapping[str, str]]):
        self.category = 'article'
        self.entries = tuple(dict(e) for e in entries)
        if not self.entries:
            raise ConfigurationError("article pool is empty", 'article')
        for entry in self.entries:
            missing = {'definite', 'indefinite'} - set(entry)
            if missing:
                raise ConfigurationError(f"article entry missing {sorted(missing)}", 'article')

    def __len__(self) -> int:
        return len(self.entries)

    def random_word(self, definite: bool) -> TaggedWord:
        entry = self.entries[random_int(len(self.entries))]
        if definite:
            return _word(entry['definite'], 'article', 'definite')
        return _word(entry['indefinite'], 'article', 'indefinite',
                     before_vowel=entry.get('indefiniteBeforeVowel') or entry['indefinite'])

    def random_definite(self) -> TaggedWord:
        return self.random_word(True)

    def random_indefinite(self) -> TaggedWord:
        return self.random_word(False)


class IndefinitePronounPool:
    """Indefinite pronouns ('one', 'thing'), split into personal and impersonal."""

    def __init__(self, entries: Iterable[Mapping[str, Any]]):
        self.category = 'indefinitePronoun'
        self.entries = tuple(dict(e) for e in entries)
        if not self.entries:
            raise ConfigurationError("indefinite pronoun pool is empty", self.category)
        self.personal = tuple(e for e in self.entries if e.get('personal'))
        self.impersonal = tuple(e for e in self.entries if not e.get('personal'))

    def __len__(self) -> int:
        return len(self.entries)

    def random_word(self, personal: Optional[bool] = None, plural: bool = False,
                    used: Optional[Iterable[str]] = None) -> TaggedWord:
        """personal=None draws from either subset."""
        if personal is None:
            candidates = self.entries
        else:
            candidates = self.personal if personal else self.impersonal
        if not candidates:
            kind = 'personal' if personal else 'impersonal'
            raise ConfigurationError(f"no {kind} indefinite pronouns", self.category)

        number = 'plural' if plural else 'singular'
        value = _pick_unused(
            self.category, lambda: candidates[random_int(len(candidates))].get(number), used)
        return _word(value, 'indefinitePronoun', 'pronoun', 'indefinite', number)


class NumberPool:
    """Numerals: '1' before singular nouns, [max(2, start), end] before plurals."""

    def __init__(self, start: int = 1, end: int = 999):
        self.category = 'number'
        self.start = start
        self.end = end
        if end < max(2, start):
            raise ConfigurationError(f"empty plural range {start}..{end}", self.category)

    @property
    def plural_start(self) -> int:
        return max(2, self.start)

    def __len__(self) -> int:
        return self.end - self.plural_start + 1

    def singular_word(self) -> TaggedWord:
        return _word('1', 'number', 'requiresSingularNoun')

    def plural_word(self) -> TaggedWord:
        value = self.plural_start + random_int(len(self))
        return _word(str(value), 'number')


# =============================================================================
# Lexicon
# =============================================================================

class Lexicon:
    """
    Every pool the sentence engine draws from.

    Built once from raw word data (see phrasekit.lexicon) and read-only
    afterwards.
    """

    def __init__(self,
                 nouns: PluralWordPool,
                 verbs: VerbPool,
                 intransitive_verbs: VerbPool,
                 adjectives: WordPool,
                 adverbs: WordPool,
                 articles: ArticlePool,
                 prepositions: WordPool,
                 conjunctions: WordPool,
                 proper_nouns: WordPool,
                 speech_verbs: WordPool,
                 demonstratives: PluralWordPool,
                 personal_pronouns: PluralWordPool,
                 interrogatives: PluralWordPool,
                 indefinite_pronouns: IndefinitePronounPool,
                 numbers: NumberPool):
        self.nouns = nouns
        self.verbs = verbs
        self.intransitive_verbs = intransitive_verbs
        self.adjectives = adjectives
        self.adverbs = adverbs
        self.articles = articles
        self.prepositions = prepositions
        self.conjunctions = conjunctions
        self.proper_nouns = proper_nouns
        self.speech_verbs = speech_verbs
        self.demonstratives = demonstratives
        self.personal_pronouns = personal_pronouns
        self.interrogatives = interrogatives
        self.indefinite_pronouns = indefinite_pronouns
        self.numbers = numbers

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Lexicon':
        """Build pools from raw lists (the layout of lexicon/words.yaml)."""
        def require(key):
            if key not in data:
                raise ConfigurationError("missing word list", key)
            return data[key]

        numbers = data.get('numbers') or {}
        return cls(
            nouns=PluralWordPool('noun', require('nouns')),
            verbs=VerbPool('transitive', require('verbs')),
            intransitive_verbs=VerbPool('intransitive', require('intransitiveVerbs')),
            adjectives=WordPool('adjective', require('adjectives')),
            adverbs=WordPool('adverb', require('adverbs')),
            articles=ArticlePool(require('articles')),
            prepositions=WordPool('preposition', require('prepositions')),
            conjunctions=WordPool('conjunction', require('conjunctions')),
            proper_nouns=WordPool('properNoun', require('properNouns')),
            speech_verbs=WordPool('speechVerb', require('speechVerbs')),
            demonstratives=PluralWordPool('demonstrative', require('demonstratives')),
            personal_pronouns=PluralWordPool('personalPronoun', require('personalPronouns')),
            interrogatives=PluralWordPool('interrogative', require('interrogatives')),
            indefinite_pronouns=IndefinitePronounPool(require('indefinitePronouns')),
            numbers=NumberPool(numbers.get('start', 1), numbers.get('end', 999)),
        )

    def transitivity_odds(self) -> Tuple[int, int]:
        """(transitive, intransitive) weights: the pool sizes."""
        return (len(self.verbs), len(self.intransitive_verbs))

    def random_transitivity(self) -> str:
        """'transitive' or 'intransitive', biased toward the larger pool."""
        return 'transitive' if evaluate(self.transitivity_odds()) else 'intransitive'

    def sizes(self) -> Dict[str, int]:
        return {
            'nouns': len(self.nouns),
            'verbs': len(self.verbs),
            'intransitiveVerbs': len(self.intransitive_verbs),
            'adjectives': len(self.adjectives),
            'adverbs': len(self.adverbs),
            'articles': len(self.articles),
            'prepositions': len(self.prepositions),
            'conjunctions': len(self.conjunctions),
            'properNouns': len(self.proper_nouns),
            'speechVerbs': len(self.speech_verbs),
            'demonstratives': len(self.demonstratives),
            'personalPronouns': len(self.personal_pronouns),
            'interrogatives': len(self.interrogatives),
            'indefinitePronouns': len(self.indefinite_pronouns),
            'numbers': len(self.numbers),
        }


__all__ = [
    'MAX_ATTEMPTS',
    'TaggedWord',
    'WordPool',
    'PluralWordPool',
    'VerbPool',
    'ArticlePool',
    'IndefinitePronounPool',
    'NumberPool',
    'Lexicon',
    'TENSES',
    'TENSE_SELECTORS',
    'TENSE_SPECS',
    'TenseSpec',
    'compile_tenses',
    'conjugate',
    'verb_stem',
]
