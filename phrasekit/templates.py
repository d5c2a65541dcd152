#!/usr/bin/env python3
"""
Sentence Templates
==================
A template is an ordered list of clauses. Each clause is one of four kinds:

    NounClause          noun phrase (common, proper or from-adjective)
    VerbClause          verb phrase with agreement, adverb, interrogative
    ConjunctionClause   one conjunction
    DirectSpeechClause  one speech verb ("said", "whispered")

Clauses are parsed and validated up front, so the sentence engine only ever
sees well-formed factor sets. Unknown clause types, subtypes, tense names,
article kinds and intransitive realizations are ConfigurationErrors.

Two notations are accepted for noun and verb clauses:

    mapping  {type: noun, subtype: {common: 12, proper: 1}, article: {...}, ...}
    packed   [noun, common, proper, nounFromAdjective,
              none, definite, indefinite, demonstrative, personalPronoun,
              adjective, preposition, number, singular]
             [verb, present, past, future, continuous, continuousPast,
              perfect, subjunctive, adverb, interrogative,
              noNounClause, preposition]

A TemplateRegistry maps names to templates or to collections of template
names; resolving a collection picks one member uniformly.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import ConfigurationError
from .factors import FactorSet
from .randomness import random_int
from .words import TENSE_SELECTORS, TENSES

logger = logging.getLogger(__name__)


# =============================================================================
# Vocabulary of Clause Factors
# =============================================================================

class NounKind(Enum):
    COMMON = 'common'
    PROPER = 'proper'
    NOUN_FROM_ADJECTIVE = 'nounFromAdjective'


ARTICLE_KINDS = ('none', 'definite', 'indefinite', 'demonstrative', 'personalPronoun')
SINGULAR_ARTICLE_KINDS = tuple(k for k in ARTICLE_KINDS if k != 'none')
PLURAL_ARTICLE_KINDS = tuple(k for k in ARTICLE_KINDS if k != 'indefinite')

INTRANSITIVE_KINDS = ('noNounClause', 'preposition')

VERB_SUBTYPES = TENSE_SELECTORS + TENSES

NOUN_FACTORS = ('subtype', 'articleSingular', 'articlePlural',
                'adjective', 'preposition', 'number', 'singular')
VERB_FACTORS = ('subtype', 'adverb', 'interrogative', 'intransitive')

PACKED_NOUN_FIELDS = (
    ('subtype', 'common'), ('subtype', 'proper'), ('subtype', 'nounFromAdjective'),
    ('article', 'none'), ('article', 'definite'), ('article', 'indefinite'),
    ('article', 'demonstrative'), ('article', 'personalPronoun'),
    ('adjective', None), ('preposition', None), ('number', None), ('singular', None),
)

PACKED_VERB_FIELDS = (
    ('subtype', 'present'), ('subtype', 'past'), ('subtype', 'future'),
    ('subtype', 'continuous'), ('subtype', 'continuousPast'),
    ('subtype', 'perfect'), ('subtype', 'subjunctive'),
    ('adverb', None), ('interrogative', None),
    ('intransitive', 'noNounClause'), ('intransitive', 'preposition'),
)


# =============================================================================
# Clause Types
# =============================================================================

@dataclass(frozen=True)
class NounClause:
    factors: FactorSet
    type = 'noun'


@dataclass(frozen=True)
class VerbClause:
    factors: FactorSet
    type = 'verb'


@dataclass(frozen=True)
class ConjunctionClause:
    type = 'conjunction'


@dataclass(frozen=True)
class DirectSpeechClause:
    type = 'directSpeech'


Clause = Union[NounClause, VerbClause, ConjunctionClause, DirectSpeechClause]


@dataclass(frozen=True)
class SentenceTemplate:
    """An ordered sequence of parsed clauses."""
    clauses: Tuple[Clause, ...]
    name: Optional[str] = None

    def __iter__(self):
        return iter(self.clauses)

    def __len__(self) -> int:
        return len(self.clauses)


# =============================================================================
# Parsing
# =============================================================================

def _check_outcomes(factors: FactorSet, name: str, allowed: Sequence[str],
                    field: str, required: bool = False):
    """Every outcome a factor can produce must be one of `allowed`."""
    spec = factors[name]
    if spec is None or spec is False:
        if required:
            raise ConfigurationError("factor is required", field)
        return
    if isinstance(spec, dict):
        unknown = [k for k in spec if k not in allowed]
    elif isinstance(spec, str):
        unknown = [spec] if spec not in allowed else []
    else:
        unknown = [spec]
    if unknown:
        raise ConfigurationError(
            f"unknown value(s) {unknown}; expected one of {list(allowed)}", field)


def _unpack(kind: str, packed: Sequence[Any], layout, context: str) -> Dict[str, Any]:
    values = list(packed[1:])
    if len(values) > len(layout):
        raise ConfigurationError(
            f"packed {kind} clause has {len(values)} fields, expected {len(layout)}", context)
    values += [None] * (len(layout) - len(values))

    spec: Dict[str, Any] = {'type': kind}
    for (factor, outcome), value in zip(layout, values):
        if outcome is None:
            spec[factor] = value
        else:
            spec.setdefault(factor, {})[outcome] = value or 0
    return spec


def _split_articles(spec: Dict[str, Any], context: str) -> Dict[str, Any]:
    """Singular nouns never go bare; plural nouns never take 'a'."""
    article = spec.pop('article')
    if 'articleSingular' in spec or 'articlePlural' in spec:
        return spec
    if isinstance(article, Mapping):
        spec['articleSingular'] = {k: v for k, v in article.items() if k != 'none'}
        spec['articlePlural'] = {k: v for k, v in article.items() if k != 'indefinite'}
    elif article is not None:
        raise ConfigurationError(f"article must be a mapping, got {article!r}",
                                 f"{context}.article")
    return spec


def _factor_set(spec: Mapping[str, Any], allowed: Sequence[str], context: str) -> FactorSet:
    unknown = [k for k in spec if k != 'type' and k not in allowed]
    if unknown:
        raise ConfigurationError(f"unknown factor(s) {unknown}", context)
    return FactorSet({k: v for k, v in spec.items() if k != 'type'}, context)


def parse_clause(raw: Any, context: str = "clause") -> Clause:
    """
    Parse one clause in any accepted notation.

    Raises
    ------
    ConfigurationError
        For unknown types, subtypes or factor values.
    """
    if isinstance(raw, str):
        raw = {'type': raw}
    elif isinstance(raw, (list, tuple)) and raw:
        if raw[0] == 'noun':
            raw = _unpack('noun', raw, PACKED_NOUN_FIELDS, context)
        elif raw[0] == 'verb':
            raw = _unpack('verb', raw, PACKED_VERB_FIELDS, context)
        else:
            raise ConfigurationError(f"unknown packed clause type {raw[0]!r}", f"{context}.type")
    elif not isinstance(raw, Mapping):
        raise ConfigurationError(f"invalid clause {raw!r}", context)

    spec = dict(raw)
    clause_type = spec.get('type')

    if clause_type == 'conjunction':
        return ConjunctionClause()
    if clause_type == 'directSpeech':
        return DirectSpeechClause()

    if clause_type == 'noun':
        if 'article' in spec:
            spec = _split_articles(spec, context)
        factors = _factor_set(spec, NOUN_FACTORS, context)
        _check_outcomes(factors, 'subtype', [k.value for k in NounKind],
                        f"{context}.subtype", required=True)
        _check_outcomes(factors, 'articleSingular', SINGULAR_ARTICLE_KINDS,
                        f"{context}.articleSingular")
        _check_outcomes(factors, 'articlePlural', PLURAL_ARTICLE_KINDS,
                        f"{context}.articlePlural")
        return NounClause(factors)

    if clause_type == 'verb':
        factors = _factor_set(spec, VERB_FACTORS, context)
        _check_outcomes(factors, 'subtype', VERB_SUBTYPES, f"{context}.subtype")
        _check_outcomes(factors, 'intransitive', INTRANSITIVE_KINDS, f"{context}.intransitive")
        return VerbClause(factors)

    raise ConfigurationError(f"unknown clause type {clause_type!r}", f"{context}.type")


def parse_template(raw: Any, name: Optional[str] = None) -> SentenceTemplate:
    """Parse a list of clauses into a SentenceTemplate."""
    if isinstance(raw, SentenceTemplate):
        return raw
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ConfigurationError("template must be a non-empty list of clauses", name or 'template')
    label = name or 'template'
    clauses = tuple(parse_clause(c, f"{label}[{i}]") for i, c in enumerate(raw))
    return SentenceTemplate(clauses=clauses, name=name)


# =============================================================================
# Registry
# =============================================================================

TemplateRef = Union[str, SentenceTemplate, Sequence[Any]]


class TemplateRegistry:
    """
    Named templates and named collections of templates.

    Owned by the caller and passed to the generator; nothing here is global.

    Usage:
        registry = TemplateRegistry()
        registry.register('tiny', [['noun', 1, 0, 0, 1, 1, 1, 0, 0,
                                    False, False, False, True], 'conjunction'])
        registry.register_collection('any', ['tiny'])
    """

    def __init__(self):
        self._templates: Dict[str, SentenceTemplate] = {}
        self._collections: Dict[str, Tuple[str, ...]] = {}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TemplateRegistry':
        """Build from {'templates': {...}, 'collections': {...}}."""
        registry = cls()
        for name, clauses in (data.get('templates') or {}).items():
            registry.register(name, clauses)
        for name, members in (data.get('collections') or {}).items():
            registry.register_collection(name, members)
        registry.validate()
        return registry

    def register(self, name: str, template: Any) -> SentenceTemplate:
        parsed = parse_template(template, name)
        if parsed.name != name:
            parsed = SentenceTemplate(clauses=parsed.clauses, name=name)
        self._collections.pop(name, None)
        self._templates[name] = parsed
        return parsed

    def register_collection(self, name: str, members: Iterable[str]):
        members = tuple(members)
        if not members or not all(isinstance(m, str) for m in members):
            raise ConfigurationError("collection must be a non-empty list of template names", name)
        self._templates.pop(name, None)
        self._collections[name] = members

    def validate(self):
        """Check that every collection member is registered."""
        for name, members in self._collections.items():
            for member in members:
                if member not in self:
                    raise ConfigurationError(f"unknown template '{member}'", name)

    def __contains__(self, name: str) -> bool:
        return name in self._templates or name in self._collections

    def names(self) -> List[str]:
        return list(self._templates) + list(self._collections)

    def is_collection(self, name: str) -> bool:
        return name in self._collections

    def members(self, name: str) -> Tuple[str, ...]:
        if name not in self._collections:
            raise ConfigurationError("not a template collection", name)
        return self._collections[name]

    def get(self, name: str) -> SentenceTemplate:
        """Look up a single (non-collection) template."""
        if name in self._templates:
            return self._templates[name]
        if name in self._collections:
            raise ConfigurationError("is a template collection, not a template", name)
        available = ', '.join(sorted(self.names()))
        raise ConfigurationError(f"unknown template. Available: {available}", name)

    def choose(self, name: str) -> SentenceTemplate:
        """Get a template by name, picking a random member of collections."""
        seen = set()
        while name in self._collections:
            if name in seen:
                raise ConfigurationError("template collection refers to itself", name)
            seen.add(name)
            members = self._collections[name]
            chosen = members[random_int(len(members))]
            logger.debug(f"Collection '{name}' chose template '{chosen}'")
            name = chosen
        return self.get(name)

    def resolve(self, template: TemplateRef) -> SentenceTemplate:
        """Turn a name, parsed template or raw clause list into a template."""
        if isinstance(template, SentenceTemplate):
            return template
        if isinstance(template, str):
            return self.choose(template)
        return parse_template(template)


__all__ = [
    'NounKind',
    'NounClause',
    'VerbClause',
    'ConjunctionClause',
    'DirectSpeechClause',
    'Clause',
    'SentenceTemplate',
    'TemplateRegistry',
    'TemplateRef',
    'parse_clause',
    'parse_template',
    'ARTICLE_KINDS',
    'INTRANSITIVE_KINDS',
]
