#!/usr/bin/env python3
"""
Entropy Calculator
==================
Bits of entropy for a template (and mutator), computed analytically from
the same factors the sentence engine draws from. Nothing is generated.

The walk keeps a multiplier: the probability that the sentence is still
going. A verb clause that may drop its object (intransitive
'noNounClause') ends some sentences early, so every later clause counts
only for the fraction of sentences that reach it.

A template collection scores as the average of its members plus the bits
for picking a member.
"""

import math
from typing import Optional

from .errors import ConfigurationError
from .factors import FactorSet
from .mutator import Mutator
from .templates import (
    Clause,
    ConjunctionClause,
    DirectSpeechClause,
    NounClause,
    SentenceTemplate,
    TemplateRef,
    TemplateRegistry,
    VerbClause,
)
from .words import Lexicon


def _log2(size: int) -> float:
    return math.log2(size) if size > 0 else 0.0


# =============================================================================
# Clauses
# =============================================================================

def prelude_entropy(factors: FactorSet, lexicon: Lexicon) -> float:
    """Preposition, number and article choice shared by both noun kinds."""
    bits = factors.entropy_of('preposition') + factors.entropy_of('singular')
    bits += factors.chance_of('preposition', True) * _log2(len(lexicon.prepositions))

    articles = _log2(len(lexicon.articles))
    demonstratives = _log2(len(lexicon.demonstratives))
    pronouns = _log2(len(lexicon.personal_pronouns))

    singular = (
        factors.entropy_of('articleSingular')
        + factors.chance_of('articleSingular', 'definite') * articles
        + factors.chance_of('articleSingular', 'indefinite') * articles
        + factors.chance_of('articleSingular', 'demonstrative') * demonstratives
        + factors.chance_of('articleSingular', 'personalPronoun') * pronouns
    )
    plural = (
        factors.entropy_of('articlePlural')
        + factors.chance_of('articlePlural', 'definite') * articles
        + factors.chance_of('articlePlural', 'demonstrative') * demonstratives
        + factors.chance_of('articlePlural', 'personalPronoun') * pronouns
    )
    bits += factors.chance_of('singular', True) * singular
    bits += factors.chance_of('singular', False) * plural
    return bits


def noun_entropy(factors: FactorSet, lexicon: Lexicon) -> float:
    bits = factors.entropy_of('subtype')
    bits += factors.chance_of('subtype', 'proper') * _log2(len(lexicon.proper_nouns))

    prelude = prelude_entropy(factors, lexicon)
    adjectives = _log2(len(lexicon.adjectives))

    common = (
        _log2(len(lexicon.nouns))
        + factors.entropy_of('adjective')
        + prelude
        + factors.chance_of('adjective', True) * adjectives
        + factors.chance_of('singular', False) * factors.chance_of('number', True)
        * _log2(len(lexicon.numbers))
    )
    bits += factors.chance_of('subtype', 'common') * common

    from_adjective = _log2(len(lexicon.indefinite_pronouns)) + prelude + adjectives
    bits += factors.chance_of('subtype', 'nounFromAdjective') * from_adjective
    return bits


def transitivity(lexicon: Lexicon):
    """(P(intransitive), binary entropy of the size-weighted split)."""
    transitive, intransitive = lexicon.transitivity_odds()
    total = transitive + intransitive
    if total == 0:
        return 0.0, 0.0
    bits = 0.0
    for size in (transitive, intransitive):
        if size:
            p = size / total
            bits -= p * math.log2(p)
    return intransitive / total, bits


def verb_entropy(factors: FactorSet, lexicon: Lexicon):
    """
    Bits for a verb clause and the chance it ends the sentence.

    Returns (bits, P(sentence ends here)).
    """
    chance_intransitive, split_bits = transitivity(lexicon)

    bits = (
        factors.entropy_of('interrogative')
        + factors.entropy_of('adverb') * 2
        + split_bits
        + factors.chance_of('interrogative', True) * _log2(len(lexicon.interrogatives))
        + factors.chance_of('adverb', True) * (_log2(len(lexicon.adverbs)) + 1)
        + chance_intransitive * factors.chance_of('intransitive', 'preposition')
        * _log2(len(lexicon.prepositions))
    )
    ends = chance_intransitive * factors.chance_of('intransitive', 'noNounClause')
    return bits, ends


def clause_entropy(clause: Clause, lexicon: Lexicon):
    """Returns (bits, P(sentence ends after this clause))."""
    if isinstance(clause, ConjunctionClause):
        return _log2(len(lexicon.conjunctions)), 0.0
    if isinstance(clause, DirectSpeechClause):
        return _log2(len(lexicon.speech_verbs)), 0.0
    if isinstance(clause, NounClause):
        return noun_entropy(clause.factors, lexicon), 0.0
    if isinstance(clause, VerbClause):
        return verb_entropy(clause.factors, lexicon)
    raise ConfigurationError(f"unexpected clause {clause!r}", 'type')


# =============================================================================
# Templates
# =============================================================================

def template_entropy(template: SentenceTemplate, lexicon: Lexicon) -> float:
    """Bits for a single template."""
    total = 0.0
    multiplier = 1.0
    for clause in template:
        bits, ends = clause_entropy(clause, lexicon)
        total += bits * multiplier
        multiplier *= 1 - ends
    return total


def named_entropy(name: str, registry: TemplateRegistry, lexicon: Lexicon) -> float:
    """Bits for a registered template or collection."""
    if registry.is_collection(name):
        members = registry.members(name)
        average = sum(named_entropy(m, registry, lexicon) for m in members) / len(members)
        return average + math.log2(len(members))
    return template_entropy(registry.get(name), lexicon)


def entropy_of(template: TemplateRef, registry: TemplateRegistry, lexicon: Lexicon,
               mutator: Optional[Mutator] = None) -> float:
    """Total bits for a template reference plus an optional mutator."""
    if isinstance(template, str):
        bits = named_entropy(template, registry, lexicon)
    else:
        bits = template_entropy(registry.resolve(template), lexicon)
    if mutator is not None:
        bits += mutator.entropy_bits()
    return bits


__all__ = [
    'prelude_entropy',
    'noun_entropy',
    'verb_entropy',
    'clause_entropy',
    'template_entropy',
    'named_entropy',
    'entropy_of',
    'transitivity',
]
