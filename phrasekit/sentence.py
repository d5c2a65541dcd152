#!/usr/bin/env python3
"""
Sentence Assembly
=================
Interprets a SentenceTemplate clause by clause, drawing words from a
Lexicon and decisions from each clause's factors.

One SentenceBuilder is one generation session: it owns the words placed
so far and the set of surface forms already used. Build a new one for
every phrase.

Agreement rules:
- a verb agrees with the first noun of its clause; a speech verb starts a
  new clause (the quoted one) and resets the search
- without a noun, the first indefinite pronoun decides; otherwise singular
- an interrogative forces plural present tense ("why do ... eat")
- an indefinite article before a vowel becomes its pre-vowel form
"""

import logging
from dataclasses import replace
from typing import List, Optional, Set

from .errors import ConfigurationError
from .factors import FactorSet
from .randomness import randomness
from .templates import (
    Clause,
    ConjunctionClause,
    DirectSpeechClause,
    NounClause,
    NounKind,
    SentenceTemplate,
    VerbClause,
)
from .words import Lexicon, TaggedWord

logger = logging.getLogger(__name__)

VOWELS = 'aeiou'


class SentenceBuilder:
    """
    Assembles one sentence.

    Usage:
        builder = SentenceBuilder(lexicon)
        builder.add_template(template)
        print(builder.render())
    """

    def __init__(self, lexicon: Lexicon):
        self.lexicon = lexicon
        self.words: List[TaggedWord] = []
        self.used: Set[str] = set()

    # -------------------------------------------------------------------------
    # Session state
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.words)

    def last(self) -> Optional[TaggedWord]:
        return self.words[-1] if self.words else None

    def append_word(self, word: TaggedWord):
        self.insert_word(word, len(self.words))

    def insert_word(self, word: TaggedWord, position: int):
        self.words.insert(position, word)
        self.used.add(word.value)

    def render(self) -> str:
        return ' '.join(word.value for word in self.words)

    # -------------------------------------------------------------------------
    # Templates and clauses
    # -------------------------------------------------------------------------

    def add_template(self, template: SentenceTemplate) -> List[TaggedWord]:
        """Expand every clause in order, stopping early if a verb ends the sentence."""
        for index, clause in enumerate(template):
            if self.add_clause(clause):
                logger.debug(f"Sentence ended after clause {index} of {len(template)}")
                break
        self._fix_indefinite_articles()
        return self.words

    def add_clause(self, clause: Clause) -> bool:
        """Add one clause. Returns True if the sentence must end here."""
        if isinstance(clause, NounClause):
            return self.add_noun(clause.factors)
        if isinstance(clause, VerbClause):
            return self.add_verb(clause.factors)
        if isinstance(clause, ConjunctionClause):
            self.append_word(self.lexicon.conjunctions.random_word(self.used))
            return False
        if isinstance(clause, DirectSpeechClause):
            self.append_word(self.lexicon.speech_verbs.random_word(self.used))
            return False
        raise ConfigurationError(f"unexpected clause {clause!r}", 'type')

    def _fix_indefinite_articles(self):
        """'a apple' -> 'an apple'."""
        for i, word in enumerate(self.words[:-1]):
            if not word.has_tags('article', 'indefinite') or not word.before_vowel:
                continue
            following = self.words[i + 1].value
            if following[:1].lower() in VOWELS:
                self.words[i] = replace(word, value=word.before_vowel)

    # -------------------------------------------------------------------------
    # Verbs
    # -------------------------------------------------------------------------

    def _subject_agreement(self):
        """
        Find the verb's number and where an interrogative would go.

        Returns (plural, interrogative_position).
        """
        first_noun = None
        first_pronoun = None
        position = 0
        for i, word in enumerate(self.words):
            if first_noun is None and word.has_tags('noun'):
                first_noun = word
            elif word.has_tags('speechVerb'):
                first_noun = None
                position = i + 1
            elif first_pronoun is None and word.has_tags('indefinitePronoun'):
                first_pronoun = word

        if first_noun is not None:
            return first_noun.has_tags('plural'), position
        if first_pronoun is not None:
            return first_pronoun.has_tags('plural'), position
        return False, position

    def add_verb(self, factors: FactorSet) -> bool:
        plural, interrogative_position = self._subject_agreement()

        transitive = True
        drop_object = False
        add_preposition = False
        intransitive = factors.by_name('intransitive')
        if intransitive and self.lexicon.random_transitivity() == 'intransitive':
            transitive = False
            if intransitive == 'noNounClause':
                drop_object = True
            elif intransitive == 'preposition':
                add_preposition = True
            else:
                raise ConfigurationError(
                    f"unexpected intransitive realization {intransitive!r}", 'verb.intransitive')

        interrogative = factors.by_name('interrogative')
        tense = factors.by_name('subtype') or None
        if interrogative:
            self.insert_word(
                self.lexicon.interrogatives.random_word(plural), interrogative_position)
            plural = True
            tense = 'presentPlural'

        adverb = None
        if factors.by_name('adverb'):
            adverb = 'before' if randomness(2) >= 1 else 'after'

        if adverb == 'before':
            self.append_word(self.lexicon.adverbs.random_word(self.used))

        pool = self.lexicon.verbs if transitive else self.lexicon.intransitive_verbs
        self.append_word(pool.random_word(tense, plural, self.used))

        if adverb == 'after':
            self.append_word(self.lexicon.adverbs.random_word(self.used))
        if add_preposition:
            self.append_word(self.lexicon.prepositions.random_word(self.used))

        return drop_object

    # -------------------------------------------------------------------------
    # Nouns
    # -------------------------------------------------------------------------

    def add_noun(self, factors: FactorSet) -> bool:
        subtype = factors.by_name('subtype')
        if subtype == NounKind.COMMON.value:
            self.add_common_noun(factors)
        elif subtype == NounKind.NOUN_FROM_ADJECTIVE.value:
            self.add_noun_from_adjective(factors)
        elif subtype == NounKind.PROPER.value:
            self.append_word(self.lexicon.proper_nouns.random_word(self.used))
        else:
            raise ConfigurationError(f"unknown noun subtype {subtype!r}", 'noun.subtype')
        return False

    def add_common_noun(self, factors: FactorSet):
        """[preposition] [article] [number] [adjective] noun"""
        plural = self.add_noun_prelude(factors)

        if factors.by_name('number') and (plural or factors.must_be_true('singular')):
            numbers = self.lexicon.numbers
            if plural:
                self.append_word(numbers.plural_word())
            elif not (self.last() and self.last().has_tags('article', 'indefinite')):
                self.append_word(numbers.singular_word())

        if factors.by_name('adjective'):
            self.append_word(self.lexicon.adjectives.random_word(self.used))
        self.append_word(self.lexicon.nouns.random_word(plural, self.used))

    def add_noun_from_adjective(self, factors: FactorSet):
        """[preposition] [article] adjective one/thing, e.g. 'a green thing'."""
        plural = self.add_noun_prelude(factors)
        self.append_word(self.lexicon.adjectives.random_word(self.used))
        personal = randomness(2) >= 1
        self.append_word(self.lexicon.indefinite_pronouns.random_word(personal, plural))

    def add_noun_prelude(self, factors: FactorSet) -> bool:
        """Optional preposition, then the article. Returns True for plural nouns."""
        if factors.by_name('preposition'):
            last = self.last()
            if last is None or not last.has_tags('preposition'):
                self.append_word(self.lexicon.prepositions.random_word(self.used))

        plural = not factors.by_name('singular')
        article = factors.by_name('articlePlural' if plural else 'articleSingular')

        if not article or article == 'none':
            pass
        elif article == 'definite':
            self.append_word(self.lexicon.articles.random_definite())
        elif article == 'indefinite':
            self.append_word(self.lexicon.articles.random_indefinite())
        elif article == 'demonstrative':
            self.append_word(self.lexicon.demonstratives.random_word(plural))
        elif article == 'personalPronoun':
            self.append_word(self.lexicon.personal_pronouns.random_word(plural, self.used))
        else:
            raise ConfigurationError(f"unknown article kind {article!r}", 'noun.article')

        return plural


__all__ = ['SentenceBuilder']
