"""
Tests for Sentence Assembly
===========================
Tests for SentenceBuilder in phrasekit/sentence.py: agreement, articles,
numerals and the bundled templates end to end.

Scripted draws follow the engine's order: for a verb clause the
intransitive factor, transitivity, tense, adverb side, then words; for a
noun clause the subtype, article kind, numeral, then words.
"""

import pytest

from phrasekit.errors import ConfigurationError, ExhaustionError
from phrasekit.factors import FactorSet
from phrasekit.sentence import SentenceBuilder
from phrasekit.templates import parse_clause, parse_template
from phrasekit.words import Lexicon, TaggedWord

# [noun, common, proper, fromAdjective, none, definite, indefinite, demonstrative,
#  personalPronoun, adjective, preposition, number, singular]
SINGULAR_THE = ['noun', 1, 0, 0, 0, 1, 0, 0, 0, False, False, False, True]
PLURAL_THE = ['noun', 1, 0, 0, 0, 1, 0, 0, 0, False, False, False, False]
SINGULAR_A = ['noun', 1, 0, 0, 0, 0, 1, 0, 0, False, False, False, True]
PROPER = ['noun', 0, 1, 0, 0, 1, 0, 0, 0, False, False, False, True]
# [verb, present, past, future, continuous, continuousPast, perfect, subjunctive,
#  adverb, interrogative, noNounClause, preposition]
PRESENT = ['verb', 1, 0, 0, 0, 0, 0, 0, False, False, 0, 0]


def build(lexicon, clauses):
    builder = SentenceBuilder(lexicon)
    builder.add_template(parse_template(clauses))
    return builder


def verb_of(builder):
    return next(w for w in builder.words if w.has_tags('verb'))


class TestAgreement:
    """Subject-verb agreement."""

    def test_singular_subject(self, kit):
        """Test a singular subject takes a singular verb."""
        for _ in range(50):
            builder = build(kit.lexicon, [SINGULAR_THE, PRESENT])
            assert verb_of(builder).has_tags('present', 'singular')

    def test_plural_subject(self, kit):
        """Test a plural subject takes a plural verb."""
        for _ in range(50):
            builder = build(kit.lexicon, [PLURAL_THE, PRESENT])
            assert verb_of(builder).has_tags('present', 'plural')

    def test_first_noun_decides(self, kit):
        """Test the first noun sets agreement."""
        for _ in range(50):
            builder = build(kit.lexicon, [PLURAL_THE, SINGULAR_THE, PRESENT])
            assert verb_of(builder).has_tags('plural')

    def test_speech_verb_resets_subject(self, kit):
        """Test a speech verb starts a new subject."""
        for _ in range(50):
            builder = build(kit.lexicon, [PLURAL_THE, 'directSpeech', SINGULAR_THE, PRESENT])
            assert verb_of(builder).has_tags('singular')

    def test_no_noun_defaults_to_singular(self, kit):
        """Test a verb with no subject is singular."""
        builder = build(kit.lexicon, [PRESENT])
        assert verb_of(builder).has_tags('singular')

    def test_indefinite_pronoun_fallback(self, small_lexicon):
        """Test an indefinite pronoun can be the subject."""
        builder = SentenceBuilder(small_lexicon)
        builder.append_word(TaggedWord('ones', frozenset({'indefinitePronoun', 'plural'})))
        builder.add_verb(parse_clause(PRESENT).factors)
        assert verb_of(builder).has_tags('plural')


class TestInterrogative:
    """Interrogative mood."""

    def test_inserted_at_start_and_forces_plural(self, kit):
        """Test the interrogative leads and forces the plural verb form."""
        question = ['verb', 0, 1, 0, 0, 0, 0, 0, False, True, 0, 0]
        for _ in range(50):
            builder = build(kit.lexicon, [SINGULAR_THE, question, SINGULAR_THE])
            assert builder.words[0].has_tags('interrogative')
            assert verb_of(builder).has_tags('presentPlural')

    def test_inserted_after_speech_verb(self, kit):
        """Test the interrogative follows a speech verb."""
        question = ['verb', 1, 0, 0, 0, 0, 0, 0, False, True, 0, 0]
        builder = build(kit.lexicon, [PROPER, 'directSpeech', SINGULAR_THE, question])
        assert builder.words[0].has_tags('properNoun')
        assert builder.words[1].has_tags('speechVerb')
        assert builder.words[2].has_tags('interrogative')


class TestVerbOptions:
    """Adverbs and intransitive realizations."""

    def test_adverb_before(self, small_lexicon, scripted):
        """Test an adverb placed before the verb."""
        with_adverb = ['verb', 1, 0, 0, 0, 0, 0, 0, True, False, 0, 0]
        # tense, side (>= 1: before), adverb, verb ('chases' is first of
        # 'chases', 'is chasing', 'greets', ...)
        scripted(0.5, 1.5, 0.0, 0.0)
        assert build(small_lexicon, [with_adverb]).render() == 'slowly chases'

    def test_adverb_after(self, small_lexicon, scripted):
        """Test an adverb placed after the verb."""
        with_adverb = ['verb', 1, 0, 0, 0, 0, 0, 0, True, False, 0, 0]
        # tense, side (< 1: after), verb, adverb
        scripted(0.5, 0.5, 0.0, 1.0)
        assert build(small_lexicon, [with_adverb]).render() == 'chases boldly'

    def test_drop_object_ends_sentence(self, small_lexicon, scripted):
        """Test an intransitive verb with no object ends the sentence."""
        drop = ['verb', 1, 0, 0, 0, 0, 0, 0, False, False, 1, 0]
        # realization, transitivity (4 vs 4: 4.5 is intransitive), tense, verb
        scripted(0.5, 4.5, 0.5, 0.0)
        assert build(small_lexicon, [drop, SINGULAR_THE]).render() == 'sleeps'

    def test_trailing_preposition(self, small_lexicon, scripted):
        """Test an intransitive verb with a trailing preposition."""
        prep = ['verb', 1, 0, 0, 0, 0, 0, 0, False, False, 0, 1]
        scripted(0.5, 4.5, 0.5, 2.0, 1.0)
        assert build(small_lexicon, [prep]).render() == 'jumps under'

    def test_transitive_keeps_object(self, small_lexicon, scripted):
        """Test a transitive verb keeps its object."""
        drop = ['verb', 1, 0, 0, 0, 0, 0, 0, False, False, 1, 0]
        # verb: realization, transitive, tense, word; noun: subtype, article, word
        scripted(0.5, 1.0, 0.5, 0.0, 0.5, 0.5, 0.0)
        assert build(small_lexicon, [drop, SINGULAR_THE]).render() == 'chases the cat'


class TestNounPhrases:
    """Articles, numerals and the a/an fixup."""

    def test_vowel_fixup(self, small_words):
        """Test 'a' becomes 'an' before a vowel."""
        small_words['nouns'] = ['apple', 'egg', 'owl', 'igloo', 'umbrella']
        lexicon = Lexicon.from_dict(small_words)
        for _ in range(200):
            assert build(lexicon, [SINGULAR_A]).render().startswith('an ')

    def test_vowel_fixup_uses_adjective(self, small_words):
        """Test the fixup looks at the adjective, not the noun."""
        small_words['nouns'] = ['cat']
        small_words['adjectives'] = ['orange', 'icy']
        lexicon = Lexicon.from_dict(small_words)
        with_adjective = list(SINGULAR_A)
        with_adjective[9] = True
        for _ in range(50):
            assert build(lexicon, [with_adjective]).render() in ('an orange cat', 'an icy cat')

    def test_consonant_keeps_a(self, small_words):
        """Test 'a' stays before a consonant."""
        small_words['nouns'] = ['cat', 'dog']
        lexicon = Lexicon.from_dict(small_words)
        for _ in range(50):
            assert build(lexicon, [SINGULAR_A]).render().startswith('a ')

    def test_plural_numeral(self, small_lexicon, scripted):
        """Test a numeral before a plural noun."""
        numbered = ['noun', 1, 0, 0, 1, 0, 0, 0, 0, False, False, True, False]
        # subtype, article kind ('none'), numeral (2 + 3), noun
        scripted(0.5, 0.5, 3.0, 0.0)
        assert build(small_lexicon, [numbered]).render() == '5 cats'

    def test_singular_numeral(self, small_lexicon):
        """Test a certain singular noun can take '1'."""
        numbered = ['noun', 1, 0, 0, 0, 1, 0, 0, 0, False, False, True, True]
        words = build(small_lexicon, [numbered]).words
        assert [w.value for w in words][:2] == ['the', '1']
        assert words[1].has_tags('requiresSingularNoun')

    def test_no_numeral_after_indefinite(self, small_lexicon):
        """Test no numeral follows an indefinite article."""
        numbered = ['noun', 1, 0, 0, 0, 0, 1, 0, 0, False, False, True, True]
        words = build(small_lexicon, [numbered]).words
        assert not any(w.has_tags('number') for w in words)

    def test_uncertain_singular_gets_no_one(self, small_lexicon):
        """Test '1' only appears for a certain singular."""
        numbered = ['noun', 1, 0, 0, 0, 1, 0, 0, 0, False, False, True, [1, 1]]
        for _ in range(50):
            for word in build(small_lexicon, [numbered]).words:
                if word.has_tags('number'):
                    assert word.value != '1'

    def test_preposition_not_doubled(self, small_lexicon):
        """Test no second preposition after one."""
        with_preposition = ['noun', 1, 0, 0, 0, 1, 0, 0, 0, False, True, False, True]
        builder = SentenceBuilder(small_lexicon)
        builder.append_word(small_lexicon.prepositions.random_word())
        builder.add_clause(parse_clause(with_preposition))
        assert sum(1 for w in builder.words if w.has_tags('preposition')) == 1
        assert [w.value for w in builder.words][1] == 'the'

    def test_noun_from_adjective(self, small_lexicon):
        """Test 'the adjective one/thing' nouns."""
        from_adjective = ['noun', 0, 0, 1, 0, 1, 0, 0, 0, False, False, False, True]
        words = build(small_lexicon, [from_adjective]).words
        assert words[0].value == 'the'
        assert words[1].has_tags('adjective')
        assert words[2].value in ('one', 'thing')

    def test_demonstrative_and_pronoun(self, small_lexicon):
        """Test demonstrative and personal pronoun articles."""
        demonstrative = ['noun', 1, 0, 0, 0, 0, 0, 1, 0, False, False, False, False]
        pronoun = ['noun', 1, 0, 0, 0, 0, 0, 0, 1, False, False, False, True]
        for _ in range(20):
            assert build(small_lexicon, [demonstrative]).words[0].value in ('these', 'those')
            assert build(small_lexicon, [pronoun]).words[0].value in ('my', 'your')


class TestSessionState:
    """Per-generation state and errors."""

    def test_used_words_tracked(self, kit):
        """Test every emitted word is marked used."""
        builder = build(kit.lexicon, [SINGULAR_THE, PRESENT, SINGULAR_THE])
        assert builder.used == {w.value for w in builder.words}

    def test_no_repeated_nouns(self, small_words):
        """Test a noun is not repeated in one phrase."""
        small_words['nouns'] = ['cat', 'dog']
        lexicon = Lexicon.from_dict(small_words)
        for _ in range(50):
            words = build(lexicon, [SINGULAR_THE, 'conjunction', SINGULAR_THE]).words
            nouns = [w.value for w in words if w.has_tags('noun')]
            assert sorted(nouns) == ['cat', 'dog']

    def test_exhaustion_surfaces(self, small_words):
        """Test pool exhaustion raises ExhaustionError."""
        small_words['properNouns'] = ['Ada']
        lexicon = Lexicon.from_dict(small_words)
        with pytest.raises(ExhaustionError) as exc:
            build(lexicon, [PROPER, 'conjunction', PROPER])
        assert exc.value.category == 'properNoun'

    def test_unknown_article_kind(self, small_lexicon):
        """Test an unknown article kind is a configuration error."""
        builder = SentenceBuilder(small_lexicon)
        with pytest.raises(ConfigurationError):
            builder.add_noun_prelude(FactorSet({'singular': True, 'articleSingular': 'some'}))


class TestBundledTemplates:
    """End-to-end generation with the bundled data."""

    def test_ten_thousand_generations(self, kit):
        """Test every bundled template generates cleanly."""
        names = [n for n in kit.templates() if not kit.template_registry.is_collection(n)]
        for i in range(10_000):
            phrase = kit.generate(names[i % len(names)])
            assert phrase
            assert '  ' not in phrase

    def test_collections(self, kit):
        """Test every bundled collection generates."""
        for name in ('random', 'randomShort', 'randomLong', 'randomForever'):
            for _ in range(100):
                assert kit.generate(name)

    def test_never_a_before_vowel(self, kit):
        """Test no 'a' is followed by a vowel."""
        vowels = tuple('aeiou')
        for _ in range(2000):
            words = kit.generate('normal').split()
            for article, following in zip(words, words[1:]):
                if article == 'a':
                    assert not following.lower().startswith(vowels)
