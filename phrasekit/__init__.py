#!/usr/bin/env python3
"""
PhraseKit - Readable Passphrase Generator
=========================================

Generates grammatical, nonsensical English sentences to use as memorable
passphrases, and computes how many bits of entropy a given template (and
mutator) yields.

Quick Start
-----------
    from phrasekit import PhraseKit

    kit = PhraseKit()

    # One phrase from the default template collection
    phrase = kit.generate()

    # A specific template, with digits and capitals added
    phrase = kit.generate('strong', mutator='standard')

    # Strength of that combination
    bits = kit.entropy_of('strong', mutator='standard')

Modules
-------
    phrasekit.randomness - Swappable randomness source
    phrasekit.factors    - Weighted factor model
    phrasekit.words      - Tagged words and word pools
    phrasekit.templates  - Clauses, templates, template registry
    phrasekit.sentence   - Sentence assembly
    phrasekit.mutator    - Case and digit mutation
    phrasekit.entropy    - Entropy calculator
    phrasekit.lexicon    - Bundled word lists, templates and mutator presets

CLI Usage
---------
    python -m phrasekit generate -n 5 --template strong
    python -m phrasekit entropy strong --mutator standard
    python -m phrasekit templates
"""

__version__ = "0.1.0"
__author__ = "PhraseKit"

import logging
from typing import Dict, List, Optional

from .config import GeneratorConfig
from .entropy import entropy_of as _entropy_of
from .errors import ConfigurationError, ExhaustionError, PhraseKitError
from .factors import FactorSet, entropy_bits, evaluate, probability_of
from .lexicon import load_lexicon, load_mutators, load_templates
from .mutator import Mutator, MutatorRef, MutatorRegistry, MutatorSpec
from . import randomness
from .randomness import (
    get_randomness,
    reset_randomness,
    seeded_randomness,
    set_randomness,
)
from .sentence import SentenceBuilder
from .templates import SentenceTemplate, TemplateRef, TemplateRegistry, parse_template
from .words import Lexicon, TaggedWord

logger = logging.getLogger(__name__)


# =============================================================================
# Main Interface
# =============================================================================

class PhraseKit:
    """
    Main interface for passphrase generation and strength estimation.

    The lexicon and both registries belong to this instance. By default they
    are loaded from the bundled YAML files; pass your own to share them
    between instances or to use custom word lists.

    Examples
    --------
        >>> kit = PhraseKit()
        >>> kit.generate('normal')
        'the dusty walrus watched an elegant otter'

        >>> kit.entropy_of('normal') > 0
        True

    Custom templates:

        >>> registry = TemplateRegistry()
        >>> registry.register('short', [['noun', 1, 0, 0, 0, 1, 0, 0, 0,
        ...                              False, False, False, True]])
        >>> PhraseKit(templates=registry).generate('short')
    """

    def __init__(self,
                 config: Optional[GeneratorConfig] = None,
                 lexicon: Optional[Lexicon] = None,
                 templates: Optional[TemplateRegistry] = None,
                 mutators: Optional[MutatorRegistry] = None):
        """
        Parameters
        ----------
        config : GeneratorConfig, optional
            Defaults and data file locations. Read from configs/app.yaml
            when omitted.
        lexicon : Lexicon, optional
            Word pools. Loaded from config.words_path when omitted.
        templates : TemplateRegistry, optional
            Named templates and collections.
        mutators : MutatorRegistry, optional
            Named mutator presets.
        """
        self.config = config or GeneratorConfig()
        self.lexicon = lexicon if lexicon is not None else load_lexicon(self.config.words_path)
        self.template_registry = (templates if templates is not None
                                  else load_templates(self.config.templates_path))
        self.mutator_registry = (mutators if mutators is not None
                                 else load_mutators(self.config.mutators_path))

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def _resolve_mutator(self, mutator: MutatorRef) -> Optional[Mutator]:
        if mutator is None:
            mutator = self.config.default_mutator
        if mutator is None or mutator is False or mutator == 'none':
            return None
        resolved = self.mutator_registry.resolve(mutator)
        logger.debug(f"Using mutator {resolved!r}")
        return resolved

    def build(self, template: Optional[TemplateRef] = None) -> List[TaggedWord]:
        """
        Assemble one sentence and return its tagged words (no mutation).

        Raises
        ------
        ConfigurationError
            Unknown template name or malformed template.
        ExhaustionError
            A word pool could not supply an unused word.
        """
        resolved = self.template_registry.resolve(template or self.config.default_template)
        builder = SentenceBuilder(self.lexicon)
        return builder.add_template(resolved)

    def generate(self, template: Optional[TemplateRef] = None,
                 mutator: MutatorRef = None,
                 retries: Optional[int] = None) -> str:
        """
        Generate one passphrase.

        Parameters
        ----------
        template : str, SentenceTemplate or list, optional
            Template or collection name, a parsed template, or a raw clause
            list. Defaults to config.default_template.
        mutator : str, dict or Mutator, optional
            Preset name or {'upper': ..., 'numbers': ...}. Defaults to
            config.default_mutator; 'none' disables mutation.
        retries : int, optional
            How many times to start over with a fresh session after an
            ExhaustionError. Defaults to config.retries (0).

        Returns
        -------
        str
            The finished phrase.
        """
        resolved_mutator = self._resolve_mutator(mutator)
        retries = self.config.retries if retries is None else retries

        attempt = 0
        while True:
            try:
                words = self.build(template)
                break
            except ExhaustionError as e:
                if attempt >= retries:
                    raise
                attempt += 1
                logger.debug(f"Retrying generation ({attempt}/{retries}): {e}")

        phrase = ' '.join(word.value for word in words)
        if resolved_mutator is not None:
            phrase = resolved_mutator.mutate(phrase)
        return phrase

    def generate_many(self, count: Optional[int] = None,
                      template: Optional[TemplateRef] = None,
                      mutator: MutatorRef = None,
                      retries: Optional[int] = None) -> List[str]:
        """Generate `count` independent phrases (default: config.count)."""
        count = self.config.count if count is None else count
        return [self.generate(template, mutator, retries) for _ in range(count)]

    # -------------------------------------------------------------------------
    # Strength
    # -------------------------------------------------------------------------

    def entropy_of(self, template: Optional[TemplateRef] = None,
                   mutator: MutatorRef = None) -> float:
        """Bits of entropy for a template (or collection) and optional mutator."""
        return _entropy_of(
            template or self.config.default_template,
            self.template_registry,
            self.lexicon,
            self._resolve_mutator(mutator),
        )

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def templates(self) -> List[str]:
        """Names of registered templates and collections."""
        return self.template_registry.names()

    def mutators(self) -> List[str]:
        """Names of registered mutator presets."""
        return self.mutator_registry.names()

    def word_counts(self) -> Dict[str, int]:
        """Size of every word pool."""
        return self.lexicon.sizes()


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    '__version__',
    # Main interface
    'PhraseKit',
    'GeneratorConfig',
    # Errors
    'PhraseKitError',
    'ConfigurationError',
    'ExhaustionError',
    # Randomness (phrasekit.randomness is the port module)
    'randomness',
    'set_randomness',
    'get_randomness',
    'reset_randomness',
    'seeded_randomness',
    # Model
    'FactorSet',
    'evaluate',
    'probability_of',
    'entropy_bits',
    'Lexicon',
    'TaggedWord',
    'SentenceTemplate',
    'TemplateRegistry',
    'parse_template',
    'SentenceBuilder',
    'Mutator',
    'MutatorSpec',
    'MutatorRegistry',
    # Data
    'load_lexicon',
    'load_templates',
    'load_mutators',
]
