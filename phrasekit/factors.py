#!/usr/bin/env python3
"""
Weighted Factor Model
=====================
A factor is one randomized decision inside a clause, declared as:

- a scalar (bool, str, number or None): fixed, zero entropy
- an odds pair (a, b): True with probability a / (a + b)
- a mapping {outcome: weight}: outcome chosen with weight / total

A mapping whose weights sum to zero is a valid "never happens" factor and
evaluates to False.

evaluate() draws from the randomness port. probability_of() and
entropy_bits() are pure and describe the same distribution analytically;
the entropy calculator relies on the two staying in agreement.
"""

import math
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ConfigurationError
from .randomness import randomness


# =============================================================================
# Parsing
# =============================================================================

def _is_weight(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def parse_factor(spec: Any, field: str = "factor") -> Any:
    """
    Validate a factor specification and return its normalized form.

    Lists become tuples, mappings become plain dicts (key order kept).

    Raises
    ------
    ConfigurationError
        If the spec has an unsupported shape or a negative weight.
    """
    if spec is None or isinstance(spec, (bool, str)) or _is_weight(spec):
        return spec

    if isinstance(spec, (list, tuple)):
        if len(spec) != 2:
            raise ConfigurationError(
                f"odds must have exactly 2 weights, got {len(spec)}", field)
        a, b = spec
        for weight in (a, b):
            if not _is_weight(weight):
                raise ConfigurationError(f"odds weight {weight!r} is not a number", field)
            if weight < 0:
                raise ConfigurationError(f"odds weight {weight!r} is negative", field)
        return (a, b)

    if isinstance(spec, Mapping):
        weights = {}
        for outcome, weight in spec.items():
            if weight is None:
                weight = 0
            if not _is_weight(weight):
                raise ConfigurationError(
                    f"weight for '{outcome}' is not a number: {weight!r}", field)
            if weight < 0:
                raise ConfigurationError(f"weight for '{outcome}' is negative", field)
            weights[str(outcome)] = weight
        return weights

    raise ConfigurationError(f"unsupported factor specification {spec!r}", field)


# =============================================================================
# Evaluation
# =============================================================================

def evaluate(spec: Any) -> Any:
    """Draw a concrete value for a (parsed) factor specification."""
    if isinstance(spec, tuple):
        a, b = spec
        total = a + b
        if total == 0:
            return False
        return randomness(total) <= a

    if isinstance(spec, dict):
        cumulative = []
        total = 0
        for outcome, weight in spec.items():
            total += weight
            cumulative.append((outcome, total))
        if total == 0:
            return False

        chosen = randomness(total)
        for outcome, upto in cumulative:
            if chosen < upto:
                return outcome
        return False

    return spec


def probability_of(spec: Any, value: Any) -> float:
    """
    Probability that evaluate(spec) yields value.

    With a boolean value, asks whether the factor comes out truthy (True)
    or falsy (False) rather than a specific outcome.
    """
    if isinstance(spec, tuple):
        a, b = spec
        total = a + b
        if total == 0:
            return 0.0 if value else 1.0
        return (a if value else b) / total

    if isinstance(spec, dict):
        total = sum(spec.values())
        if isinstance(value, bool):
            if total == 0:
                return 0.0 if value else 1.0
            return 1.0 if value else 0.0
        if total == 0:
            return 0.0
        return spec.get(value, 0) / total

    if isinstance(value, bool):
        return 1.0 if bool(spec) == value else 0.0
    return 1.0 if spec == value else 0.0


def entropy_bits(spec: Any) -> float:
    """Shannon entropy of a factor in bits. Scalars carry none."""
    if isinstance(spec, tuple):
        weights = spec
    elif isinstance(spec, dict):
        weights = tuple(spec.values())
    else:
        return 0.0

    total = sum(weights)
    if total == 0:
        return 0.0

    bits = 0.0
    for weight in weights:
        if weight:
            p = weight / total
            bits -= p * math.log2(p)
    return bits


def outcomes(spec: Any) -> List[Any]:
    """All values evaluate(spec) can produce (with nonzero probability or not)."""
    if isinstance(spec, tuple):
        return [True, False]
    if isinstance(spec, dict):
        return list(spec.keys())
    return [spec]


# =============================================================================
# Factor Sets
# =============================================================================

class FactorSet:
    """
    The named factors of one clause, e.g. {'adjective': (1, 2), ...}.

    Absent factors behave like None: falsy, zero entropy.
    """

    def __init__(self, factors: Optional[Mapping[str, Any]] = None, context: str = "clause"):
        self._factors: Dict[str, Any] = {}
        for name, spec in (factors or {}).items():
            self._factors[name] = parse_factor(spec, f"{context}.{name}")

    def __contains__(self, name: str) -> bool:
        return name in self._factors

    def __getitem__(self, name: str) -> Any:
        return self._factors.get(name)

    def items(self) -> List[Tuple[str, Any]]:
        return list(self._factors.items())

    def by_name(self, name: str) -> Any:
        """Evaluate the named factor."""
        return evaluate(self._factors.get(name))

    def chance_of(self, name: str, value: Any) -> float:
        return probability_of(self._factors.get(name), value)

    def entropy_of(self, name: str) -> float:
        return entropy_bits(self._factors.get(name))

    def must_be_true(self, name: str) -> bool:
        """True when the factor cannot come out falsy."""
        return self.chance_of(name, True) == 1

    def __repr__(self) -> str:
        return f"FactorSet({self._factors!r})"


__all__ = [
    "parse_factor",
    "evaluate",
    "probability_of",
    "entropy_bits",
    "outcomes",
    "FactorSet",
]
