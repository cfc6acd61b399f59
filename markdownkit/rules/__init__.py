"""Rule descriptors, the ordered rule registry, and plugin discovery.

This package defines the regex rule variants applied by the line scanner and
the multi-line normalizer, the built-in default rule sequence, and helpers for
loading externally supplied rule sets.
"""

from .base import (
    AnyRule,
    ContextualRule,
    FirstLineRule,
    LineRule,
    MultiLineRule,
    RuleSet,
    coerce_rule_set,
    rule_from_descriptor,
)
from .defaults import DEFAULT_RULES
from .loader import load_rule_sets
from .registry import RuleRegistry
from .typography import TYPOGRAPHY_RULE_SET

__all__ = [
    "AnyRule",
    "ContextualRule",
    "DEFAULT_RULES",
    "FirstLineRule",
    "LineRule",
    "MultiLineRule",
    "RuleRegistry",
    "RuleSet",
    "TYPOGRAPHY_RULE_SET",
    "coerce_rule_set",
    "load_rule_sets",
    "rule_from_descriptor",
]
