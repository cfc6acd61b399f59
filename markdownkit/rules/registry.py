"""Ordered rule registry.

Responsibilities:
- Hold built-in rules followed by plugin rule sets in registration order.
- Validate externally supplied rule sets before any rule is appended.
- Expose filtered views used by the line scanner and the normalizer.
"""

from __future__ import annotations

from collections.abc import Iterable

from .base import (
    AnyRule,
    ContextualRule,
    FirstLineRule,
    LineRule,
    MultiLineRule,
    RuleSet,
    coerce_rule_set,
)
from .defaults import DEFAULT_RULES


class RuleRegistry:
    """Ordered sequence of rules; order is precedence.

    No deduplication by name is performed: when two rules can match the same
    line, the one registered first wins the line pass.
    """

    def __init__(self, rules: Iterable[AnyRule] | None = None) -> None:
        """Initialize with custom built-in rules or the default rule sequence."""

        self._rules: list[AnyRule] = list(DEFAULT_RULES if rules is None else rules)
        self._rule_sets: list[RuleSet] = []

    def register(self, rule_set: object) -> RuleSet:
        """Append all rules of an externally supplied rule set.

        The whole set is validated first, so a malformed set leaves already
        registered rules untouched.

        Raises:
            ValidationError: If the set has no `rules` sequence or a rule is malformed.
        """

        coerced = coerce_rule_set(rule_set)
        self._rule_sets.append(coerced)
        self._rules.extend(coerced.rules)
        return coerced

    def all_rules(self) -> tuple[AnyRule, ...]:
        """Return every rule, built-ins first, then registered sets in call order."""

        return tuple(self._rules)

    @property
    def rule_sets(self) -> tuple[RuleSet, ...]:
        """Return registered plugin rule sets in registration order."""

        return tuple(self._rule_sets)

    def first_line_rule(self) -> FirstLineRule | None:
        """Return the earliest registered first-line rule, if any."""

        return next((rule for rule in self._rules if isinstance(rule, FirstLineRule)), None)

    def line_rules(
        self, *, include_structural: bool = True
    ) -> tuple[LineRule | ContextualRule, ...]:
        """Return per-line rules (plain and contextual) in registration order.

        With `include_structural=False`, rules flagged `structural` are left out.
        """

        return tuple(
            rule
            for rule in self._rules
            if isinstance(rule, (LineRule, ContextualRule))
            and (include_structural or not rule.structural)
        )

    def multi_line_rules(self) -> tuple[MultiLineRule, ...]:
        """Return document-wide rules in registration order."""

        return tuple(rule for rule in self._rules if isinstance(rule, MultiLineRule))

    def __len__(self) -> int:
        """Return the number of registered rules."""

        return len(self._rules)
