"""Rule descriptor variants and the rule-set container.

Responsibilities:
- Represent each text transformation as an immutable, tagged rule variant.
- Dispatch every variant through one `try_apply` interface.
- Coerce plain descriptor mappings from plugins into rule variants.

Key types:
- `LineRule`: replaces the matched span of a single line.
- `FirstLineRule`: applied only to the first non-empty line of a document.
- `ContextualRule`: a line rule that only fires inside list context.
- `MultiLineRule`: applied once over the joined document, replacing all matches.
- `RuleSet`: a named ordered collection of rules supplied by a plugin.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
import re
from typing import Union

from ..errors import ValidationError

Transform = Callable[[re.Match[str]], str]

_HEADING_RE = re.compile(r"^#{1,6}\s")


def _replace_span(line: str, match: re.Match[str], transform: Transform) -> str:
    """Replace the matched span of `line` with the transform output."""

    return f"{line[:match.start()]}{transform(match)}{line[match.end():]}"


@dataclass(frozen=True, slots=True)
class LineRule:
    """Single-line rule; the first match in a line is replaced by the transform output.

    Rules flagged `structural` emit headings, lists, or labels. The structure
    detector has its own rules for those shapes and skips them.
    """

    name: str
    pattern: re.Pattern[str]
    transform: Transform
    description: str = ""
    skip_if_already_converted: bool = False
    structural: bool = False

    def try_apply(self, text: str) -> str | None:
        """Apply the rule to one line."""

        if self.skip_if_already_converted and _HEADING_RE.match(text):
            return None
        match = self.pattern.search(text)
        if match is None:
            return None
        return _replace_span(text, match, self.transform)


@dataclass(frozen=True, slots=True)
class FirstLineRule:
    """Rule applied only to the first non-empty line of a document."""

    name: str
    pattern: re.Pattern[str]
    transform: Transform
    description: str = ""

    def try_apply(self, text: str) -> str | None:
        """Apply the rule to the first non-empty line."""

        match = self.pattern.search(text)
        if match is None:
            return None
        return _replace_span(text, match, self.transform)


@dataclass(frozen=True, slots=True)
class ContextualRule:
    """Line rule gated by list context (a preceding colon line or list item)."""

    name: str
    pattern: re.Pattern[str]
    transform: Transform
    description: str = ""
    structural: bool = False

    def try_apply(self, text: str) -> str | None:
        """Apply the rule to one line already known to be in list context."""

        match = self.pattern.search(text)
        if match is None:
            return None
        return _replace_span(text, match, self.transform)


@dataclass(frozen=True, slots=True)
class MultiLineRule:
    """Document-wide rule replacing every match in the joined text."""

    name: str
    pattern: re.Pattern[str]
    transform: Transform
    description: str = ""

    def try_apply(self, text: str) -> str | None:
        """Apply the rule to the whole document."""

        if self.pattern.search(text) is None:
            return None
        return self.pattern.sub(self.transform, text)


AnyRule = Union[LineRule, FirstLineRule, ContextualRule, MultiLineRule]
RULE_TYPES = (LineRule, FirstLineRule, ContextualRule, MultiLineRule)


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Named ordered collection of rules, as supplied by a plugin."""

    name: str
    rules: tuple[AnyRule, ...] = field(default_factory=tuple)
    description: str = ""


def _compile_pattern(value: object, index: int) -> re.Pattern[str]:
    """Return a compiled pattern from a string or an already compiled pattern."""

    if isinstance(value, re.Pattern):
        return value
    if isinstance(value, str):
        try:
            return re.compile(value)
        except re.error as exc:
            raise ValidationError(f"rule {index} has an invalid pattern: {exc}") from exc
    raise ValidationError(f"rule {index} must provide a `pattern` string or compiled pattern")


def rule_from_descriptor(descriptor: object, index: int = 0) -> AnyRule:
    """Coerce one rule descriptor into a rule variant.

    A descriptor is either an existing rule variant or a mapping with `name`,
    `pattern`, and `transform` keys plus optional flags `is_first_line`,
    `is_multi_line`, `context_check`, `skip_if_already_converted`, and
    `structural`.

    Raises:
        ValidationError: If the descriptor does not have the expected shape.
    """

    if isinstance(descriptor, RULE_TYPES):
        return descriptor
    if not isinstance(descriptor, Mapping):
        raise ValidationError(f"rule {index} must be a rule descriptor mapping")

    name = descriptor.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"rule {index} must provide a non-empty `name`")
    transform = descriptor.get("transform")
    if not callable(transform):
        raise ValidationError(f"rule {index} (`{name}`) must provide a callable `transform`")
    pattern = _compile_pattern(descriptor.get("pattern"), index)
    description = str(descriptor.get("description", ""))

    if descriptor.get("is_multi_line"):
        return MultiLineRule(name, pattern, transform, description)
    if descriptor.get("is_first_line"):
        return FirstLineRule(name, pattern, transform, description)
    if descriptor.get("context_check"):
        return ContextualRule(
            name,
            pattern,
            transform,
            description,
            structural=bool(descriptor.get("structural", False)),
        )
    return LineRule(
        name,
        pattern,
        transform,
        description,
        skip_if_already_converted=bool(descriptor.get("skip_if_already_converted", False)),
        structural=bool(descriptor.get("structural", False)),
    )


def coerce_rule_set(candidate: object) -> RuleSet:
    """Validate a supplied rule set and return it as a `RuleSet`.

    Accepted shapes are a `RuleSet`, a mapping with a `rules` key, or any
    object (such as an imported module) exposing a `rules` attribute.

    Raises:
        ValidationError: If no `rules` sequence is present or an element is malformed.
    """

    if isinstance(candidate, RuleSet):
        return candidate

    if isinstance(candidate, Mapping):
        rules = candidate.get("rules")
        name = candidate.get("name")
        description = candidate.get("description", "")
    else:
        rules = getattr(candidate, "rules", None)
        name = getattr(candidate, "name", None) or getattr(candidate, "__name__", None)
        description = getattr(candidate, "description", "")

    if not isinstance(rules, Sequence) or isinstance(rules, (str, bytes)):
        raise ValidationError("rule set must provide a rules sequence")

    coerced = tuple(rule_from_descriptor(rule, index) for index, rule in enumerate(rules))
    return RuleSet(
        name=str(name) if name else "plugin",
        rules=coerced,
        description=str(description or ""),
    )
