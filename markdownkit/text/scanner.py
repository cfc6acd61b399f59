"""Code-fence-aware line scanner.

Responsibilities:
- Walk a document line by line, tracking fence state and the first-line slot.
- Apply at most one single-line rule per line, first match in registry order.
- Pass fenced code lines and fence delimiters through verbatim.
"""

from __future__ import annotations

from ..rules.base import ContextualRule, LineRule
from ..rules.registry import RuleRegistry
from .context import ProcessingContext, is_fence_delimiter, is_list_item


class LineScanner:
    """Apply registry line rules to a document, one rule per line at most."""

    def __init__(
        self,
        registry: RuleRegistry,
        preserve_code_blocks: bool = True,
        *,
        include_structural: bool = True,
    ) -> None:
        """Snapshot rule views from a registry that is read-only from here on."""

        self._first_line_rule = registry.first_line_rule()
        self._line_rules: tuple[LineRule | ContextualRule, ...] = registry.line_rules(
            include_structural=include_structural
        )
        self._preserve_code_blocks = preserve_code_blocks

    def scan(self, text: str) -> str:
        """Run the full line pass, including the registry's first-line rule."""

        context = ProcessingContext()
        for line in text.split("\n"):
            if is_fence_delimiter(line):
                context.toggle_code_block()
                context.emit(line)
                continue

            if context.inside_code_block and self._preserve_code_blocks:
                context.emit(line)
                continue

            if context.first_line_open and line.strip():
                context.consume_first_line()
                if self._first_line_rule is not None:
                    converted = self._first_line_rule.try_apply(line)
                    if converted is not None:
                        context.emit(converted)
                        continue

            context.emit(self.apply_line_rules(line, context))
        return context.text()

    def apply_line_rules(self, line: str, context: ProcessingContext) -> str:
        """Return the line transformed by the first matching rule, or unchanged.

        Contextual rules are skipped outside list context and for lines that
        are empty, already list items, or already bold-prefixed.
        """

        contextual_allowed = self._contextual_allowed(line, context)
        for rule in self._line_rules:
            if isinstance(rule, ContextualRule) and not contextual_allowed:
                continue
            converted = rule.try_apply(line)
            if converted is not None:
                return converted
        return line

    @staticmethod
    def _contextual_allowed(line: str, context: ProcessingContext) -> bool:
        """Return whether contextual rules may run for this line."""

        stripped = line.strip()
        if not stripped or is_list_item(stripped) or stripped.startswith("**"):
            return False
        return context.in_list_context()
