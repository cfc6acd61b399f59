"""Document-wide layout normalization.

Responsibilities:
- Apply multi-line registry rules over the joined document.
- Collapse blank-line runs, space headings, strip line tails, and end the
  document with exactly one newline.
- Optionally split long prose lines at sentence boundaries.

Every step is idempotent, so normalizing normalized text is a no-op.
"""

from __future__ import annotations

from collections.abc import Sequence
import re

from ..rules.base import MultiLineRule
from .context import is_fence_delimiter


class MultiLineNormalizer:
    """Second pass over the joined text produced by the line passes."""

    _BLANK_RUN_RE = re.compile(r"\n(?:[ \t]*\n){2,}")
    _HEADING_RE = re.compile(r"^#{1,6}\s")
    _SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")
    _NO_BREAK_PREFIXES = ("#", "-", "*", ">", "```")

    def __init__(
        self,
        multi_line_rules: Sequence[MultiLineRule] = (),
        *,
        semantic_breaks: bool = False,
        wrap_width: int = 88,
    ) -> None:
        """Initialize with document-wide rules and semantic break settings."""

        self._multi_line_rules = tuple(multi_line_rules)
        self._semantic_breaks = semantic_breaks
        self._wrap_width = wrap_width

    def normalize(self, text: str) -> str:
        """Run every normalization step in order and return the final document."""

        result = self.apply_multi_line_rules(text)
        result = self.collapse_blank_lines(result)
        result = self.space_headings(result)
        result = self.strip_trailing_whitespace(result)
        if self._semantic_breaks:
            result = self.apply_semantic_breaks(result)
        return self.finalize(result)

    def apply_multi_line_rules(self, text: str) -> str:
        """Apply each multi-line rule to the whole document, in registration order."""

        for rule in self._multi_line_rules:
            converted = rule.try_apply(text)
            if converted is not None:
                text = converted
        return text

    def collapse_blank_lines(self, text: str) -> str:
        """Collapse three or more consecutive newlines to exactly two."""

        return self._BLANK_RUN_RE.sub("\n\n", text)

    def space_headings(self, text: str) -> str:
        """Insert one blank line before and after headings outside fenced code.

        Adjacent headings stay adjacent.
        """

        spaced: list[str] = []
        inside_code_block = False
        previous_was_heading = False
        for line in text.split("\n"):
            is_blank = not line.strip()
            is_heading = not inside_code_block and bool(self._HEADING_RE.match(line))

            if spaced and not is_blank:
                previous_blank = not spaced[-1].strip()
                if is_heading and not previous_blank and not previous_was_heading:
                    spaced.append("")
                elif previous_was_heading and not is_heading:
                    spaced.append("")

            spaced.append(line)
            if is_fence_delimiter(line):
                inside_code_block = not inside_code_block
            previous_was_heading = is_heading
        return "\n".join(spaced)

    @staticmethod
    def strip_trailing_whitespace(text: str) -> str:
        """Strip trailing whitespace from every line."""

        return "\n".join(line.rstrip() for line in text.split("\n"))

    def apply_semantic_breaks(self, text: str) -> str:
        """Split long prose lines at sentence boundaries, packing up to `wrap_width`."""

        result: list[str] = []
        inside_code_block = False
        for line in text.split("\n"):
            stripped = line.strip()
            if is_fence_delimiter(line):
                inside_code_block = not inside_code_block
                result.append(line)
                continue
            if (
                inside_code_block
                or stripped.startswith(self._NO_BREAK_PREFIXES)
                or len(stripped) < self._wrap_width
            ):
                result.append(line)
                continue
            result.extend(self._wrap_sentences(line))
        return "\n".join(result)

    def _wrap_sentences(self, line: str) -> list[str]:
        """Pack sentence fragments of one line into lines no wider than `wrap_width`."""

        wrapped: list[str] = []
        current = ""
        for sentence in self._SENTENCE_BOUNDARY_RE.split(line.strip()):
            candidate = f"{current} {sentence}" if current else sentence
            if current and len(candidate) > self._wrap_width:
                wrapped.append(current)
                current = sentence
            else:
                current = candidate
        if current:
            wrapped.append(current)
        return wrapped

    @staticmethod
    def finalize(text: str) -> str:
        """Trim leading/trailing blank lines and end with exactly one newline."""

        lines = text.split("\n")
        start = 0
        while start < len(lines) and not lines[start].strip():
            start += 1
        end = len(lines)
        while end > start and not lines[end - 1].strip():
            end -= 1
        return "\n".join(lines[start:end]) + "\n"
