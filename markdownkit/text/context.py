"""Per-document scanning state.

`ProcessingContext` lives for one document's line pass and is never reused.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re

FENCE_DELIMITER = "```"

_LIST_MARKER_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s")
_BOLD_LABEL_ONLY_RE = re.compile(r"^\*\*[^*]+(?::\*\*|\*\*:)\s*$")


def is_fence_delimiter(line: str) -> bool:
    """Return whether a line opens or closes a fenced code block."""

    return line.strip().startswith(FENCE_DELIMITER)


def is_list_item(line: str) -> bool:
    """Return whether a line already starts with a list marker."""

    return bool(_LIST_MARKER_RE.match(line))


@dataclass(slots=True)
class ProcessingContext:
    """Transient state for one document's line pass.

    Attributes:
        inside_code_block: Whether the scan is between fence delimiters.
        first_line_open: Whether the first non-empty line slot is still unused.
        previous_emitted_blank: Whether the last emitted line was blank.
        emitted: Output lines emitted so far.
    """

    inside_code_block: bool = False
    first_line_open: bool = True
    previous_emitted_blank: bool = False
    emitted: list[str] = field(default_factory=list)

    @property
    def previous_line(self) -> str:
        """Return the most recently emitted line, or an empty string."""

        return self.emitted[-1] if self.emitted else ""

    @property
    def previous_previous_line(self) -> str:
        """Return the line emitted before `previous_line`, or an empty string."""

        return self.emitted[-2] if len(self.emitted) > 1 else ""

    def toggle_code_block(self) -> None:
        """Flip code-block state on a fence delimiter."""

        self.inside_code_block = not self.inside_code_block

    def consume_first_line(self) -> None:
        """Mark the first non-empty line slot as used."""

        self.first_line_open = False

    def emit(self, line: str) -> None:
        """Append one output line and track blank-line state."""

        self.emitted.append(line)
        self.previous_emitted_blank = not line.strip()

    def in_list_context(self) -> bool:
        """Return whether the next line continues a list introduced by earlier output.

        True when the previous emitted line ends with `:`, is a bare bold label
        such as `**Steps:**`, or is itself a list item, or when the line two
        back ends with `:` and the previous line is a list item.
        """

        previous = self.previous_line.rstrip()
        if previous:
            if previous.endswith(":"):
                return True
            if _BOLD_LABEL_ONLY_RE.match(previous.strip()):
                return True
            if is_list_item(previous):
                return True
        before_previous = self.previous_previous_line.rstrip()
        return bool(before_previous.endswith(":") and is_list_item(previous))

    def text(self) -> str:
        """Join emitted lines into document text."""

        return "\n".join(self.emitted)
