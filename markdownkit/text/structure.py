"""Structure detection for loosely formatted notes.

Responsibilities:
- Convert folder-path lines, the first line, indented lines, and `Key: value`
  lines into markdown structure, in that fixed precedence order.
- Fall through to the non-structural registry line rules for everything else.
- Collapse runs of blank lines while leaving fenced code untouched.
"""

from __future__ import annotations

import re

from ..config import ProcessingOptions
from .cleaners import capitalize_first_word
from .context import ProcessingContext, is_fence_delimiter, is_list_item
from .scanner import LineScanner


class StructureDetector:
    """Line-context classifier layered on top of `LineScanner`."""

    _INDENTED_RE = re.compile(r"^(\s{2,})(\S.*)$")
    _LABEL_RE = re.compile(r"^([A-Z][a-zA-Z\s]+):\s+(.+)$")
    _FOLDER_SPLIT_RE = re.compile(r"[-_]")

    def __init__(self, options: ProcessingOptions, scanner: LineScanner) -> None:
        """Initialize with immutable options and a scanner built without structural rules."""

        self._options = options
        self._scanner = scanner

    def detect(self, text: str) -> str:
        """Convert raw text into structured markdown lines."""

        context = ProcessingContext()
        for line in text.split("\n"):
            stripped = line.strip()

            if is_fence_delimiter(line):
                context.toggle_code_block()
                context.emit(line)
                continue

            if context.inside_code_block and self._options.preserve_code_blocks:
                context.emit(line)
                continue

            if not stripped:
                if self._options.collapse_blank_lines and context.previous_emitted_blank:
                    continue
                context.emit("")
                continue

            for emitted in self._classify(line, stripped, context):
                context.emit(emitted)
        return context.text()

    def _classify(self, line: str, stripped: str, context: ProcessingContext) -> list[str]:
        """Return output lines for one non-blank, non-code line."""

        options = self._options

        if options.detect_folders and self._is_folder_line(stripped):
            context.consume_first_line()
            heading = "#" * options.header_level
            return [f"{heading} {self.format_folder_name(stripped[:-1])}", ""]

        if context.first_line_open:
            context.consume_first_line()
            if options.first_line_title and not stripped.startswith("#"):
                return [f"# {stripped}", ""]

        if options.detect_lists:
            indented = self._INDENTED_RE.match(line)
            if indented and not is_list_item(stripped):
                indent_level = len(indented.group(1)) // 2
                prefix = "  " * max(0, indent_level - 1)
                return [f"{prefix}- {indented.group(2)}"]

        if options.detect_labels and not stripped.startswith("**"):
            # Keys match in the capitalized form that cleanup produces.
            candidate = stripped
            if options.capitalize_sentences:
                candidate = capitalize_first_word(stripped)
            label = self._LABEL_RE.match(candidate)
            if label:
                return [f"**{label.group(1)}:** {label.group(2)}"]

        return [self._scanner.apply_line_rules(line, context)]

    @staticmethod
    def _is_folder_line(stripped: str) -> bool:
        """Return whether a trimmed line looks like a folder path (`name/`)."""

        return len(stripped) > 1 and stripped.endswith("/") and " " not in stripped

    @classmethod
    def format_folder_name(cls, name: str) -> str:
        """Title-case a kebab or snake case folder name (`my-project` -> `My Project`)."""

        return " ".join(
            word[:1].upper() + word[1:].lower() for word in cls._FOLDER_SPLIT_RE.split(name)
        )
