"""Deterministic prose cleanup rules.

Responsibilities:
- Classify structural lines that prose cleanup must leave alone.
- Provide punctuation insertion, pronoun and capitalization fixes.
- Provide fence-aware smart typography (quotes, dashes, ellipsis).
- Provide the basic, segmentation-free cleanup used on the synchronous path.
"""

from __future__ import annotations

import re

from ..config import ProcessingOptions
from .context import is_fence_delimiter

_STRUCTURAL_PREFIXES = ("#", "-", "*", "+", ">", "|", "```")
_ORDERED_ITEM_RE = re.compile(r"^\d+[.)]\s")

SENTENCE_ENDINGS_RE = re.compile(r"[.!?:;…]$")
SKIP_PUNCTUATION_PATTERNS = (
    re.compile(r"^#+\s"),
    re.compile(r"^[-*+]\s"),
    re.compile(r"^\d+\.\s"),
    re.compile(r"^>\s"),
    re.compile(r"^```"),
    re.compile(r"^\|"),
    re.compile(r"^---$"),
    re.compile(r"^\s*$"),
    re.compile(r"\)$"),
    re.compile(r"[`\"'”’]$"),
)

PRONOUN_RE = re.compile(r"\bi\b")
_LEADING_OPENERS_RE = re.compile(r"^[\s\"'\u201c\u2018(\[]*")

_DOUBLE_QUOTE_RE = re.compile(r'"([^"\n]+)"')
_SINGLE_QUOTE_RE = re.compile(r"(^|[\s(\[{])'([^'\n]+)'(?=$|[\s.,;:!?)\]}])")
_APOSTROPHE_RE = re.compile(r"(\w)'(\w)")
_ELLIPSIS_RE = re.compile(r"\.\.\.")
_DASH_RE = re.compile(r"(?<!-)--(?!-)")


def is_structural_line(stripped: str) -> bool:
    """Return whether a trimmed line is a heading, list, quote, table, fence, or bold label."""

    if not stripped:
        return True
    if stripped.startswith(_STRUCTURAL_PREFIXES):
        return True
    return bool(_ORDERED_ITEM_RE.match(stripped))


def ensure_punctuation(text: str) -> str:
    """Append a period when a prose line lacks terminal punctuation."""

    if not text:
        return text
    if any(pattern.search(text) for pattern in SKIP_PUNCTUATION_PATTERNS):
        return text
    if SENTENCE_ENDINGS_RE.search(text):
        return text
    return f"{text}."


def capitalize_first_word(text: str) -> str:
    """Uppercase the first letter of the first word in `text`."""

    index = _LEADING_OPENERS_RE.match(text).end()
    if index >= len(text) or not text[index].islower():
        return text
    first = text[index]
    return f"{text[:index]}{first.upper()}{text[index + 1:]}"


def fix_pronouns(text: str) -> str:
    """Replace every standalone lowercase `i` with `I`."""

    return PRONOUN_RE.sub("I", text)


def smarten_quotes(text: str) -> str:
    """Convert straight double/single quotes and apostrophes to curly forms."""

    text = _DOUBLE_QUOTE_RE.sub("\u201c\\1\u201d", text)
    text = _SINGLE_QUOTE_RE.sub("\\1\u2018\\2\u2019", text)
    return _APOSTROPHE_RE.sub("\\1\u2019\\2", text)


def smarten_ellipsis(text: str) -> str:
    """Convert literal three-dot ellipses to the ellipsis character."""

    return _ELLIPSIS_RE.sub("\u2026", text)


def smarten_dashes(text: str) -> str:
    """Convert a double hyphen to an em dash, leaving `---` rules alone."""

    return _DASH_RE.sub("\u2014", text)


def apply_line_typography(
    text: str,
    *,
    quotes: bool,
    ellipsis: bool,
    dashes: bool,
) -> str:
    """Apply enabled smart typography transforms to one prose line."""

    if dashes:
        text = smarten_dashes(text)
    if ellipsis:
        text = smarten_ellipsis(text)
    if quotes:
        text = smarten_quotes(text)
    return text


class SmartTypography:
    """Fence-aware smart typography over a whole document."""

    def __init__(self, *, quotes: bool, ellipsis: bool, dashes: bool = False) -> None:
        """Initialize with the enabled typography transforms."""

        self._quotes = quotes
        self._ellipsis = ellipsis
        self._dashes = dashes

    @property
    def enabled(self) -> bool:
        """Return whether any transform is enabled."""

        return self._quotes or self._ellipsis or self._dashes

    def apply(self, text: str) -> str:
        """Apply enabled transforms outside fenced code and inline-code lines."""

        if not self.enabled:
            return text

        processed: list[str] = []
        inside_code_block = False
        for line in text.split("\n"):
            if is_fence_delimiter(line):
                inside_code_block = not inside_code_block
                processed.append(line)
                continue
            if inside_code_block or line.strip().startswith("`"):
                processed.append(line)
                continue
            processed.append(
                apply_line_typography(
                    line,
                    quotes=self._quotes,
                    ellipsis=self._ellipsis,
                    dashes=self._dashes,
                )
            )
        return "\n".join(processed)


class BasicCleanup:
    """Capitalize, fix pronouns, and ensure punctuation without sentence segmentation."""

    def __init__(self, options: ProcessingOptions) -> None:
        """Initialize with immutable processing options."""

        self._options = options

    def apply(self, text: str) -> str:
        """Clean every prose line outside fenced code."""

        cleaned: list[str] = []
        inside_code_block = False
        for line in text.split("\n"):
            if is_fence_delimiter(line):
                inside_code_block = not inside_code_block
                cleaned.append(line)
                continue
            if inside_code_block and self._options.preserve_code_blocks:
                cleaned.append(line)
                continue
            cleaned.append(self.clean_line(line))
        return "\n".join(cleaned)

    def clean_line(self, line: str) -> str:
        """Clean one line, leaving structural lines untouched."""

        stripped = line.strip()
        if is_structural_line(stripped):
            return line

        indent = line[: len(line) - len(line.lstrip())]
        result = stripped
        if self._options.capitalize_sentences:
            result = capitalize_first_word(result)
        if self._options.fix_pronouns:
            result = fix_pronouns(result)
        if self._options.ensure_punctuation:
            result = ensure_punctuation(result)
        return f"{indent}{result}"
