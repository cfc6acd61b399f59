"""Core datatypes shared across markdownkit modules.

Responsibilities:
- Represent immutable results exchanged between the pipeline and its callers.

Key types:
- `NlpCleanupReport`: NLP pass output with recovered-line diagnostics.
- `FileFormatResult`: per-file outcome of the file-level formatting API.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class NlpCleanupReport:
    """Structured output of the NLP cleanup pass.

    Attributes:
        text: Cleaned document text.
        recovered_lines: 1-based line numbers whose NLP step failed and were kept unchanged.
    """

    text: str
    recovered_lines: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class FileFormatResult:
    """Outcome of formatting one file.

    Attributes:
        path: Path of the processed file.
        success: Whether the file was read, formatted, and (optionally) written.
        formatted: Formatted text when successful.
        error: Error description when unsuccessful.
    """

    path: Path
    success: bool
    formatted: str | None = None
    error: str | None = None
