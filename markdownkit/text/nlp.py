"""Natural-language cleanup of prose lines.

Responsibilities:
- Segment each prose line into sentences with NLTK's Punkt tokenizer.
- Capitalize sentences, fix the `i` pronoun, normalize inter-sentence spacing,
  and apply smart typography.
- Recover from any per-line failure by keeping the original line.

Lines are processed one at a time, in document order, each as an awaited unit
of work, so output order never depends on scheduling.
"""

from __future__ import annotations

import asyncio

from loguru import logger
from nltk.tokenize.punkt import PunktSentenceTokenizer

from ..config import ProcessingOptions
from ..errors import NlpStageError
from ..models.datatypes import NlpCleanupReport
from .cleaners import (
    apply_line_typography,
    capitalize_first_word,
    ensure_punctuation,
    fix_pronouns,
    is_structural_line,
)
from .context import is_fence_delimiter


class NlpCleanup:
    """Best-effort sentence-aware cleanup for prose lines."""

    def __init__(
        self,
        options: ProcessingOptions,
        tokenizer: PunktSentenceTokenizer | None = None,
    ) -> None:
        """Initialize with immutable options and an optional sentence tokenizer.

        The default tokenizer uses untrained Punkt parameters, so no NLTK data
        download is required.
        """

        self._options = options
        self._tokenizer = tokenizer or PunktSentenceTokenizer()

    async def apply(self, text: str) -> str:
        """Clean every prose line and return the joined document."""

        report = await self.apply_with_report(text)
        return report.text

    async def apply_with_report(self, text: str) -> NlpCleanupReport:
        """Clean every prose line and report which lines fell back to their original."""

        result: list[str] = []
        recovered: list[int] = []
        inside_code_block = False
        for line_number, line in enumerate(text.split("\n"), start=1):
            if is_fence_delimiter(line):
                inside_code_block = not inside_code_block
                result.append(line)
                continue

            if inside_code_block and self._options.preserve_code_blocks:
                result.append(line)
                continue

            stripped = line.strip()
            if is_structural_line(stripped):
                result.append(line)
                continue

            try:
                cleaned = await self._process_line(line_number, stripped)
            except NlpStageError as exc:
                logger.debug("{}", exc)
                recovered.append(line_number)
                result.append(line)
                continue

            indent = line[: len(line) - len(line.lstrip())]
            result.append(f"{indent}{cleaned}")

        return NlpCleanupReport(text="\n".join(result), recovered_lines=tuple(recovered))

    async def _process_line(self, line_number: int, stripped: str) -> str:
        """Run the analysis of one line off the event loop and wrap any failure."""

        try:
            return await asyncio.to_thread(self.transform_line, stripped)
        except Exception as exc:
            raise NlpStageError(
                line_number=line_number,
                line=stripped,
                detail=f"{type(exc).__name__}: {exc}",
            ) from exc

    def transform_line(self, text: str) -> str:
        """Apply sentence-level transforms to one trimmed prose line."""

        options = self._options
        sentences = [
            text[start:end] for start, end in self._tokenizer.span_tokenize(text)
        ] or [text]

        transformed: list[str] = []
        for sentence in sentences:
            if options.capitalize_sentences:
                sentence = capitalize_first_word(sentence)
            if options.fix_pronouns:
                sentence = fix_pronouns(sentence)
            transformed.append(sentence.strip())

        result = " ".join(part for part in transformed if part)
        result = apply_line_typography(
            result,
            quotes=options.smart_quotes,
            ellipsis=options.smart_ellipsis,
            dashes=options.smart_dashes,
        )
        if options.ensure_punctuation:
            result = ensure_punctuation(result)
        return result
