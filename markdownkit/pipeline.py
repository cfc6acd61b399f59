"""Processing orchestration for markdownkit.

Responsibilities:
- Build one configured pipeline (registry, scanner, detector, cleanup passes,
  normalizer) from immutable options and plugin rule sets.
- Sequence structure detection, prose cleanup, and layout normalization on a
  synchronous path and an asynchronous NLP path.
- Offer a file-level API that records per-file failures instead of raising.

Key types:
- `TextProcessor`: orchestration facade.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Sequence
from pathlib import Path
from typing import Any, TypeVar

from .config import ProcessingOptions
from .models.datatypes import FileFormatResult
from .rules.registry import RuleRegistry
from .telemetry.logger import RunLogger
from .text.cleaners import BasicCleanup, SmartTypography
from .text.nlp import NlpCleanup
from .text.normalizer import MultiLineNormalizer
from .text.scanner import LineScanner
from .text.structure import StructureDetector

_StageResult = TypeVar("_StageResult")


class TextProcessor:
    """Turn loosely structured text into normalized markdown.

    The rule registry is built once at construction and is only read while
    documents are processed, so one instance can format many documents.
    """

    def __init__(
        self,
        options: ProcessingOptions | None = None,
        rule_sets: Iterable[object] = (),
        run_logger: RunLogger | None = None,
    ) -> None:
        """Build the configured pipeline.

        Raises:
            ValidationError: If a supplied rule set is malformed.
            ValueError: If options are out of range.
        """

        self._options = options or ProcessingOptions()
        self._options.validate()
        self._run_logger = run_logger

        self._registry = RuleRegistry()
        for rule_set in rule_sets:
            self._registry.register(rule_set)

        self._scanner = LineScanner(
            self._registry,
            preserve_code_blocks=self._options.preserve_code_blocks,
        )
        self._structure = StructureDetector(
            self._options,
            LineScanner(
                self._registry,
                preserve_code_blocks=self._options.preserve_code_blocks,
                include_structural=False,
            ),
        )
        self._basic_cleanup = BasicCleanup(self._options)
        self._nlp_cleanup = NlpCleanup(self._options)
        self._typography = SmartTypography(
            quotes=self._options.smart_quotes,
            ellipsis=self._options.smart_ellipsis,
            dashes=self._options.smart_dashes,
        )
        self._normalizer = MultiLineNormalizer(
            self._registry.multi_line_rules(),
            semantic_breaks=self._options.semantic_breaks,
            wrap_width=self._options.wrap_width,
        )

    @classmethod
    def with_nlp(
        cls,
        rule_sets: Iterable[object] = (),
        run_logger: RunLogger | None = None,
        **overrides: Any,
    ) -> TextProcessor:
        """Build the NLP-enabled pipeline configuration."""

        return cls(ProcessingOptions.with_nlp(**overrides), rule_sets, run_logger)

    @classmethod
    def without_nlp(
        cls,
        rule_sets: Iterable[object] = (),
        run_logger: RunLogger | None = None,
        **overrides: Any,
    ) -> TextProcessor:
        """Build the NLP-free pipeline configuration."""

        return cls(ProcessingOptions.without_nlp(**overrides), rule_sets, run_logger)

    @property
    def options(self) -> ProcessingOptions:
        """Return the immutable options this pipeline was built with."""

        return self._options

    @property
    def registry(self) -> RuleRegistry:
        """Return the rule registry this pipeline was built with."""

        return self._registry

    def process_sync(self, text: str) -> str:
        """Structure detection, basic cleanup, then normalization."""

        source = _normalize_newlines(text)
        structured = self._run_stage("structure", lambda: self._structure.detect(source))
        cleaned = self._run_stage("cleanup", lambda: self._basic_cleanup.apply(structured))
        return self._run_stage("normalize", lambda: self._normalizer.normalize(cleaned))

    async def process(self, text: str) -> str:
        """Structure detection, NLP cleanup, then normalization.

        When NLP is disabled in the options, basic cleanup runs instead, which
        makes the output identical to `process_sync`.
        """

        source = _normalize_newlines(text)
        structured = self._run_stage("structure", lambda: self._structure.detect(source))
        if self._options.nlp:
            cleaned = await self._run_async_stage(
                "nlp", lambda: self._nlp_cleanup.apply(structured)
            )
        else:
            cleaned = self._run_stage("cleanup", lambda: self._basic_cleanup.apply(structured))
        return self._run_stage("normalize", lambda: self._normalizer.normalize(cleaned))

    def autoformat(self, text: str) -> str:
        """Rule-engine mode: registry line pass, normalization, then smart typography.

        Typography follows `smart_quotes`, `smart_ellipsis`, and `smart_dashes`
        from the options, which are on by default. The `autoformat` CLI command
        builds options with typography off unless its flags ask for it.
        """

        source = _normalize_newlines(text)
        scanned = self._run_stage("scan", lambda: self._scanner.scan(source))
        normalized = self._run_stage("normalize", lambda: self._normalizer.normalize(scanned))
        return self._run_stage("typography", lambda: self._typography.apply(normalized))

    def format_file(
        self,
        path: Path,
        *,
        write: bool = False,
        autoformat: bool = False,
    ) -> FileFormatResult:
        """Format one file on the synchronous path; failures are returned, not raised."""

        formatter = self.autoformat if autoformat else self.process_sync
        try:
            content = path.read_text(encoding="utf-8")
            formatted = formatter(content)
            if write:
                path.write_text(formatted, encoding="utf-8")
        except Exception as exc:
            return self._failed(path, exc)
        return self._succeeded(path, formatted)

    def format_files(
        self,
        paths: Sequence[Path],
        *,
        write: bool = False,
        autoformat: bool = False,
    ) -> list[FileFormatResult]:
        """Format files one at a time in input order."""

        return [self.format_file(path, write=write, autoformat=autoformat) for path in paths]

    async def aformat_file(self, path: Path, *, write: bool = False) -> FileFormatResult:
        """Format one file on the NLP path; failures are returned, not raised."""

        try:
            content = path.read_text(encoding="utf-8")
            formatted = await self.process(content)
            if write:
                path.write_text(formatted, encoding="utf-8")
        except Exception as exc:
            return self._failed(path, exc)
        return self._succeeded(path, formatted)

    async def aformat_files(
        self,
        paths: Sequence[Path],
        *,
        write: bool = False,
    ) -> list[FileFormatResult]:
        """Format files on the NLP path one at a time in input order."""

        results: list[FileFormatResult] = []
        for path in paths:
            results.append(await self.aformat_file(path, write=write))
        return results

    def _succeeded(self, path: Path, formatted: str) -> FileFormatResult:
        """Record a successful file result."""

        if self._run_logger is not None:
            self._run_logger.log_file_result(str(path), True)
        return FileFormatResult(path=path, success=True, formatted=formatted)

    def _failed(self, path: Path, exc: Exception) -> FileFormatResult:
        """Record a failed file result."""

        if self._run_logger is not None:
            self._run_logger.log_file_result(str(path), False)
        return FileFormatResult(path=path, success=False, error=f"{type(exc).__name__}: {exc}")

    def _on_stage_start(self, stage_name: str) -> None:
        """Emit stage start telemetry when a logger is attached."""

        if self._run_logger is not None:
            self._run_logger.log_stage_start(stage_name)

    def _on_stage_complete(self, stage_name: str) -> None:
        """Emit stage completion telemetry when a logger is attached."""

        if self._run_logger is not None:
            self._run_logger.log_stage_complete(stage_name)

    def _on_stage_failure(self, stage_name: str, exc: Exception) -> None:
        """Emit stage failure telemetry when a logger is attached."""

        if self._run_logger is not None:
            self._run_logger.log_stage_failure(stage_name, type(exc).__name__)

    def _run_stage(
        self,
        stage_name: str,
        action: Callable[[], _StageResult],
    ) -> _StageResult:
        """Run one named stage and emit start/complete/failure telemetry events."""

        self._on_stage_start(stage_name)
        try:
            result = action()
        except Exception as exc:
            self._on_stage_failure(stage_name, exc)
            raise
        self._on_stage_complete(stage_name)
        return result

    async def _run_async_stage(
        self,
        stage_name: str,
        action: Callable[[], Awaitable[_StageResult]],
    ) -> _StageResult:
        """Await one named stage and emit start/complete/failure telemetry events."""

        self._on_stage_start(stage_name)
        try:
            result = await action()
        except Exception as exc:
            self._on_stage_failure(stage_name, exc)
            raise
        self._on_stage_complete(stage_name)
        return result


def _normalize_newlines(text: str) -> str:
    """Convert CRLF and CR line endings to LF."""

    return text.replace("\r\n", "\n").replace("\r", "\n")
