"""Unit tests for sentence-aware NLP cleanup and its per-line recovery."""

import asyncio

import pytest

from markdownkit.config import ProcessingOptions
from markdownkit.errors import NlpStageError
from markdownkit.text.nlp import NlpCleanup


def test_transform_line_capitalizes_sentences_and_fixes_pronouns() -> None:
    """Each sentence should start uppercase and the line should end with punctuation."""

    cleanup = NlpCleanup(ProcessingOptions())

    assert cleanup.transform_line("hello there. i am here") == "Hello there. I am here."


def test_transform_line_applies_typography() -> None:
    """Smart typography should run on cleaned prose lines."""

    cleanup = NlpCleanup(ProcessingOptions())

    assert cleanup.transform_line('she said "wait"...') == "She said “wait”…"


def test_apply_skips_structural_lines_and_fenced_code() -> None:
    """Headings, list items, and fenced code should pass through untouched."""

    cleanup = NlpCleanup(ProcessingOptions())
    text = "# heading\nhello world\n- item\n```\ni stay\n```\n  indented note"

    result = asyncio.run(cleanup.apply(text))

    assert result == "# heading\nHello world.\n- item\n```\ni stay\n```\n  Indented note."


def test_apply_with_report_keeps_original_line_when_processing_fails(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A failing line should be emitted unchanged while other lines are cleaned."""

    cleanup = NlpCleanup(ProcessingOptions())
    original_transform = cleanup.transform_line

    def _flaky_transform(text: str) -> str:
        """Fail on one specific line to simulate a tokenizer error."""

        if "boom" in text:
            raise RuntimeError("tokenizer exploded")
        return original_transform(text)

    monkeypatch.setattr(cleanup, "transform_line", _flaky_transform)

    report = asyncio.run(cleanup.apply_with_report("hello\n  boom  here\nbye"))

    assert report.text == "Hello.\n  boom  here\nBye."
    assert report.recovered_lines == (2,)


def test_process_line_wraps_failures_in_stage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """Per-line failures should surface as `NlpStageError` with the line number."""

    cleanup = NlpCleanup(ProcessingOptions())

    def _failing_transform(text: str) -> str:
        """Always fail."""

        raise ValueError(f"cannot parse {text}")

    monkeypatch.setattr(cleanup, "transform_line", _failing_transform)

    with pytest.raises(NlpStageError, match="NLP cleanup failed on line 7") as exc_info:
        asyncio.run(cleanup._process_line(7, "broken"))

    assert exc_info.value.line == "broken"
    assert "ValueError: cannot parse broken" in exc_info.value.detail
