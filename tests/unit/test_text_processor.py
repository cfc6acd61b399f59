"""Unit tests for the processing orchestrator and its file-level API."""

import asyncio
import io
from pathlib import Path

import pytest

from markdownkit import ProcessingOptions, TextProcessor, ValidationError
from markdownkit.rules import TYPOGRAPHY_RULE_SET
from markdownkit.telemetry.logger import RunLogger

_NOTES = (
    "my-project/\n"
    "Status: In progress\n"
    "Steps:\n"
    "  install deps\n"
    "  run tests\n"
    "i think it works\n"
    "\n\n\n"
    "```\n"
    "raw  code\n"
    "```\n"
)


def test_process_sync_promotes_first_line_to_title() -> None:
    """The first line should become an H1 followed by a blank line."""

    result = TextProcessor().process_sync("hello world\nmore text")

    assert result.startswith("# hello world\n\n")
    assert result == "# hello world\n\nMore text.\n"


def test_process_sync_structures_rough_notes() -> None:
    """Folders, labels, indented lists, prose, and code should all be handled."""

    result = TextProcessor().process_sync(_NOTES)

    assert result == (
        "### My Project\n"
        "\n"
        "**Status:** In progress\n"
        "Steps:\n"
        "- install deps\n"
        "- run tests\n"
        "I think it works.\n"
        "\n"
        "```\n"
        "raw  code\n"
        "```\n"
    )


def test_process_sync_is_idempotent() -> None:
    """Processing already processed output should not change it."""

    processor = TextProcessor()
    once = processor.process_sync(_NOTES)

    assert processor.process_sync(once) == once


_ROUGH_SHAPES = [
    "Title\nnote: call bob",
    "Title\nNotes:\nfoo (bar)",
    "Title\nSteps:\n1. Install deps\n2. Run tests\n- done",
    'Title\nshe said "hi" -- then left...',
    "my-project/\nStatus: In progress\n  install deps\ni think it works",
    "Title\n\n\n\nIssue: broken build\nnpm install",
]


@pytest.mark.parametrize("text", _ROUGH_SHAPES)
def test_process_sync_output_is_stable_on_rerun(text: str) -> None:
    """Running the synchronous path on its own output should not change it."""

    processor = TextProcessor()
    once = processor.process_sync(text)

    assert processor.process_sync(once) == once


@pytest.mark.parametrize("text", _ROUGH_SHAPES)
def test_process_with_nlp_output_is_stable_on_rerun(text: str) -> None:
    """Running the NLP path on its own output should not change it."""

    processor = TextProcessor.with_nlp()
    once = asyncio.run(processor.process(text))

    assert asyncio.run(processor.process(once)) == once


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Title\nnote: call bob", "# Title\n\n**Note:** call bob\n"),
        ("Title\nNotes:\nfoo (bar)", "# Title\n\nNotes:\nFoo (bar)\n"),
        (
            "Title\nSteps:\n1. Install deps\n2. Run tests",
            "# Title\n\nSteps:\n1. Install deps\n2. Run tests\n",
        ),
    ],
)
def test_process_sync_keeps_labels_and_lists_in_shape(text: str, expected: str) -> None:
    """Lowercase labels become bold labels, and list lines are not promoted to headings."""

    assert TextProcessor().process_sync(text) == expected


def test_process_sync_normalizes_line_endings_and_empty_input() -> None:
    """CRLF input should match LF input, and empty input should yield one newline."""

    processor = TextProcessor()

    assert processor.process_sync("hello\r\nworld") == processor.process_sync("hello\nworld")
    assert processor.process_sync("") == "\n"


def test_process_without_nlp_matches_sync_path() -> None:
    """The async path with NLP disabled should produce the synchronous output."""

    processor = TextProcessor.without_nlp()

    assert asyncio.run(processor.process(_NOTES)) == processor.process_sync(_NOTES)


def test_process_with_nlp_cleans_sentences() -> None:
    """The NLP path should capitalize sentences and fix pronouns."""

    processor = TextProcessor.with_nlp()

    result = asyncio.run(processor.process("hello world\nmore text. i agree"))

    assert result == "# hello world\n\nMore text. I agree.\n"


def test_autoformat_runs_rule_engine_and_normalizer() -> None:
    """Rule-engine mode should apply registry rules without prose cleanup."""

    text = "Project notes\n1. Install\n* item\nnpm install\n\n\n\nDone"

    result = TextProcessor().autoformat(text)

    assert result == "# Project notes\n### 1. Install\n\n- item\n`npm install`\n\nDone\n"


def test_autoformat_applies_smart_typography() -> None:
    """Quotes and ellipses should be converted in rule-engine mode when enabled."""

    result = TextProcessor().autoformat('Title\nShe said "hi"...')

    assert result == "# Title\n\nShe said “hi”…\n"


def test_autoformat_typography_follows_options() -> None:
    """Disabled typography options should leave quotes and ellipses as written."""

    options = ProcessingOptions(smart_quotes=False, smart_ellipsis=False, smart_dashes=False)

    result = TextProcessor(options).autoformat('Title\nShe said "hi"... -- ok')

    assert result == '# Title\n\nShe said "hi"... -- ok\n'


def test_autoformat_applies_registered_typography_rule_set() -> None:
    """Multi-line plugin rules should run during normalization."""

    processor = TextProcessor(rule_sets=[TYPOGRAPHY_RULE_SET])

    assert processor.autoformat("Title\nA -> B (c) 2024") == "# Title\n\nA → B © 2024\n"
    assert processor.registry.rule_sets == (TYPOGRAPHY_RULE_SET,)


def test_malformed_rule_set_fails_construction() -> None:
    """A rule set without rules should be rejected when the pipeline is built."""

    with pytest.raises(ValidationError, match="rule set must provide a rules sequence"):
        TextProcessor(rule_sets=[{"name": "broken"}])


def test_invalid_options_fail_construction() -> None:
    """Out-of-range options should be rejected when the pipeline is built."""

    with pytest.raises(ValueError, match="header_level"):
        TextProcessor(ProcessingOptions(header_level=9))


def test_format_files_records_failures_and_continues(tmp_path: Path) -> None:
    """One failing file should not stop the batch, and writes should be optional."""

    good = tmp_path / "good.txt"
    good.write_text("hello\nworld", encoding="utf-8")
    missing = tmp_path / "missing.txt"
    later = tmp_path / "later.txt"
    later.write_text("later", encoding="utf-8")

    results = TextProcessor().format_files([good, missing, later], write=True)

    assert [result.success for result in results] == [True, False, True]
    assert [result.path for result in results] == [good, missing, later]
    assert results[1].error is not None
    assert results[1].error.startswith("FileNotFoundError:")
    assert good.read_text(encoding="utf-8") == "# hello\n\nWorld.\n"
    assert later.read_text(encoding="utf-8") == "# later\n"


def test_format_file_without_write_leaves_file_unchanged(tmp_path: Path) -> None:
    """Dry formatting should return output without touching the file."""

    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")

    result = TextProcessor().format_file(path)

    assert result.formatted == "# hello\n"
    assert path.read_text(encoding="utf-8") == "hello"


def test_aformat_files_runs_nlp_path_in_order(tmp_path: Path) -> None:
    """Async file formatting should process files sequentially and keep order."""

    first = tmp_path / "a.txt"
    first.write_text("notes\ni agree", encoding="utf-8")
    broken = tmp_path / "b.txt"
    broken.write_bytes(b"\xff\xfe\x00not utf8")

    results = asyncio.run(TextProcessor().aformat_files([first, broken]))

    assert results[0].formatted == "# notes\n\nI agree.\n"
    assert results[1].success is False
    assert results[1].error is not None
    assert results[1].error.startswith("UnicodeDecodeError:")


def test_run_logger_receives_stage_events() -> None:
    """An attached run logger should record every stage of a run."""

    sink = io.StringIO()
    processor = TextProcessor(run_logger=RunLogger(sink=sink))

    processor.process_sync("hello")

    output = sink.getvalue()
    for stage in ("structure", "cleanup", "normalize"):
        assert f"[phase] level=INFO stage={stage} event=start" in output
        assert f"[phase] level=INFO stage={stage} event=complete" in output
