"""Unit tests for deterministic prose cleanup and smart typography."""

import pytest

from markdownkit.config import ProcessingOptions
from markdownkit.text.cleaners import (
    BasicCleanup,
    SmartTypography,
    capitalize_first_word,
    ensure_punctuation,
    fix_pronouns,
    is_structural_line,
    smarten_dashes,
    smarten_ellipsis,
    smarten_quotes,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("this is a note", "this is a note."),
        ("Done!", "Done!"),
        ("Steps:", "Steps:"),
        ("wait…", "wait…"),
        ("- item", "- item"),
        ("call()", "call()"),
        ("run `make`", "run `make`"),
        ("", ""),
    ],
)
def test_ensure_punctuation_appends_period_only_to_bare_prose(text: str, expected: str) -> None:
    """A period should be added only when a prose line lacks terminal punctuation."""

    assert ensure_punctuation(text) == expected


def test_fix_pronouns_only_touches_standalone_i() -> None:
    """Pronoun fixing should leave words containing `i` alone."""

    assert fix_pronouns("i think ice is nice and i agree") == "I think ice is nice and I agree"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("hello", "Hello"),
        ('"quoted start', '"Quoted start'),
        ("(aside) text", "(Aside) text"),
        ("`npm install`", "`npm install`"),
        ("Already", "Already"),
    ],
)
def test_capitalize_first_word_skips_leading_openers(text: str, expected: str) -> None:
    """Capitalization should look past quotes and brackets but not inline code."""

    assert capitalize_first_word(text) == expected


def test_smart_typography_helpers() -> None:
    """Quote, ellipsis, and dash helpers should produce typographic characters."""

    assert smarten_quotes('He said "hi" and don\'t') == "He said “hi” and don’t"
    assert smarten_ellipsis("wait...") == "wait…"
    assert smarten_dashes("a -- b") == "a — b"
    assert smarten_dashes("---") == "---"


def test_smart_typography_skips_fenced_code_and_inline_code_lines() -> None:
    """Document-level typography should not rewrite code."""

    typography = SmartTypography(quotes=True, ellipsis=True)
    text = '```\n"x"...\n```\n`"raw"`\n"y"...'

    assert typography.apply(text) == '```\n"x"...\n```\n`"raw"`\n“y”…'


def test_smart_typography_disabled_returns_input() -> None:
    """No enabled transform should mean no change."""

    typography = SmartTypography(quotes=False, ellipsis=False)

    assert typography.enabled is False
    assert typography.apply('"x"...') == '"x"...'


def test_basic_cleanup_cleans_prose_and_preserves_structure() -> None:
    """Basic cleanup should fix prose lines only, keeping indentation and code."""

    cleanup = BasicCleanup(ProcessingOptions())
    text = "# heading\ni went home\n  i agree\n- list item\n```\ni code\n```"

    assert cleanup.apply(text) == "# heading\nI went home.\n  I agree.\n- list item\n```\ni code\n```"


def test_basic_cleanup_respects_disabled_options() -> None:
    """Disabled cleanup options should leave their concern untouched."""

    cleanup = BasicCleanup(
        ProcessingOptions(capitalize_sentences=False, fix_pronouns=False, ensure_punctuation=False)
    )

    assert cleanup.clean_line("i went home") == "i went home"


@pytest.mark.parametrize(
    ("line", "expected"),
    [("", True), ("# h", True), ("> quote", True), ("| a |", True), ("1) step", True), ("plain", False)],
)
def test_is_structural_line(line: str, expected: bool) -> None:
    """Structural lines should be recognized so prose cleanup skips them."""

    assert is_structural_line(line) is expected


def test_basic_cleanup_capitalizes_and_punctuates_plain_sentences() -> None:
    """Plain notes should gain a capital letter and a final period together."""

    cleanup = BasicCleanup(ProcessingOptions())

    assert cleanup.clean_line("this is a note") == "This is a note."
    assert cleanup.clean_line("Is this done?") == "Is this done?"
    assert cleanup.clean_line("ends with semicolon;") == "Ends with semicolon;"
