"""Unit tests for processing options, the options builder, and config loaders."""

from __future__ import annotations

from pathlib import Path

import pytest

from markdownkit.config import ConfigLoader, ProcessingOptions, ProcessingOptionsBuilder


def test_processing_options_defaults() -> None:
    """Defaults should enable NLP and structure detection with H3 folder headings."""

    options = ProcessingOptions()

    assert options.nlp is True
    assert options.header_level == 3
    assert options.wrap_width == 88
    assert options.semantic_breaks is False
    assert options.preserve_code_blocks is True


def test_named_configurations_do_not_mutate_shared_options() -> None:
    """NLP toggles should return new option objects."""

    base = ProcessingOptions()
    disabled = base.disable_nlp()

    assert base.nlp is True
    assert disabled.nlp is False
    assert disabled.enable_nlp().nlp is True
    assert ProcessingOptions.with_nlp(header_level=2).nlp is True
    assert ProcessingOptions.with_nlp(header_level=2).header_level == 2
    assert ProcessingOptions.without_nlp(nlp=True).nlp is False


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"header_level": 0}, "header_level"),
        ({"header_level": 7}, "header_level"),
        ({"wrap_width": 0}, "wrap_width"),
    ],
)
def test_validate_rejects_out_of_range_values(overrides: dict[str, int], message: str) -> None:
    """Validation should reject heading depths outside 1..6 and non-positive widths."""

    with pytest.raises(ValueError, match=message):
        ProcessingOptions(**overrides).validate()


def test_builder_chains_setters_and_validates_on_build() -> None:
    """The builder should assemble options once and validate them."""

    options = (
        ProcessingOptionsBuilder()
        .with_nlp(False)
        .with_header_level(2)
        .with_semantic_breaks()
        .with_typography(quotes=False)
        .build()
    )

    assert options.nlp is False
    assert options.header_level == 2
    assert options.semantic_breaks is True
    assert options.smart_quotes is False
    assert options.smart_ellipsis is True

    with pytest.raises(ValueError, match="wrap_width"):
        ProcessingOptionsBuilder().with_wrap_width(0).build()


def test_builder_rejects_unknown_option_names() -> None:
    """Unknown option names should fail fast."""

    with pytest.raises(ValueError, match="Unknown processing option `bogus`."):
        ProcessingOptionsBuilder().set("bogus", True)


def test_builder_starts_from_base_options() -> None:
    """Builder overrides should apply on top of supplied base options."""

    base = ProcessingOptions(header_level=5, nlp=False)

    options = ProcessingOptionsBuilder(base).update({"wrap_width": 60}).build()

    assert options.header_level == 5
    assert options.nlp is False
    assert options.wrap_width == 60


def test_config_loader_from_yaml_parses_typed_values(tmp_path: Path) -> None:
    """YAML loader should accept booleans, boolean tokens, and integers."""

    config_path = tmp_path / "markdownkit.yml"
    config_path.write_text(
        "nlp: false\nheader_level: 2\nsemantic_breaks: 'on'\nwrap_width: ' 72 '\n",
        encoding="utf-8",
    )

    options = ConfigLoader.from_yaml(config_path)

    assert options.nlp is False
    assert options.header_level == 2
    assert options.semantic_breaks is True
    assert options.wrap_width == 72


def test_config_loader_from_yaml_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    """An empty YAML document should yield default options."""

    config_path = tmp_path / "empty.yml"
    config_path.write_text("", encoding="utf-8")

    assert ConfigLoader.from_yaml(config_path) == ProcessingOptions()


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ("- nlp\n", "must contain a top-level mapping/object"),
        ("bogus: true\nnlp: true\n", r"unsupported key\(s\): bogus\."),
        ("nlp: maybe\n", "`nlp` must be a boolean value"),
        ("header_level: -1\n", "`header_level` must be a positive integer"),
        ("header_level: 9\n", "between 1 and 6"),
    ],
)
def test_config_loader_from_yaml_rejects_invalid_payloads(
    tmp_path: Path, payload: str, message: str
) -> None:
    """Invalid YAML payloads should raise `ValueError` naming the offending key."""

    config_path = tmp_path / "invalid.yml"
    config_path.write_text(payload, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_from_env_reads_prefixed_variables() -> None:
    """Environment loader should read `MARKDOWNKIT_*` values and ignore blanks."""

    options = ConfigLoader.from_env(
        {
            "MARKDOWNKIT_NLP": "off",
            "MARKDOWNKIT_WRAP_WIDTH": "100",
            "MARKDOWNKIT_SMART_QUOTES": "  ",
            "UNRELATED": "value",
        }
    )

    assert options.nlp is False
    assert options.wrap_width == 100
    assert options.smart_quotes is True


def test_config_loader_from_env_rejects_invalid_integer() -> None:
    """Non-numeric integer values should raise `ValueError`."""

    with pytest.raises(ValueError, match="`header_level` must be a positive integer"):
        ConfigLoader.from_env({"MARKDOWNKIT_HEADER_LEVEL": "three"})
