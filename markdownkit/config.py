"""Processing options model and loaders for markdownkit.

Responsibilities:
- Define per-run processing options as an immutable typed dataclass.
- Provide a builder so options are assembled once, before a pipeline exists.
- Provide loader entry points for file- and environment-based options.

Key types:
- `ProcessingOptions`: flags gating every structure, NLP, and layout behavior.
- `ProcessingOptionsBuilder`: chained construction helper for `ProcessingOptions`.
- `ConfigLoader`: static construction helpers reading YAML or environment values.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import (
    normalize_optional_string,
    parse_positive_int,
    parse_required_boolean,
)


_ENV_PREFIX = "MARKDOWNKIT_"


@dataclass(frozen=True, slots=True)
class ProcessingOptions:
    """Immutable options for one configured processing pipeline.

    Attributes:
        nlp: Enable the natural-language cleanup pass on the async path.
        fix_pronouns: Replace a standalone lowercase `i` with `I`.
        smart_quotes: Convert straight quotes to curly quotes.
        smart_ellipsis: Convert `...` to the ellipsis character.
        smart_dashes: Convert `--` to an em dash.
        capitalize_sentences: Capitalize the first letter of each sentence.
        detect_folders: Convert `name/` lines into headings.
        detect_lists: Convert indented lines into list items.
        detect_labels: Convert `Key: value` lines into bold labels.
        first_line_title: Convert the first non-empty line into an H1 heading.
        header_level: Heading depth used for folder headings.
        wrap_width: Length threshold for semantic line breaks.
        semantic_breaks: Split long lines at sentence boundaries.
        preserve_code_blocks: Leave fenced code block contents untouched.
        collapse_blank_lines: Collapse consecutive blank lines during structure detection.
        ensure_punctuation: Append a period to prose lines missing terminal punctuation.
    """

    nlp: bool = True
    fix_pronouns: bool = True
    smart_quotes: bool = True
    smart_ellipsis: bool = True
    smart_dashes: bool = True
    capitalize_sentences: bool = True
    detect_folders: bool = True
    detect_lists: bool = True
    detect_labels: bool = True
    first_line_title: bool = True
    header_level: int = 3
    wrap_width: int = 88
    semantic_breaks: bool = False
    preserve_code_blocks: bool = True
    collapse_blank_lines: bool = True
    ensure_punctuation: bool = True

    def validate(self) -> None:
        """Validate numeric option ranges before a pipeline is built."""

        if isinstance(self.header_level, bool) or not 1 <= self.header_level <= 6:
            raise ValueError("`header_level` must be an integer between 1 and 6.")
        if isinstance(self.wrap_width, bool) or self.wrap_width <= 0:
            raise ValueError("`wrap_width` must be a positive integer.")

    @classmethod
    def with_nlp(cls, **overrides: Any) -> ProcessingOptions:
        """Return validated options for the NLP-enabled pipeline configuration."""

        options = cls(**{**overrides, "nlp": True})
        options.validate()
        return options

    @classmethod
    def without_nlp(cls, **overrides: Any) -> ProcessingOptions:
        """Return validated options for the NLP-free pipeline configuration."""

        options = cls(**{**overrides, "nlp": False})
        options.validate()
        return options

    def enable_nlp(self) -> ProcessingOptions:
        """Return a copy of these options with the NLP pass enabled."""

        return replace(self, nlp=True)

    def disable_nlp(self) -> ProcessingOptions:
        """Return a copy of these options with the NLP pass disabled."""

        return replace(self, nlp=False)

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Return the set of option field names."""

        return frozenset(item.name for item in fields(cls))


class ProcessingOptionsBuilder:
    """Assemble `ProcessingOptions` once, ahead of pipeline construction."""

    def __init__(self, base: ProcessingOptions | None = None) -> None:
        """Start from `base` options, or from defaults when omitted."""

        self._values: dict[str, Any] = {}
        self._base = base or ProcessingOptions()

    def set(self, name: str, value: Any) -> ProcessingOptionsBuilder:
        """Set one option by field name."""

        if name not in ProcessingOptions.field_names():
            raise ValueError(f"Unknown processing option `{name}`.")
        self._values[name] = value
        return self

    def update(self, values: Mapping[str, Any]) -> ProcessingOptionsBuilder:
        """Set several options from a mapping of field names to values."""

        for name, value in values.items():
            self.set(name, value)
        return self

    def with_nlp(self, enabled: bool = True) -> ProcessingOptionsBuilder:
        """Toggle the NLP pass."""

        return self.set("nlp", enabled)

    def with_header_level(self, level: int) -> ProcessingOptionsBuilder:
        """Set heading depth for folder headings."""

        return self.set("header_level", level)

    def with_wrap_width(self, width: int) -> ProcessingOptionsBuilder:
        """Set the semantic line-break width."""

        return self.set("wrap_width", width)

    def with_semantic_breaks(self, enabled: bool = True) -> ProcessingOptionsBuilder:
        """Toggle semantic line breaks."""

        return self.set("semantic_breaks", enabled)

    def with_typography(
        self,
        *,
        quotes: bool | None = None,
        ellipsis: bool | None = None,
        dashes: bool | None = None,
    ) -> ProcessingOptionsBuilder:
        """Toggle smart typography options; `None` keeps the current value."""

        if quotes is not None:
            self.set("smart_quotes", quotes)
        if ellipsis is not None:
            self.set("smart_ellipsis", ellipsis)
        if dashes is not None:
            self.set("smart_dashes", dashes)
        return self

    def build(self) -> ProcessingOptions:
        """Return validated immutable options."""

        options = replace(self._base, **self._values)
        options.validate()
        return options


class ConfigLoader:
    """Factory methods for creating `ProcessingOptions` from external sources."""

    _BOOLEAN_KEYS = frozenset(
        item.name for item in fields(ProcessingOptions) if item.type in ("bool", bool)
    )
    _INTEGER_KEYS = frozenset(
        item.name for item in fields(ProcessingOptions) if item.type in ("int", int)
    )

    @staticmethod
    def from_yaml(path: Path) -> ProcessingOptions:
        """Create validated options from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = yaml.safe_load(path_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader.from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ProcessingOptions:
        """Create validated options from `MARKDOWNKIT_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, object] = {}
        for name in sorted(ProcessingOptions.field_names()):
            raw_value = normalize_optional_string(env_map.get(f"{_ENV_PREFIX}{name.upper()}"))
            if raw_value is not None:
                payload[name] = raw_value
        return ConfigLoader.from_mapping(payload, source_label="environment")

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str) -> ProcessingOptions:
        """Build validated options from a mapping keyed by option field names."""

        unknown = sorted(str(key) for key in payload if key not in ProcessingOptions.field_names())
        if unknown:
            raise ValueError(
                f"{source_label} contains unsupported key(s): {', '.join(unknown)}."
            )

        builder = ProcessingOptionsBuilder()
        for key, value in payload.items():
            if key in ConfigLoader._BOOLEAN_KEYS:
                builder.set(key, parse_required_boolean(value, key))
            elif key in ConfigLoader._INTEGER_KEYS:
                builder.set(key, parse_positive_int(value, key))
        return builder.build()
