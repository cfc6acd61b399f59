"""Plugin rule-set discovery.

Responsibilities:
- Import every `*.py` plugin module from a directory in sorted name order.
- Return each module's rule set for the registry to validate.

A plugin module exposes either a module-level `RULE_SET` (a `RuleSet` or a
mapping with a `rules` key) or a module-level `rules` sequence.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path

from loguru import logger

from ..errors import PluginLoadError


def load_rule_set(path: Path) -> object:
    """Import one plugin module and return its rule set object."""

    module_name = f"markdownkit_plugin_{path.stem.replace('-', '_')}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise PluginLoadError(path=path, detail="not an importable Python module")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise PluginLoadError(path=path, detail=f"{type(exc).__name__}: {exc}") from exc

    rule_set = getattr(module, "RULE_SET", None)
    if rule_set is not None:
        return rule_set
    if hasattr(module, "rules"):
        return module
    raise PluginLoadError(path=path, detail="module defines neither `RULE_SET` nor `rules`")


def load_rule_sets(plugin_dir: Path) -> list[object]:
    """Import all plugin modules in `plugin_dir` in deterministic name order."""

    if not plugin_dir.is_dir():
        raise PluginLoadError(path=plugin_dir, detail="plugin directory does not exist")

    rule_sets: list[object] = []
    for path in sorted(plugin_dir.glob("*.py")):
        if path.name.startswith("_"):
            continue
        rule_sets.append(load_rule_set(path))
        logger.debug("Loaded plugin module {}", path.name)
    return rule_sets
