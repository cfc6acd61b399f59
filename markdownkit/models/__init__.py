"""Shared typed data models for markdownkit.

This package contains dataclasses used across pipeline modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import FileFormatResult, NlpCleanupReport

__all__ = ["FileFormatResult", "NlpCleanupReport"]
