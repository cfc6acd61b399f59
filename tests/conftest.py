"""Shared pytest fixtures for the full markdownkit test suite."""

from __future__ import annotations

import sys
from collections.abc import Iterator

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _restore_loguru_handlers() -> Iterator[None]:
    """Reset loguru sinks replaced by `RunLogger` so tests do not leak handlers."""

    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
