from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    countdown_logger = logging.getLogger("countdown")
    countdown_level = countdown_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    countdown_logger.setLevel(countdown_level)
