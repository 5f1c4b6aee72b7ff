"""Shared pytest fixtures for layermark tests."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import pytest

from layermark.config import get_settings
from layermark.textmap import Origin, Range, Segment

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

_SETTINGS_PREFIXES = ("RENDER__", "PATTERNS__", "APP__")


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Isolate every test from ambient env vars and the settings cache."""
    for key in list(os.environ):
        if key.startswith(_SETTINGS_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def restore_root_logging() -> Generator[None]:
    """Remove handlers a test installs on the root logger."""
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def seg() -> Callable[..., Segment]:
    """Build a segment: ``seg(3, 6, origin_a, origin_b)``."""

    def _make(start: int, end: int, *origins: Origin) -> Segment:
        return Segment(Range(start, end), tuple(origins))

    return _make
