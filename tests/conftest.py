from __future__ import annotations

import logging
import os

import pytest

from medocr.core.config import get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Every test starts without MEDOCR_* overrides and with a fresh settings cache."""
    for key in list(os.environ):
        if key.startswith("MEDOCR_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # CLI tests call configure_logging, which replaces root handlers with ones bound to captured streams
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
