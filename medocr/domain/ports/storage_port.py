"""StoragePort protocol for persisting pipeline artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class StoragePort(Protocol):
    """Abstraction over artifact storage, keyed by the input document's stem."""

    def write_text(self, stem: str, suffix: str, content: str) -> Path: ...
