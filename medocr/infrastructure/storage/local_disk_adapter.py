"""Local disk storage adapter implementing StoragePort.

Artifacts are written flat into the output directory as
``<stem><suffix>``, e.g. ``scan-raw.txt`` and ``scan.md``.
"""

from __future__ import annotations

from pathlib import Path

from medocr.domain.ports.storage_port import StoragePort

RAW_TEXT_SUFFIX = "-raw.txt"
MARKDOWN_SUFFIX = ".md"


class LocalDiskStorageAdapter(StoragePort):
    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _path_for(self, stem: str, suffix: str) -> Path:
        self._base_dir.mkdir(parents=True, exist_ok=True)
        return self._base_dir / f"{stem}{suffix}"

    def write_text(self, stem: str, suffix: str, content: str) -> Path:
        dest = self._path_for(stem, suffix)
        dest.write_text(content, encoding="utf-8")
        return dest
