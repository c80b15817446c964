"""OCRPort protocol for OCR vendor access."""

from __future__ import annotations

from typing import Any, Protocol

from medocr.domain.pipeline.models import OcrOptions, OcrResult


class OCRPort(Protocol):
    """Abstraction over the OCR vendor used by the orchestrator."""

    async def extract_text(self, image_path: str, options: OcrOptions | None = None) -> OcrResult: ...

    def health_check(self) -> dict[str, Any]: ...
