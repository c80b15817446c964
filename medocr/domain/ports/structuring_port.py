"""StructuringPort protocol for LLM-backed text structuring."""

from __future__ import annotations

from typing import Any, Protocol

from medocr.domain.pipeline.models import MedicalProcessingResult


class StructuringPort(Protocol):
    """Turns raw OCR text into structured markdown plus extracted metadata."""

    async def process(
        self,
        raw_text: str,
        context: str | None = None,
        output_format: str = "markdown",
    ) -> MedicalProcessingResult: ...

    def health_check(self) -> dict[str, Any]: ...
