"""Port implementations shared by the orchestrator, use-case and CLI tests."""

from __future__ import annotations

from typing import Any

from medocr.domain.pipeline.errors import NoTextDetectedError
from medocr.domain.pipeline.models import DocumentType, MedicalProcessingResult, OcrOptions, OcrResult
from medocr.domain.ports.ocr_port import OCRPort
from medocr.domain.ports.structuring_port import StructuringPort


class FakeOCR(OCRPort):  # pragma: no cover
    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.calls: list[tuple[str, list[str] | None]] = []
        self._fail_on = fail_on or set()

    async def extract_text(self, image_path: str, options: OcrOptions | None = None) -> OcrResult:
        self.calls.append((image_path, options.languages if options else None))
        if image_path in self._fail_on:
            raise NoTextDetectedError()
        return OcrResult(text=f"text of {image_path}", confidence=0.9)

    def health_check(self) -> dict[str, Any]:
        return {"status": "operational", "ready": True}


class FakeStructuring(StructuringPort):  # pragma: no cover
    def __init__(self) -> None:
        self.calls: list[tuple[str, str | None, str]] = []

    async def process(
        self,
        raw_text: str,
        context: str | None = None,
        output_format: str = "markdown",
    ) -> MedicalProcessingResult:
        self.calls.append((raw_text, context, output_format))
        return MedicalProcessingResult(structured_text=f"# {raw_text}", document_type=DocumentType.UNKNOWN)

    def health_check(self) -> dict[str, Any]:
        return {"status": "operational", "ready": True}
