from __future__ import annotations

import time
from typing import Any

from medocr.application.llm.parsers import parse_structured_markdown
from medocr.application.llm.prompts import build_structuring_prompt
from medocr.core.logging import get_logger
from medocr.domain.pipeline.classifier import detect_document_type, extract_entities
from medocr.domain.pipeline.errors import NotConfiguredError
from medocr.domain.pipeline.models import MedicalProcessingResult
from medocr.domain.ports.structuring_port import StructuringPort
from medocr.infrastructure.clients.completions_http import SERVICE_NAME, CompletionsHttpClient

logger = get_logger(__name__)

SUPPORTED_OUTPUT_FORMATS = ("markdown", "json", "fhir")


class MedicalStructuringAdapter(StructuringPort):
    def __init__(
        self,
        client: CompletionsHttpClient,
        *,
        model: str = "gpt-4-turbo-preview",
        temperature: float = 0.3,
        max_tokens: int = 2048,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def process(
        self,
        raw_text: str,
        context: str | None = None,
        output_format: str = "markdown",
    ) -> MedicalProcessingResult:
        if not self._client.configured:
            raise NotConfiguredError(SERVICE_NAME)

        start = time.perf_counter()
        prompt = build_structuring_prompt(raw_text, context)
        data = await self._client.complete(
            [{"role": "user", "content": prompt}],
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        structured = parse_structured_markdown(self._client.extract_message_content(data))

        warnings: list[str] = []
        if output_format != "markdown":
            if output_format in SUPPORTED_OUTPUT_FORMATS:
                warnings.append(f"{output_format} output is not implemented; returning markdown")
            else:
                warnings.append(f"Unknown output format '{output_format}'; returning markdown")
        if not structured:
            warnings.append("LLM returned empty structured text")

        result = MedicalProcessingResult(
            structured_text=structured,
            document_type=detect_document_type(raw_text),
            entities=extract_entities(structured),
            warnings=warnings,
            output_format="markdown",
        )
        logger.info(
            "structuring_completed",
            extra={
                "context": context or "unknown",
                "document_type": result.document_type.value,
                "entities": len(result.entities),
                "duration_s": time.perf_counter() - start,
            },
        )
        return result

    def health_check(self) -> dict[str, Any]:
        configured = self._client.configured
        return {"status": "operational" if configured else "not_configured", "ready": configured}
