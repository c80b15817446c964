from __future__ import annotations

from pathlib import Path

from medocr.application.llm.adapters.structuring_adapter import MedicalStructuringAdapter
from medocr.core.config import Settings, get_settings
from medocr.domain.pipeline.orchestrator import TaskOrchestrator
from medocr.infrastructure.clients.completions_http import CompletionsHttpClient
from medocr.infrastructure.clients.vision_http import VisionOcrClient
from medocr.infrastructure.storage.local_disk_adapter import LocalDiskStorageAdapter


def _secret(value) -> str | None:
    return value.get_secret_value() if value is not None else None


def build_storage_adapter(output_dir: Path | None = None, settings: Settings | None = None) -> LocalDiskStorageAdapter:
    s = settings or get_settings()
    return LocalDiskStorageAdapter(base_dir=output_dir or s.OUTPUT_DIR)


def build_ocr_client(settings: Settings | None = None) -> VisionOcrClient:
    s = settings or get_settings()
    return VisionOcrClient(
        _secret(s.VISION_API_KEY),
        base_url=s.VISION_BASE_URL,
        timeout_seconds=s.VISION_TIMEOUT_SECONDS,
        confidence_threshold=s.OCR_CONFIDENCE_THRESHOLD,
        default_languages=s.ocr_languages,
    )


def build_structuring_adapter(settings: Settings | None = None) -> MedicalStructuringAdapter:
    s = settings or get_settings()
    client = CompletionsHttpClient(
        _secret(s.OPENAI_API_KEY),
        base_url=s.OPENAI_BASE_URL,
        timeout_seconds=s.LLM_TIMEOUT_SECONDS,
    )
    return MedicalStructuringAdapter(
        client,
        model=s.OPENAI_MODEL,
        temperature=s.OPENAI_TEMPERATURE,
        max_tokens=s.OPENAI_MAX_TOKENS,
    )


def build_orchestrator(settings: Settings | None = None) -> TaskOrchestrator:
    s = settings or get_settings()
    return TaskOrchestrator(build_ocr_client(s), build_structuring_adapter(s))
