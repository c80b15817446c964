"""Process document use-case.

Image -> raw OCR text -> structured markdown, with artifacts written to the
storage adapter under the image's stem.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from medocr.core.logging import get_logger
from medocr.domain.pipeline.errors import InvalidInputError
from medocr.domain.pipeline.models import MedicalProcessingResult, OcrOptions, OcrResult
from medocr.domain.ports.ocr_port import OCRPort
from medocr.domain.ports.storage_port import StoragePort
from medocr.domain.ports.structuring_port import StructuringPort
from medocr.infrastructure.storage.local_disk_adapter import MARKDOWN_SUFFIX, RAW_TEXT_SUFFIX

logger = get_logger(__name__)


class ProcessOutcome(BaseModel):
    stem: str
    raw_text: str
    ocr: OcrResult | None = None
    structured: MedicalProcessingResult | None = None
    artifacts: dict[str, Path] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)


async def process_document(
    *,
    image_path: Path,
    ocr_client: OCRPort,
    structuring_client: StructuringPort,
    storage: StoragePort,
    context: str | None = None,
    languages: list[str] | None = None,
    use_ocr: bool = True,
    structure: bool = True,
    translate_to: str | None = None,
) -> ProcessOutcome:
    """Run the end-to-end flow for a single image.

    - With ``use_ocr`` the image goes through OCR and ``<stem>-raw.txt`` is written;
      otherwise the pre-extracted ``<stem>.txt`` beside the image is read.
    - With ``structure`` the raw text is structured and ``<stem>.md`` is written.
    - ``translate_to`` is accepted but only produces a warning.
    """
    image_path = Path(image_path)
    stem = image_path.stem
    outcome = ProcessOutcome(stem=stem, raw_text="")
    logger.info("process_started", extra={"image_path": str(image_path), "context": context or "unknown"})

    if use_ocr:
        ocr = await ocr_client.extract_text(str(image_path), OcrOptions(languages=languages))
        outcome.ocr = ocr
        outcome.raw_text = ocr.text
        outcome.artifacts["raw"] = storage.write_text(stem, RAW_TEXT_SUFFIX, ocr.text)
    else:
        text_path = image_path.with_suffix(".txt")
        if not text_path.is_file():
            raise InvalidInputError(f"Pre-extracted text not found: {text_path}")
        outcome.raw_text = text_path.read_text(encoding="utf-8")
        logger.info("pre_extracted_text_loaded", extra={"text_path": str(text_path)})

    if structure:
        structured = await structuring_client.process(outcome.raw_text, context=context)
        outcome.structured = structured
        outcome.warnings.extend(structured.warnings)
        outcome.artifacts["markdown"] = storage.write_text(stem, MARKDOWN_SUFFIX, structured.structured_text)

    if translate_to:
        message = f"Translation to '{translate_to}' is not implemented"
        logger.warning("translation_not_implemented", extra={"language": translate_to})
        outcome.warnings.append(message)

    logger.info(
        "process_completed",
        extra={"stem": stem, "artifacts": {k: str(v) for k, v in outcome.artifacts.items()}},
    )
    return outcome
