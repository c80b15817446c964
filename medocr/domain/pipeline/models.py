"""Domain models for the pipeline.

Vendor payloads are mapped into these at the adapter boundary; nothing outside
``medocr.infrastructure`` sees raw vendor JSON.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TaskType(str, Enum):
    OCR = "ocr"
    STRUCTURING = "structuring"
    FHIR = "fhir"
    TRANSLATION = "translation"
    PRESENTATION = "presentation"


class PipelineTask(BaseModel):
    """A unit of work submitted to the orchestrator.

    ``type`` is taken as-is (missing, null and non-string values included) so
    an unrecognized value fails its own task at dispatch time instead of
    rejecting the whole batch.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    task_id: str = Field(alias="taskId")
    type: Any = None
    input: Any = None
    priority: float | None = None


class PipelineResult(BaseModel):
    """Outcome of one task. ``processing_time`` is in seconds."""

    model_config = ConfigDict(frozen=True)

    task_id: str
    success: bool
    output: Any = None
    error: str | None = None
    processing_time: float = Field(ge=0)

    @model_validator(mode="after")
    def _check_outcome(self) -> "PipelineResult":
        if self.success and self.error is not None:
            raise ValueError("successful result must not carry an error")
        if not self.success and (self.error is None or self.output is not None):
            raise ValueError("failed result must carry an error and no output")
        return self


class BlockType(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    TABLE = "table"
    UNKNOWN = "unknown"


class BoundingBox(BaseModel):
    x: float
    y: float
    width: float
    height: float


class TextBlock(BaseModel):
    text: str
    type: BlockType = BlockType.UNKNOWN
    confidence: float | None = None
    bounding_box: BoundingBox | None = None


class ImageSize(BaseModel):
    width: int
    height: int


class OcrMetadata(BaseModel):
    image_size: ImageSize | None = None
    processing_time: float = 0.0
    low_confidence: bool = False


class OcrOptions(BaseModel):
    languages: list[str] | None = None


class OcrResult(BaseModel):
    """Structured OCR output used by downstream stages."""

    text: str
    confidence: float = Field(ge=0.0, le=1.0)
    blocks: list[TextBlock] = Field(default_factory=list)
    detected_languages: list[str] = Field(default_factory=list)
    metadata: OcrMetadata = Field(default_factory=OcrMetadata)


class EntityType(str, Enum):
    MEDICATION = "medication"
    DIAGNOSIS = "diagnosis"
    PROCEDURE = "procedure"
    LAB_TEST = "lab_test"
    VITAL_SIGN = "vital_sign"


class MedicalEntity(BaseModel):
    type: EntityType
    name: str
    value: str | None = None
    code: str | None = None
    code_system: str | None = None


class DocumentType(str, Enum):
    PRESCRIPTION = "prescription"
    LAB_RESULTS = "lab_results"
    DISCHARGE_SUMMARY = "discharge_summary"
    CLINICAL_NOTES = "clinical_notes"
    UNKNOWN = "unknown"


class MedicalProcessingResult(BaseModel):
    """Result of LLM structuring. ``confidence`` is never computed and stays unset."""

    structured_text: str
    document_type: DocumentType = DocumentType.UNKNOWN
    entities: list[MedicalEntity] = Field(default_factory=list)
    confidence: float | None = None
    warnings: list[str] = Field(default_factory=list)
    output_format: str = "markdown"


class OcrTaskInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_path: str = Field(alias="imagePath", min_length=1)
    languages: list[str] | None = None


class StructuringTaskInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    raw_text: str = Field(alias="rawText")
    context: str | None = None
    output_format: str = Field(default="markdown", alias="outputFormat")
