"""Task orchestrator.

Runs a batch of typed tasks strictly one after another and records an
outcome and a duration for each. A failing task never aborts the batch.
"""

from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from medocr.core.logging import get_logger
from medocr.domain.pipeline.errors import InvalidInputError, UnknownTaskTypeError
from medocr.domain.pipeline.models import (
    OcrOptions,
    OcrTaskInput,
    PipelineResult,
    PipelineTask,
    StructuringTaskInput,
    TaskType,
)
from medocr.domain.ports.ocr_port import OCRPort
from medocr.domain.ports.structuring_port import StructuringPort
from medocr.observability.metrics import record_batch_duration, record_task

logger = get_logger(__name__)

_InputT = TypeVar("_InputT", bound=BaseModel)

# Plain strings only; non-string values (None, numbers, lists) never match.
_KNOWN_TYPES = tuple(t.value for t in TaskType)

# Logical adapters and their declared state; reported as-is, never checked live.
ADAPTER_STATUS: dict[str, str] = {
    "orchestrator": "operational",
    "ocr": "operational",
    "structuring": "operational",
    "fhir": "pending",
    "translation": "pending",
    "presentation": "pending",
}


class TaskOrchestrator:
    def __init__(self, ocr_client: OCRPort, structuring_client: StructuringPort) -> None:
        self._ocr = ocr_client
        self._structuring = structuring_client
        self._handlers: dict[TaskType, Callable[[PipelineTask], Awaitable[Any]]] = {
            TaskType.OCR: self._run_ocr,
            TaskType.STRUCTURING: self._run_structuring,
            TaskType.FHIR: self._run_placeholder,
            TaskType.TRANSLATION: self._run_placeholder,
            TaskType.PRESENTATION: self._run_placeholder,
        }

    async def execute_batch(self, tasks: Sequence[PipelineTask]) -> list[PipelineResult]:
        """Execute ``tasks`` in order; ``results[i]`` always belongs to ``tasks[i]``."""
        batch_start = time.perf_counter()
        logger.info("batch_started", extra={"tasks": len(tasks)})

        results: list[PipelineResult] = []
        for task in tasks:
            results.append(await self._execute(task))

        failed = sum(1 for r in results if not r.success)
        elapsed = time.perf_counter() - batch_start
        record_batch_duration(elapsed)
        logger.info(
            "batch_completed",
            extra={"tasks": len(results), "failed": failed, "duration_s": elapsed},
        )
        return results

    async def _execute(self, task: PipelineTask) -> PipelineResult:
        start = time.perf_counter()
        try:
            handler = self._dispatch(task.type)
            output = await handler(task)
        except Exception as e:
            elapsed = time.perf_counter() - start
            message = str(e) or type(e).__name__
            logger.warning(
                "task_failed",
                extra={"task_id": task.task_id, "task_type": task.type, "error": message},
            )
            record_task(_metric_label(task.type), False, elapsed)
            return PipelineResult(task_id=task.task_id, success=False, error=message, processing_time=elapsed)

        elapsed = time.perf_counter() - start
        logger.info(
            "task_completed",
            extra={"task_id": task.task_id, "task_type": task.type, "duration_s": elapsed},
        )
        record_task(_metric_label(task.type), True, elapsed)
        return PipelineResult(task_id=task.task_id, success=True, output=output, processing_time=elapsed)

    def _dispatch(self, task_type: Any) -> Callable[[PipelineTask], Awaitable[Any]]:
        if task_type not in _KNOWN_TYPES:
            raise UnknownTaskTypeError(str(task_type))
        return self._handlers[TaskType(task_type)]

    async def _run_ocr(self, task: PipelineTask) -> dict[str, Any]:
        payload = _parse_input(OcrTaskInput, task)
        result = await self._ocr.extract_text(payload.image_path, OcrOptions(languages=payload.languages))
        return result.model_dump(mode="json")

    async def _run_structuring(self, task: PipelineTask) -> dict[str, Any]:
        payload = _parse_input(StructuringTaskInput, task)
        result = await self._structuring.process(
            payload.raw_text,
            context=payload.context,
            output_format=payload.output_format,
        )
        return result.model_dump(mode="json")

    async def _run_placeholder(self, task: PipelineTask) -> dict[str, Any]:
        return {"task_type": task.type, "status": "not_implemented"}

    def health_check(self) -> dict[str, Any]:
        return {"status": "healthy", "adapters": dict(ADAPTER_STATUS)}


def _parse_input(model: type[_InputT], task: PipelineTask) -> _InputT:
    try:
        return model.model_validate(task.input)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "input" for err in e.errors())
        raise InvalidInputError(f"Invalid input for {task.type} task: {fields}") from e


def _metric_label(task_type: Any) -> str:
    # Arbitrary type values must not create new label series.
    return task_type if task_type in _KNOWN_TYPES else "unknown"
