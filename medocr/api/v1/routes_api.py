from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from pydantic import TypeAdapter, ValidationError

from medocr.core.config import get_settings
from medocr.core.logging import get_logger
from medocr.domain.pipeline.models import PipelineResult, PipelineTask
from medocr.domain.pipeline.orchestrator import TaskOrchestrator
from medocr.observability.errors import to_http_error

router = APIRouter(tags=["api"])

_TASKS = TypeAdapter(list[PipelineTask])

PLACEHOLDER_AREAS: dict[str, str] = {
    "ocr": "OCR",
    "documents": "Document",
    "fhir": "FHIR",
    "translation": "Translation",
}


async def get_orchestrator(request: Request) -> TaskOrchestrator:
    """Orchestrator from app state; 503 when the lifespan hasn't built one."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise to_http_error("ORCHESTRATOR_UNAVAILABLE")
    return orchestrator


@router.get("/api")
async def api_info():
    settings = get_settings()
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "Medical document OCR and structuring pipeline",
        "endpoints": {
            "health": "/health",
            "ready": "/ready",
            "metrics": "/metrics",
            "batch": "/api/v1/pipeline/batch",
            **{area: f"/api/v1/{area}" for area in PLACEHOLDER_AREAS},
        },
    }


@router.post("/api/v1/pipeline/batch", response_model=list[PipelineResult])
async def run_batch(
    payload: Any = Body(...),
    orchestrator: TaskOrchestrator = Depends(get_orchestrator),
) -> list[PipelineResult]:
    logger = get_logger(__name__)
    try:
        tasks = _TASKS.validate_python(payload)
    except ValidationError as e:
        raise to_http_error("INVALID_TASK_BATCH", message=f"Invalid task batch: {e.error_count()} error(s)")
    logger.info("batch_request_received", extra={"tasks": len(tasks)})
    return await orchestrator.execute_batch(tasks)


def _placeholder(area: str):
    async def endpoint(request: Request, path: str = ""):
        return {"message": f"{PLACEHOLDER_AREAS[area]} endpoints coming soon", "path": request.url.path}

    return endpoint


for _area in PLACEHOLDER_AREAS:
    for _suffix in ("", "/{path:path}"):
        router.add_api_route(
            f"/api/v1/{_area}{_suffix}",
            _placeholder(_area),
            methods=["GET", "POST", "PUT", "DELETE"],
            include_in_schema=not _suffix,
            name=f"{_area}_placeholder" + ("_nested" if _suffix else ""),
        )
