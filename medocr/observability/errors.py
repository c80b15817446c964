from __future__ import annotations

from typing import Any

from fastapi import HTTPException


ERROR_REGISTRY: dict[str, dict[str, Any]] = {
    "INVALID_TASK_BATCH": {
        "status": 422,
        "message": "Request body must be a JSON list of tasks with taskId",
    },
    "ORCHESTRATOR_UNAVAILABLE": {
        "status": 503,
        "message": "Pipeline orchestrator is not available",
    },
}


def to_http_error(code: str, *, message: str | None = None, status: int | None = None) -> HTTPException:
    meta = ERROR_REGISTRY.get(code, {"status": 500, "message": code})
    status_code = int(status or meta.get("status", 500))
    detail_msg = message or str(meta.get("message", code))
    return HTTPException(status_code=status_code, detail={"code": code, "message": detail_msg})
