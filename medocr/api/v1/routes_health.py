from datetime import datetime, timezone

from fastapi import APIRouter, Request

from medocr.core.config import get_settings
from medocr.core.logging import get_logger

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    """Liveness check: process is up."""
    settings = get_settings()
    logger = get_logger(__name__)
    logger.info("health", extra={"path": str(request.url.path)})
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
async def ready(request: Request):
    """Readiness: the orchestrator's adapter map plus per-vendor configuration state.

    Vendors are reported from configuration only; no outbound call is made.
    """
    logger = get_logger(__name__)
    logger.info("ready", extra={"path": str(request.url.path)})
    state = request.app.state
    orchestrator = getattr(state, "orchestrator", None)
    if orchestrator is None:
        return {"status": "starting", "adapters": {}, "vendors": {}}
    body = orchestrator.health_check()
    body["vendors"] = {
        "ocr": state.ocr_client.health_check(),
        "structuring": state.structuring_adapter.health_check(),
    }
    return body
