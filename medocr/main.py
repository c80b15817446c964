from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from medocr.api.v1.routes_api import router as api_router
from medocr.api.v1.routes_health import router as health_router
from medocr.application.services.factories import build_ocr_client, build_structuring_adapter
from medocr.core.config import get_settings
from medocr.core.logging import RequestIdMiddleware, configure_logging, get_logger
from medocr.domain.pipeline.orchestrator import TaskOrchestrator
from medocr.observability.metrics import MetricsMiddleware
from medocr.observability.metrics import router as metrics_router

# Initialize settings and logging
settings = get_settings()
configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = get_logger(__name__)
    # Services are built once per process and shared through app.state
    app.state.ocr_client = build_ocr_client(settings)
    app.state.structuring_adapter = build_structuring_adapter(settings)
    app.state.orchestrator = TaskOrchestrator(app.state.ocr_client, app.state.structuring_adapter)
    logger.info(
        "service_startup",
        extra={
            "env": settings.ENV,
            "log_level": settings.LOG_LEVEL,
            "ocr": app.state.ocr_client.health_check()["status"],
            "structuring": app.state.structuring_adapter.health_check()["status"],
        },
    )
    try:
        yield
    finally:
        app.state.orchestrator = None
        logger.info("service_shutdown")


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

# Middlewares
app.add_middleware(RequestIdMiddleware)
app.add_middleware(MetricsMiddleware)

# Routers
app.include_router(health_router)
app.include_router(api_router)
app.include_router(metrics_router)
