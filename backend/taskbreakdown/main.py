"""Main FastAPI application for the Task Breakdown Expert backend."""
from fastapi import FastAPI, Request

from taskbreakdown.api.routes.analytics import router as analytics_router
from taskbreakdown.api.routes.breakdown import router as breakdown_router
from taskbreakdown.api.routes.logs import router as logs_router
from taskbreakdown.core.config import settings
from taskbreakdown.core.logging import configure_logging
from taskbreakdown.core.middleware import RequestIDMiddleware
from taskbreakdown.observability.client import get_opik_client
from taskbreakdown.observability.tracing import trace

configure_logging(
    log_level=settings.log_level,
    log_path=settings.log_path,
    attempt_max_bytes=settings.log_max_file_bytes,
)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(breakdown_router)
app.include_router(analytics_router)
app.include_router(logs_router)


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    get_opik_client()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
