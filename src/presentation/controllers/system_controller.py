"""System endpoints exposing liveness."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from src.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["System"])


@router.get("/health")
async def health(request: Request) -> dict:
    """Return liveness and uptime of the application."""
    started_at = getattr(request.app.state, "started_at", None)
    uptime = None
    if started_at is not None:
        uptime = (datetime.now(timezone.utc) - started_at).total_seconds()
    logger.debug("health.check.success", uptime=uptime)
    return {"status": "ok", "uptime_seconds": uptime}
