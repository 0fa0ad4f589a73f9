"""Health check endpoint."""

from datetime import datetime, timezone

from ...core.registry import get_service


def _iso_now() -> str:
    # e.g. 2024-05-01T12:00:00.123Z
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def health() -> dict:
    """GET /health"""
    return {
        "status": "healthy",
        "timestamp": _iso_now(),
        "models": get_service().registry.model_ids(),
    }
