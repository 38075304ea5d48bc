"""System endpoints."""

from datetime import UTC, datetime
from typing import Any

from fastapi.routing import APIRouter

from plexcord import __version__
from plexcord.web.state import get_app_state

__all__ = ["router"]

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, Any]:
    """Report liveness, image store reachability, version and uptime."""
    state = get_app_state()
    uptime = datetime.now(UTC) - state.started_at
    return {
        "ok": state.configured,
        "store": await state.store.ping() if state.store else False,
        "version": __version__,
        "uptime_seconds": int(uptime.total_seconds()),
        "pending_notifications": state.dispatcher.pending if state.dispatcher else 0,
    }
