"""
Health check endpoint.

GET /health reports three checks:
- mongodb   "ok" | "error"; an error makes the service "unhealthy" (503)
            because tokens and answers cannot be stored.
- whatsapp  "live" | "simulated"; simulation marks the service "degraded".
- sessions  number of wizards currently held in memory.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from config import AppSettings
from dependencies import get_db, get_settings
from schemas.dto.responses.common import HealthResponse

router = APIRouter(tags=["health"])


async def _mongo_reachable(db) -> bool:
    try:
        await db.client.admin.command("ping")
    except Exception:
        return False
    return True


def _whatsapp_simulated(settings: AppSettings) -> bool:
    return bool(settings.whatsapp.whatsapp_simulate_on_unreachable)


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    db=Depends(get_db),
    settings: AppSettings = Depends(get_settings),
) -> JSONResponse:
    mongo_ok = await _mongo_reachable(db)
    simulated = _whatsapp_simulated(settings)
    store = getattr(request.app.state, "session_store", None)

    checks = {
        "mongodb": "ok" if mongo_ok else "error",
        "whatsapp": "simulated" if simulated else "live",
        "sessions": str(len(store)) if store is not None else "0",
    }
    if not mongo_ok:
        status = "unhealthy"
    elif simulated:
        status = "degraded"
    else:
        status = "healthy"

    body = HealthResponse(status=status, checks=checks)
    return JSONResponse(
        status_code=503 if status == "unhealthy" else 200,
        content=body.model_dump(),
    )
