"""Health check endpoint."""

from fastapi import APIRouter, Request

from services.weather_lookup.responses import ok

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> dict:
    state = request.app.state
    return ok(request, {
        "status": "healthy",
        "version": state.settings.app_version,
        "cache": type(state.cache).__name__,
    })
