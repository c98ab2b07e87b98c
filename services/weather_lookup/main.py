"""
Weather lookup FastAPI service: address -> coordinates -> cached weather.

Entrypoint: uvicorn services.weather_lookup.main:app --host 0.0.0.0 --port 8000
"""

import logging
import uuid
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from services.weather_lookup.cache.store import MemoryCacheStore, RedisCacheStore
from services.weather_lookup.config import settings
from services.weather_lookup.errors import UsageError
from services.weather_lookup.lookup.factory import build_orchestrator
from services.weather_lookup.middleware.cors import setup_cors
from services.weather_lookup.middleware.sentry import setup_sentry
from services.weather_lookup.responses import error
from services.weather_lookup.routers import health, weather

logger = logging.getLogger(__name__)


async def _connect_redis(url: str):
    """Return a live Redis client, or None when unset or unreachable."""
    if not url:
        return None
    client = aioredis.from_url(url, decode_responses=True, socket_connect_timeout=5)
    try:
        await client.ping()
    except Exception:
        logger.warning("Redis unavailable; using in-process weather cache", exc_info=True)
        await client.aclose()
        return None
    return client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    setup_sentry()

    redis_client = await _connect_redis(settings.redis_url)
    cache = RedisCacheStore(redis_client) if redis_client is not None else MemoryCacheStore()
    logger.info("Weather cache backend: %s", type(cache).__name__)

    try:
        lookup = build_orchestrator(settings, cache)
    except UsageError as exc:
        # /weather answers 503 until the key is configured; /health still works
        logger.error("Weather lookup disabled: %s", exc)
        lookup = None

    app.state.redis = redis_client
    app.state.cache = cache
    app.state.lookup = lookup
    app.state.settings = settings

    yield

    if redis_client is not None:
        await redis_client.aclose()


app = FastAPI(
    title="Weather Lookup API",
    version=settings.app_version,
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url=None,
    lifespan=lifespan,
)

# -- Middleware (order matters: last added = outermost in Starlette) --

# Routers first (innermost)
app.include_router(health.router)
app.include_router(weather.router)

# CORS (needs to be outermost to handle preflight)
setup_cors(app)


# Request ID injection
@app.middleware("http")
async def request_envelope_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# -- Exception Handlers --

@app.exception_handler(404)
async def not_found_handler(request: Request, exc) -> JSONResponse:
    return error(request, 404, "NOT_FOUND", "Resource not found.")


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "; ".join(err.get("msg", "") for err in exc.errors()) or "Validation error."
    return error(request, 422, "VALIDATION_ERROR", message)


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
    return error(request, 500, "INTERNAL_ERROR", "An unexpected error occurred.")
