"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.op_cache.api.router import router as cache_router
from src.op_cache.ttl_cache import TTLCache
from src.op_common.database import engine
from src.op_common.errors import AppError
from src.op_common.response import error_response
from src.op_finance.api.router import router as finance_router
from src.op_gateway.api.router import router as auth_router
from src.op_gateway.middleware.request_log import RequestLogMiddleware
from src.op_gateway.middleware.route_guard import RouteGuardMiddleware
from src.op_project.api.router import router as project_router
from src.op_team.api.router import router as team_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, start cache sweep. Shutdown: stop sweep, dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    app.state.cache.start_auto_cleanup(settings.CACHE_CLEANUP_INTERVAL_SECONDS)
    yield
    await app.state.cache.stop_auto_cleanup()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# The one query cache for this process; services receive it via get_cache.
app.state.cache = TTLCache(default_ttl=settings.CACHE_DEFAULT_TTL_SECONDS)

app.add_middleware(RouteGuardMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=error_response(exc.message).to_content(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_response("Invalid data").to_content(),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_response("Internal server error").to_content(),
    )


app.include_router(auth_router, prefix="/api")
app.include_router(team_router, prefix="/api")
app.include_router(project_router, prefix="/api")
app.include_router(finance_router, prefix="/api")
app.include_router(cache_router, prefix="/api")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
