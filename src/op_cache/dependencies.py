"""FastAPI dependency exposing the process-wide cache owned by the app."""

from fastapi import Request

from src.op_cache.ttl_cache import TTLCache


def get_cache(request: Request) -> TTLCache:
    cache: TTLCache = request.app.state.cache
    return cache
