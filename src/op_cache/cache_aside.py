"""Cache-aside helpers shared by the query services.

Key format: ``"{prefix}_{json}"`` where json is a stable serialization of the
query's filter object, so logically equal queries map to the same key and a
record id embedded in the filters can be matched by ``TTLCache.clear``.
"""

import json
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from src.op_cache.ttl_cache import TTLCache

T = TypeVar("T")

# Returned by ``TTLCache.get`` on a miss; a cached None is still a hit.
MISSING = object()


def make_cache_key(prefix: str, filters: dict[str, Any] | None = None) -> str:
    payload = json.dumps(filters or {}, sort_keys=True, separators=(",", ":"), default=str)
    return f"{prefix}_{payload}"


async def cached_query(
    cache: TTLCache,
    key: str,
    fetch: Callable[[], Awaitable[T]],
    ttl: float | None = None,
) -> T:
    """Return ``cache[key]`` or await *fetch*, store and return its result.

    Falsy results (``[]``, ``0``, ``None``) are cached like any other value.
    Exceptions from *fetch* propagate and leave the key empty. Two concurrent
    misses on the same key both call *fetch*; the later ``set`` wins.
    """
    cached = cache.get(key, MISSING)
    if cached is not MISSING:
        return cached  # type: ignore[no-any-return]

    result = await fetch()
    cache.set(key, result, ttl)
    return result


def invalidate(cache: TTLCache, *patterns: str) -> int:
    """Clear every key containing any of *patterns*. Returns total removed."""
    return sum(cache.clear(pattern) for pattern in patterns if pattern)
