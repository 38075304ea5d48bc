"""Cache Utilities Module."""

from collections.abc import Callable
from functools import wraps
from typing import Any

import aiocache

__all__ = ["gattl_cache", "generic_hash"]


def gattl_cache(ttl: int = 60, key: Callable[..., Any] | None = None):
    """Decorator caching the results of an async function in memory for ``ttl`` seconds.

    The cache key defaults to ``generic_hash`` of the call arguments, so unhashable
    arguments are fine. Exceptions are not cached.

    Args:
        ttl (int): Time-to-live for cached items in seconds. Defaults to 60.
        key (Callable[..., Any] | None): Optional function mapping the call
            arguments to a cache key.
    """

    def decorator(func):
        cache_alias = f"gattl_{func.__module__}.{func.__qualname__}_{id(func)}"
        aiocache.caches.add(cache_alias, {"cache": aiocache.Cache.MEMORY, "ttl": ttl})

        def key_builder_adapter(f, *args, **kwargs):
            if key is not None:
                return key(*args, **kwargs)
            return generic_hash(*args, **kwargs)

        @wraps(func)
        @aiocache.cached(alias=cache_alias, key_builder=key_builder_adapter)
        async def wrapper(*args, **kwargs):
            return await func(*args, **kwargs)

        return wrapper

    return decorator


def generic_hash(*args, **kwargs) -> int:
    """Recursively computes a hash for any Python object(s).

    Built-in hashable objects use ``hash``; lists, tuples, sets, dicts and plain
    objects are reduced to a hashable representation of their contents first.
    """
    visited_ids: set[int] = set()

    if not kwargs and len(args) == 1:
        return _generic_hash(args[0], visited_ids)
    args_hash = _generic_hash(args, visited_ids)
    kwargs_hash = _generic_hash(tuple(sorted(kwargs.items())), visited_ids)
    return hash((args_hash, kwargs_hash))


def _generic_hash(obj: Any, _visited_ids: set[int]) -> int:
    obj_id = id(obj)
    if obj_id in _visited_ids:
        return hash("<cycle>")

    _visited_ids.add(obj_id)
    try:
        h = hash(obj)
    except TypeError:
        if isinstance(obj, list | tuple):
            h = hash(tuple(_generic_hash(item, _visited_ids) for item in obj))
        elif isinstance(obj, set):
            h = hash(frozenset(_generic_hash(item, _visited_ids) for item in obj))
        elif isinstance(obj, dict):
            h = hash(
                tuple(
                    sorted(
                        (_generic_hash(k, _visited_ids), _generic_hash(v, _visited_ids))
                        for k, v in obj.items()
                    )
                )
            )
        elif hasattr(obj, "__dict__"):
            h = _generic_hash(obj.__dict__, _visited_ids)
        else:
            h = hash(str(obj))
    _visited_ids.remove(obj_id)
    return h
