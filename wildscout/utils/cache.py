"""
Simple caching utilities for read-only catalogs.

Seasonal plants, challenges and care guides are maintained outside the app
and change rarely, so their snapshots are kept in a short-lived TTL cache.
Only successful fetches are cached; an error result is always retried.
"""

from __future__ import annotations
from cachetools import TTLCache
from typing import Callable, Any
from functools import wraps
import threading

CATALOG_CACHE_TTL_SECONDS = 300  # 5 minutes
CATALOG_CACHE_MAX_ENTRIES = 64

# Key format: "catalog:{name}"
_catalog_cache = TTLCache(maxsize=CATALOG_CACHE_MAX_ENTRIES, ttl=CATALOG_CACHE_TTL_SECONDS)
_cache_lock = threading.Lock()


def cache_catalog(name: str) -> Callable:
    """
    Decorator to cache a catalog fetch returning (rows, error).

    Usage:
        @cache_catalog("seasonal_plants")
        def get_seasonal_plants():
            ...
            return rows, None
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            cache_key = f"catalog:{name}"

            with _cache_lock:
                if cache_key in _catalog_cache:
                    return _catalog_cache[cache_key], None

            rows, error = func(*args, **kwargs)

            if error is None:
                with _cache_lock:
                    _catalog_cache[cache_key] = rows

            return rows, error

        return wrapper

    return decorator


def invalidate_catalog(name: str) -> None:
    """Drop one cached catalog so the next read hits the database."""
    with _cache_lock:
        _catalog_cache.pop(f"catalog:{name}", None)


def clear_all_catalog_cache() -> None:
    """
    Clear every cached catalog.

    Useful for:
    - Testing
    - The seasonal-plants CLI command (always reads fresh data)
    """
    with _cache_lock:
        _catalog_cache.clear()
