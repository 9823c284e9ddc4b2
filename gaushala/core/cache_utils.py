"""
Caching utilities for expensive report queries

Report results are stored under keys that embed a generation number. Bumping
the generation invalidates every key of that namespace at once, on any cache
backend (local memory in tests, Redis in production).
"""
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
DASHBOARD_CACHE_TTL = 300  # 5 minutes
REPORTS_CACHE_TTL = 600  # 10 minutes

GENERATION_KEY_PREFIX = 'cache_generation:'


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def get_cache_generation(namespace):
    """Current generation number of a cache namespace"""
    try:
        generation = cache.get(f"{GENERATION_KEY_PREFIX}{namespace}")
    except Exception as e:
        logger.warning(f"Cache unavailable reading generation for {namespace}: {e}")
        return 0
    return generation or 0


def bump_cache_generation(namespace):
    """Invalidate every cached entry of a namespace"""
    key = f"{GENERATION_KEY_PREFIX}{namespace}"
    try:
        cache.set(key, get_cache_generation(namespace) + 1, None)
        logger.info(f"Invalidated cache namespace: {namespace}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache namespace {namespace}: {e}")


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Decorator to cache expensive queries

    Usage:
        @cached_query(cache_ttl=300, key_prefix="dashboard")
        def get_dashboard_data(gaushala_ids, today):
            # expensive query here
            return data
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            generation = get_cache_generation(key_prefix)
            cache_key = make_cache_key(f"{key_prefix}:{generation}:{func.__name__}", *args, **kwargs)

            try:
                cached_data = cache.get(cache_key)
            except Exception as e:
                logger.warning(f"Cache unavailable, proceeding without cache: {e}")
                return func(*args, **kwargs)

            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(*args, **kwargs)

            try:
                cache.set(cache_key, result, cache_ttl)
            except Exception as e:
                logger.warning(f"Unable to cache {key_prefix} result: {e}")

            return result
        return wrapper
    return decorator


def invalidate_dashboard_cache():
    """Invalidate dashboard and analytics caches"""
    bump_cache_generation("dashboard")
    bump_cache_generation("reports")
