"""
Caching utilities for expensive report queries
Uses Redis when configured, the local memory cache otherwise
"""
from django.conf import settings
from django.core.cache import cache
import hashlib
import logging

logger = logging.getLogger(__name__)

REPORTS_CACHE_PREFIX = "reports"


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def get_cached_report(name, *args, **kwargs):
    """
    Look up a cached report
    Returns tuple: (cached_data, cache_key)
    """
    cache_key = make_cache_key(f"{REPORTS_CACHE_PREFIX}:{name}", *args, **kwargs)
    return cache.get(cache_key), cache_key


def cache_report(cache_key, data, ttl=None):
    """Cache report data"""
    if ttl is None:
        ttl = settings.REPORTS_CACHE_TTL
    cache.set(cache_key, data, ttl)
    logger.debug(f"Cached report: {cache_key}")


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern.
    The local memory backend cannot match keys, so it is cleared whole.
    """
    if not hasattr(cache, "delete_pattern"):
        cache.clear()
        logger.info(f"Cache cleared for pattern: {pattern}")
        return

    try:
        deleted = cache.delete_pattern(f"*{pattern}*")
        logger.info(f"Cache invalidation for pattern: {pattern} - Deleted {deleted} keys")
    except Exception as e:
        logger.warning(f"Could not invalidate cache pattern {pattern}: {str(e)}")


def invalidate_reports_cache():
    invalidate_cache_pattern(REPORTS_CACHE_PREFIX)
