"""
Caching for master data lookups: breeds, species, genders, colours,
acquisition locations and inventory types/units.

These lists feed every registration form dropdown and change rarely, so they
are served from the cache and invalidated whenever a row is saved or deleted.
"""
from django.core.cache import cache
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from .cache_signals import is_suspended

logger = logging.getLogger(__name__)

MASTER_LIST_KEY_PREFIX = 'master_list:'

# Master data: 5 minutes
MASTER_DATA_CACHE_TTL = 300

# Model class name -> master list name
MASTER_MODELS = {
    'Breed': 'breeds',
    'Species': 'species',
    'Gender': 'genders',
    'Color': 'colors',
    'Location': 'locations',
    'InventoryType': 'inventory_types',
    'InventoryUnit': 'inventory_units',
}


def get_master_list_cache_key(name: str) -> str:
    """Get cache key for a master data list"""
    return f"{MASTER_LIST_KEY_PREFIX}{name}"


def get_cached_master_list(name, queryset, serializer_class, force_refresh=False, ttl: int = None):
    """
    Return serialized master data, reading through the cache.

    ``force_refresh`` skips the cached copy and repopulates it.
    """
    cache_key = get_master_list_cache_key(name)
    if not force_refresh:
        try:
            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache hit for master list: {name}")
                return cached_data
        except Exception as e:
            logger.warning(f"Cache unavailable for master list {name}: {e}")

    data = serializer_class(queryset, many=True).data
    try:
        cache.set(cache_key, list(data), ttl or MASTER_DATA_CACHE_TTL)
        logger.debug(f"Cached master list: {name} ({len(data)} rows)")
    except Exception as e:
        logger.warning(f"Unable to cache master list {name}: {e}")
    return data


def invalidate_master_list(name: str):
    """Drop a cached master data list"""
    try:
        cache.delete(get_master_list_cache_key(name))
        logger.debug(f"Invalidated master list cache: {name}")
    except Exception as e:
        logger.warning(f"Could not invalidate master list {name}: {e}")


@receiver([post_save, post_delete])
def invalidate_master_data_cache(sender, instance, **kwargs):
    """Invalidate the cached list when a master data row changes"""
    if is_suspended():
        return
    name = MASTER_MODELS.get(sender.__name__)
    if name is None:
        return
    if not sender.__module__.startswith('gaushala.'):
        return
    invalidate_master_list(name)
