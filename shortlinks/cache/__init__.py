from shortlinks.cache.dual_cache import CacheTable, DualCache


__all__ = [
    'CacheTable',
    'DualCache',
]
