from app.repositories.common.cache import CacheRepository, cache_key

__all__ = ["CacheRepository", "cache_key"]
