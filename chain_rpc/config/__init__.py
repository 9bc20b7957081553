from .paths import CacheLayout, user_cache_root
from .settings import CACHE_TTL, CHAINS_DATA_URL, Settings

__all__ = ["CACHE_TTL", "CHAINS_DATA_URL", "CacheLayout", "Settings", "user_cache_root"]
