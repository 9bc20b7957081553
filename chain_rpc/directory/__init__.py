from .cache import DirectoryCache
from .indexer import DirectoryIndex, build_index, normalize_chain_name
from .models import ChainRecord, Explorer, NativeCurrency, RpcEndpoint

__all__ = [
    "ChainRecord",
    "DirectoryCache",
    "DirectoryIndex",
    "Explorer",
    "NativeCurrency",
    "RpcEndpoint",
    "build_index",
    "normalize_chain_name",
]
