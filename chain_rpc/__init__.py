"""
chain_rpc: find a working JSON-RPC endpoint for any chain listed on chainlist.org.

Usage (Python):
    from chain_rpc import Settings, find_endpoint, get_chain_data
    rec = get_chain_data("137")
    print(rec.name, find_endpoint("polygon", Settings.load(probe_timeout=1.0)))
"""

__version__ = "0.1.1"

from .config.settings import Settings
from .errors import (
    AllEndpointsFailing,
    AmbiguousName,
    CacheIOFailed,
    ChainNotFound,
    ChainRpcError,
    FeedDecodeFailed,
    FeedFetchFailed,
    NoKnownEndpoints,
)
from .lookup import (
    build_cache,
    clean_cache,
    extract_rpc_urls,
    fetch_by_id,
    fetch_by_name,
    find_endpoint,
    find_endpoints,
    get_chain_data,
)

__all__ = [
    "AllEndpointsFailing",
    "AmbiguousName",
    "CacheIOFailed",
    "ChainNotFound",
    "ChainRpcError",
    "FeedDecodeFailed",
    "FeedFetchFailed",
    "NoKnownEndpoints",
    "Settings",
    "build_cache",
    "clean_cache",
    "extract_rpc_urls",
    "fetch_by_id",
    "fetch_by_name",
    "find_endpoint",
    "find_endpoints",
    "get_chain_data",
]
