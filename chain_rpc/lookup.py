# lookup.py
# ------------------------------------------------------------
# Entry points used by the CLI (and importable from Python):
#
#   from chain_rpc.lookup import get_chain_data, find_endpoint
#   rec = get_chain_data("sepolia")        # or "11155111"
#   print(find_endpoint("polygon"))        # one probed, working RPC URL
#
# Settings carry the per-invocation flags (verbose, force_rebuild); there is
# no process-wide state beyond the per-path cache lock.
# ------------------------------------------------------------

from __future__ import annotations

from typing import List, Optional

from .config.settings import Settings
from .directory.cache import DirectoryCache
from .directory.models import ChainRecord
from .errors import NoKnownEndpoints
from .rpc.prober import find_all_working, find_random_working
from .rpc.transports import is_https_url, is_websocket_url


def _cache(settings: Optional[Settings]) -> DirectoryCache:
    return DirectoryCache(settings or Settings.load())


def fetch_by_id(chain_id: int, settings: Optional[Settings] = None) -> ChainRecord:
    return _cache(settings).find_by_id(chain_id)


def fetch_by_name(name: str, settings: Optional[Settings] = None) -> ChainRecord:
    return _cache(settings).find_by_name(name)


def get_chain_data(identifier: str, settings: Optional[Settings] = None) -> ChainRecord:
    """Numeric identifiers are chain IDs; anything else is looked up by name."""
    key = identifier.strip()
    if key.isascii() and key.isdigit():
        return fetch_by_id(int(key), settings)
    return fetch_by_name(identifier, settings)


def clean_cache(settings: Optional[Settings] = None) -> None:
    _cache(settings).clean()


def build_cache(settings: Optional[Settings] = None) -> int:
    """Rebuild unconditionally; returns the number of chains indexed."""
    return len(_cache(settings).build())


def extract_rpc_urls(record: ChainRecord, ws_only: bool = False, https_only: bool = False) -> List[str]:
    urls = []
    for url in record.rpc_urls():
        if ws_only and not is_websocket_url(url):
            continue
        if https_only and not is_https_url(url):
            continue
        urls.append(url)
    return urls


def candidate_urls(
    identifier: str,
    settings: Optional[Settings] = None,
    ws_only: bool = False,
    https_only: bool = False,
) -> tuple[ChainRecord, List[str]]:
    record = get_chain_data(identifier, settings)
    urls = extract_rpc_urls(record, ws_only=ws_only, https_only=https_only)
    if not urls:
        raise NoKnownEndpoints(record.chain_id)
    return record, urls


def find_endpoint(
    identifier: str,
    settings: Optional[Settings] = None,
    ws_only: bool = False,
    https_only: bool = False,
) -> str:
    settings = settings or Settings.load()
    record, urls = candidate_urls(identifier, settings, ws_only=ws_only, https_only=https_only)
    return find_random_working(urls, record.chain_id, settings.probe_timeout)


def find_endpoints(
    identifier: str,
    settings: Optional[Settings] = None,
    ws_only: bool = False,
    https_only: bool = False,
) -> List[str]:
    settings = settings or Settings.load()
    record, urls = candidate_urls(identifier, settings, ws_only=ws_only, https_only=https_only)
    return find_all_working(urls, record.chain_id, settings.probe_timeout)
