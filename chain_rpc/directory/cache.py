# directory/cache.py
# On-disk chain directory cache.
#
# One JSON artifact per cache dir, rebuilt from the Chainlist feed when it is
# missing, older than the TTL, or a rebuild is forced. A failed rebuild falls
# back to whatever artifact is already on disk. Writes go to a temp file that
# is then os.replace()d into place, so readers only ever see a complete file.

from __future__ import annotations

import os
import threading
import time
from datetime import timedelta
from pathlib import Path
from typing import Dict, Optional

import requests

from ..config.settings import Settings
from ..errors import CacheIOFailed, ChainRpcError
from ..log import get_logger
from . import resolver, stream
from .fetcher import decode_records, fetch_feed
from .indexer import DirectoryIndex, build_index
from .models import ChainRecord

log = get_logger(__name__)

# One lock per artifact path, shared by every DirectoryCache in the process
_PATH_LOCKS: Dict[str, threading.RLock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = os.path.abspath(path)
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = _PATH_LOCKS[key] = threading.RLock()
        return lock


class DirectoryCache:
    """
    Owner of the cached Directory Index.

    Mutations (rebuild, clean) are serialized by a per-path lock. Lookups call
    ensure_fresh() first and then stream the artifact; they never block on a
    concurrent writer because the artifact is only ever swapped in whole.
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or Settings.load()
        self.session = session
        self.path = self.settings.cache_file
        self.lock = _lock_for(self.path)

    # -------------- Staleness --------------

    def age(self) -> Optional[timedelta]:
        """Age of the artifact by mtime, or None when there is none."""
        try:
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheIOFailed(self.path, f"failed to stat cache file: {e}") from e
        return timedelta(seconds=max(0.0, time.time() - mtime))

    def exists(self) -> bool:
        return self.path.is_file()

    def is_fresh(self) -> bool:
        age = self.age()
        return age is not None and age < self.settings.cache_ttl

    def ensure_fresh(self, force_rebuild: Optional[bool] = None) -> None:
        force = self.settings.force_rebuild if force_rebuild is None else force_rebuild
        with self.lock:
            if not force and self.is_fresh():
                return

            try:
                self._rebuild()
            except ChainRpcError as e:
                # If we failed to build the cache but have an old one, use it
                if self.exists():
                    log.warning(f"Warning: Failed to update cache ({e}), using existing cache")
                    return
                raise

    # -------------- Mutations --------------

    def build(self) -> DirectoryIndex:
        with self.lock:
            return self._rebuild()

    def clean(self) -> None:
        with self.lock:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                raise CacheIOFailed(self.path, f"failed to remove cache file: {e}") from e
        log.info("Cache cleaned successfully")

    def _rebuild(self) -> DirectoryIndex:
        log.info("Fetching and building chain data cache...")
        raw = fetch_feed(self.settings.feed_url, self.settings.feed_timeout, session=self.session)
        index = build_index(decode_records(raw), workers=self.settings.index_workers)
        self.write(index)
        log.info(f"Cache built successfully with {len(index)} chains")
        return index

    def write(self, index: DirectoryIndex) -> None:
        """Persist `index`, fully replacing the current artifact."""
        payload = index.to_json()
        with self.lock:
            layout = self.settings.layout
            tmp = layout.temp_file()
            try:
                layout.ensure_dir()
                tmp.write_text(payload, encoding="utf-8")
                os.replace(tmp, self.path)
            except OSError as e:
                tmp.unlink(missing_ok=True)
                raise CacheIOFailed(self.path, f"failed to write cache: {e}") from e

    # -------------- Lookups --------------

    def find_by_id(self, chain_id: int) -> ChainRecord:
        self.ensure_fresh()
        return stream.find_by_id(self.path, chain_id)

    def find_by_name(self, name: str) -> ChainRecord:
        self.ensure_fresh()
        return resolver.find_by_name(self.path, name)
