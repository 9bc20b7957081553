# directory/fetcher.py
# Downloads the Chainlist RPC catalog and decodes it into ChainRecords.
# No retries at this layer: a failed pull is reported to the cache, which
# decides whether a stale artifact can stand in.

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from ..errors import FeedDecodeFailed, FeedFetchFailed
from ..log import get_logger
from .models import ChainRecord

log = get_logger(__name__)


def fetch_feed(url: str, timeout: float, session: Optional[requests.Session] = None) -> List[Dict[str, Any]]:
    """GET the feed and return the raw JSON array of chain entries."""
    http = session or requests
    log.info(f"[feed] fetching {url}")
    try:
        resp = http.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FeedFetchFailed(url, str(e)) from e

    try:
        if resp.status_code != 200:
            raise FeedFetchFailed(url, f"HTTP {resp.status_code}", status=resp.status_code)
        try:
            payload = resp.json()
        except ValueError as e:
            raise FeedDecodeFailed(url, str(e)) from e
    finally:
        resp.close()

    if not isinstance(payload, list):
        raise FeedDecodeFailed(url, f"expected a JSON array, got {type(payload).__name__}")
    return payload


def decode_records(raw: List[Any]) -> List[ChainRecord]:
    records: List[ChainRecord] = []
    skipped = 0
    for entry in raw:
        try:
            records.append(ChainRecord.from_dict(entry))
        except ValueError as e:
            skipped += 1
            log.debug(f"[feed] skipping entry: {e}")
    if skipped:
        log.info(f"[feed] skipped {skipped} malformed chain entr{'y' if skipped == 1 else 'ies'}")
    return records
