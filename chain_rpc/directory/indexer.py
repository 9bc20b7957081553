# directory/indexer.py
# Builds the two lookup tables persisted in the cache artifact:
#   byId   chainId -> full ChainRecord
#   byName normalized alias (name / shortName / chainSlug) -> chainId

from __future__ import annotations

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .models import ChainRecord

BY_ID_KEY = "byId"
BY_NAME_KEY = "byName"


def normalize_chain_name(name: str) -> str:
    return name.strip().lower().replace(" ", "-")


@dataclass
class DirectoryIndex:
    by_id: Dict[int, ChainRecord] = field(default_factory=dict)
    by_name: Dict[str, int] = field(default_factory=dict)

    def to_json(self) -> str:
        doc = {
            BY_ID_KEY: {str(cid): rec.to_dict() for cid, rec in self.by_id.items()},
            BY_NAME_KEY: dict(self.by_name),
        }
        return json.dumps(doc, separators=(",", ":"))

    def __len__(self) -> int:
        return len(self.by_id)


class IndexBuilder:
    """
    Private, lock-guarded arena the indexing workers write into.

    Collisions are resolved by feed position (earlier entry wins), so the
    outcome does not depend on which worker runs first.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: Dict[int, Tuple[int, ChainRecord]] = {}
        self._by_name: Dict[str, Tuple[int, int]] = {}

    def add(self, position: int, record: ChainRecord) -> None:
        aliases = {normalize_chain_name(a) for a in record.aliases()}
        aliases.discard("")
        with self._lock:
            current = self._by_id.get(record.chain_id)
            if current is None or position < current[0]:
                self._by_id[record.chain_id] = (position, record)
            for alias in aliases:
                taken = self._by_name.get(alias)
                if taken is None or position < taken[0]:
                    self._by_name[alias] = (position, record.chain_id)

    def publish(self) -> DirectoryIndex:
        with self._lock:
            by_id = {cid: rec for cid, (_, rec) in sorted(self._by_id.items())}
            by_name = {alias: cid for alias, (_, cid) in sorted(self._by_name.items())}
        return DirectoryIndex(by_id=by_id, by_name=by_name)


def build_index(records: Iterable[ChainRecord], workers: int = 8) -> DirectoryIndex:
    builder = IndexBuilder()
    indexed: List[Tuple[int, ChainRecord]] = list(enumerate(records))
    if not indexed:
        return builder.publish()
    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        # list() drains the map so worker exceptions surface here
        list(executor.map(lambda item: builder.add(*item), indexed))
    return builder.publish()
