# directory/stream.py
# Streaming reads of the cache artifact.
#
# The artifact holds every chain record and can run to tens of MB, so single
# lookups walk it as a stream of parser events instead of json.load()-ing
# the whole thing:
#   - find_by_id() materializes exactly one record
#   - load_name_index() materializes only the small byName section

from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, Optional, Tuple

import ijson
from ijson.common import ObjectBuilder

from ..errors import CacheIOFailed, ChainNotFound
from ..log import get_logger
from .indexer import BY_ID_KEY, BY_NAME_KEY
from .models import ChainRecord

log = get_logger(__name__)

_OPENERS = ("start_map", "start_array")
_CLOSERS = ("end_map", "end_array")

Event = Tuple[str, Any]


class TokenStream:
    """
    Pull parser over a JSON document.

    next()        one structural event, as (event, value)
    expect(kind)  next() that must be of the given kind
    skip_value()  consume one complete value without building it
    read_value()  consume one complete value and return it as Python data
    """

    def __init__(self, fp: BinaryIO) -> None:
        self._events: Iterator[Event] = ijson.basic_parse(fp, use_float=True)

    def next(self) -> Event:
        try:
            return next(self._events)
        except StopIteration:
            raise ijson.IncompleteJSONError("unexpected end of document") from None

    def expect(self, kind: str) -> Any:
        event, value = self.next()
        if event != kind:
            raise ijson.JSONError(f"expected {kind}, got {event}")
        return value

    def skip_value(self) -> None:
        depth = 0
        while True:
            event, _ = self.next()
            if event in _OPENERS:
                depth += 1
            elif event in _CLOSERS:
                depth -= 1
            if depth == 0:
                return

    def read_value(self) -> Any:
        builder = ObjectBuilder()
        depth = 0
        while True:
            event, value = self.next()
            builder.event(event, value)
            if event in _OPENERS:
                depth += 1
            elif event in _CLOSERS:
                depth -= 1
            if depth == 0:
                return builder.value

    def keys(self) -> Iterator[str]:
        """Iterate the keys of the object the stream is positioned on.

        The caller must consume (read or skip) each key's value before asking
        for the next key.
        """
        self.expect("start_map")
        while True:
            event, value = self.next()
            if event == "end_map":
                return
            if event != "map_key":
                raise ijson.JSONError(f"expected map_key, got {event}")
            yield value

    def seek_section(self, name: str) -> bool:
        """Advance to the value of top-level key `name`. False if absent."""
        for key in self.keys():
            if key == name:
                return True
            self.skip_value()
        return False


def _open(path: Path) -> BinaryIO:
    try:
        return open(path, "rb")
    except OSError as e:
        raise CacheIOFailed(path, f"failed to open cache file: {e}") from e


def find_by_id(path: Path, chain_id: int) -> ChainRecord:
    """Locate one chain in the byId section without decoding the rest."""
    with _open(path) as fp:
        stream = TokenStream(fp)
        try:
            if not stream.seek_section(BY_ID_KEY):
                raise ChainNotFound(chain_id=chain_id)
            for key in stream.keys():
                if not (key.isascii() and key.isdigit()):
                    log.debug(f"[lookup] skipping non-numeric byId key {key!r}")
                    stream.skip_value()
                    continue
                if int(key) != chain_id:
                    stream.skip_value()
                    continue
                raw = stream.read_value()
                try:
                    return ChainRecord.from_dict(raw)
                except ValueError as e:
                    raise CacheIOFailed(path, f"failed to decode chain data: {e}") from e
        except ijson.JSONError as e:
            raise CacheIOFailed(path, f"failed to read cache file: {e}") from e
        except OSError as e:
            raise CacheIOFailed(path, f"failed to read cache file: {e}") from e
    raise ChainNotFound(chain_id=chain_id)


def load_name_index(path: Path) -> Dict[str, int]:
    """Materialize only the byName section (alias -> chainId)."""
    with _open(path) as fp:
        stream = TokenStream(fp)
        try:
            if not stream.seek_section(BY_NAME_KEY):
                return {}
            section: Optional[Any] = stream.read_value()
        except (ijson.JSONError, OSError) as e:
            raise CacheIOFailed(path, f"failed to read cache file: {e}") from e
    if not isinstance(section, dict):
        raise CacheIOFailed(path, "byName section is not an object")
    return {
        str(alias): cid
        for alias, cid in section.items()
        if isinstance(cid, int) and not isinstance(cid, bool)
    }
