# directory/resolver.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping

from ..errors import AmbiguousName, ChainNotFound
from ..log import get_logger
from .indexer import normalize_chain_name
from .models import ChainRecord
from .stream import find_by_id, load_name_index

log = get_logger(__name__)


def candidate_keys(normalized: str) -> List[str]:
    """Exact-match keys tried in order before falling back to substring search."""
    return [normalized, f"ethereum-{normalized}", f"{normalized}-mainnet"]


def resolve_chain_id(name_index: Mapping[str, int], raw_name: str) -> int:
    """
    Resolve a free-text chain name against the alias table.

    Tiers, first hit wins:
      1. exact alias
      2. "ethereum-<name>"   (e.g. sepolia -> ethereum-sepolia)
      3. "<name>-mainnet"    (e.g. ethereum -> ethereum-mainnet)
      4. every alias containing <name>; must be exactly one
    """
    normalized = normalize_chain_name(raw_name)
    if not normalized:
        raise ChainNotFound(name=raw_name)

    for key in candidate_keys(normalized):
        if key in name_index:
            log.debug(f"[resolve] '{raw_name}' matched alias '{key}'")
            return name_index[key]

    matches = [alias for alias in name_index if normalized in alias]
    if not matches:
        raise ChainNotFound(name=raw_name)
    if len(matches) > 1:
        raise AmbiguousName(raw_name, matches)
    log.debug(f"[resolve] '{raw_name}' partially matched alias '{matches[0]}'")
    return name_index[matches[0]]


def find_by_name(path: Path, raw_name: str) -> ChainRecord:
    name_index: Dict[str, int] = load_name_index(path)
    chain_id = resolve_chain_id(name_index, raw_name)
    return find_by_id(path, chain_id)
