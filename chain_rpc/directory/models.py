# directory/models.py
# Chainlist record types. Field names follow the feed (camelCase) on the wire
# and snake_case in Python; from_dict/to_dict convert between the two.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class RpcEndpoint:
    url: str
    tracking: str = ""

    @staticmethod
    def from_value(entry: Any) -> "RpcEndpoint":
        # RPC entries can be strings or objects with 'url' and maybe 'tracking' fields.
        if isinstance(entry, str):
            return RpcEndpoint(url=entry.strip())
        if isinstance(entry, dict):
            return RpcEndpoint(url=_str(entry.get("url")).strip(), tracking=_str(entry.get("tracking")))
        return RpcEndpoint(url="")

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "tracking": self.tracking}


@dataclass(frozen=True)
class NativeCurrency:
    name: str = ""
    symbol: str = ""
    decimals: int = 0

    @staticmethod
    def from_dict(d: Any) -> "NativeCurrency":
        if not isinstance(d, dict):
            return NativeCurrency()
        decimals = d.get("decimals")
        return NativeCurrency(
            name=_str(d.get("name")),
            symbol=_str(d.get("symbol")),
            decimals=decimals if isinstance(decimals, int) and not isinstance(decimals, bool) else 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "symbol": self.symbol, "decimals": self.decimals}


@dataclass(frozen=True)
class Explorer:
    name: str = ""
    url: str = ""
    standard: str = ""

    @staticmethod
    def from_value(entry: Any) -> "Explorer":
        # Explorer entries can be strings or objects with 'url'
        if isinstance(entry, str):
            return Explorer(url=entry.strip())
        if isinstance(entry, dict):
            return Explorer(
                name=_str(entry.get("name")),
                url=_str(entry.get("url")),
                standard=_str(entry.get("standard")),
            )
        return Explorer()

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url, "standard": self.standard}


@dataclass(frozen=True)
class ChainRecord:
    chain_id: int
    name: str = ""
    chain: str = ""
    short_name: str = ""
    chain_slug: str = ""
    native_currency: NativeCurrency = field(default_factory=NativeCurrency)
    rpc: Tuple[RpcEndpoint, ...] = ()
    explorers: Tuple[Explorer, ...] = ()

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ChainRecord":
        """Build a record from a feed entry or a cached artifact entry.

        Only ``chainId`` is required; every other field may be absent and
        falls back to an empty value. Raises ValueError when ``chainId`` is
        missing or not an integer.
        """
        if not isinstance(d, dict):
            raise ValueError(f"chain entry must be an object, got {type(d).__name__}")
        chain_id = d.get("chainId")
        if not isinstance(chain_id, int) or isinstance(chain_id, bool) or chain_id < 0:
            raise ValueError(f"invalid chainId: {chain_id!r}")
        return ChainRecord(
            chain_id=chain_id,
            name=_str(d.get("name")),
            chain=_str(d.get("chain")),
            short_name=_str(d.get("shortName")),
            chain_slug=_str(d.get("chainSlug")),
            native_currency=NativeCurrency.from_dict(d.get("nativeCurrency")),
            rpc=tuple(RpcEndpoint.from_value(e) for e in (d.get("rpc") or []) if e is not None),
            explorers=tuple(Explorer.from_value(e) for e in (d.get("explorers") or []) if e is not None),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "chain": self.chain,
            "rpc": [r.to_dict() for r in self.rpc],
            "nativeCurrency": self.native_currency.to_dict(),
            "shortName": self.short_name,
            "chainId": self.chain_id,
            "explorers": [e.to_dict() for e in self.explorers],
            "chainSlug": self.chain_slug,
        }

    def aliases(self) -> List[str]:
        """Raw (un-normalized) lookup names: name, shortName, chainSlug."""
        return [a for a in (self.name, self.short_name, self.chain_slug) if a]

    def rpc_urls(self) -> List[str]:
        return [r.url for r in self.rpc if r.url]
