# errors.py
# Error taxonomy shared by the directory cache, the name resolver, the prober
# and the CLI. Endpoint probe failures are never raised; they are dropped from
# the result set instead.

from __future__ import annotations

from typing import Iterable, List, Optional


class ChainRpcError(Exception):
    """Base class for every error this package raises on purpose."""


class ChainNotFound(ChainRpcError):
    def __init__(self, chain_id: Optional[int] = None, name: Optional[str] = None):
        self.chain_id = chain_id
        self.name = name
        if name is not None:
            msg = f"chain not found for name '{name}'"
        elif chain_id is not None:
            msg = f"chain {chain_id} does not exist or is not known at `chainlist.org`"
        else:
            msg = "specified chain does not exist or is not known at `chainlist.org`"
        super().__init__(msg)


class AmbiguousName(ChainRpcError):
    def __init__(self, name: str, matches: Iterable[str]):
        self.name = name
        self.matches: List[str] = sorted(matches)
        lines = [f"found multiple chains matching '{name}':"]
        lines += [f"- {m}" for m in self.matches]
        lines.append("Please specify a more precise name")
        super().__init__("\n".join(lines))


class AllEndpointsFailing(ChainRpcError):
    def __init__(self, tried: int = 0):
        self.tried = tried
        super().__init__(
            "all known rpc urls are failing. Try searching for it manually or increase the timeout"
        )


class NoKnownEndpoints(ChainRpcError):
    def __init__(self, chain_id: Optional[int] = None):
        self.chain_id = chain_id
        super().__init__("no known rpc urls for this chain at `chainlist.org`")


class FeedFetchFailed(ChainRpcError):
    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        super().__init__(f"failed to fetch chains data from {url}: {reason}")


class FeedDecodeFailed(ChainRpcError):
    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"failed to parse chains data from {url}: {reason}")


class CacheIOFailed(ChainRpcError):
    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"cache file {path}: {reason}")


class ParameterError(ChainRpcError):
    """Bad command line usage. The CLI prints usage after the message."""

    def __init__(self, message: str, command: Optional[str] = None):
        self.command = command
        super().__init__(message)
