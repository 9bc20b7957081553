"""Pytest configuration and shared fixtures."""

import copy
import json
from typing import Any, Dict, List

import pytest

from chain_rpc.config.settings import Settings
from chain_rpc.directory.cache import DirectoryCache
from chain_rpc.directory.fetcher import decode_records
from chain_rpc.directory.indexer import build_index

FEED: List[Dict[str, Any]] = [
    {
        "name": "Ethereum Mainnet",
        "chain": "ETH",
        "rpc": [
            {"url": "https://eth.llamarpc.com", "tracking": "none"},
            {"url": "wss://ethereum-rpc.publicnode.com", "tracking": "none"},
            {"url": "", "tracking": "none"},
            {"url": "http://eth.example.org", "tracking": "yes"},
        ],
        "nativeCurrency": {"name": "Ether", "symbol": "ETH", "decimals": 18},
        "shortName": "eth",
        "chainId": 1,
        "explorers": [{"name": "etherscan", "url": "https://etherscan.io", "standard": "EIP3091"}],
        "chainSlug": "ethereum",
    },
    {
        "name": "OP Mainnet",
        "chain": "ETH",
        "rpc": [{"url": "https://mainnet.optimism.io", "tracking": "none"}],
        "nativeCurrency": {"name": "Ether", "symbol": "ETH", "decimals": 18},
        "shortName": "oeth",
        "chainId": 10,
        "explorers": [],
        "chainSlug": "optimism",
    },
    {
        "name": "Gnosis",
        "chain": "GNO",
        "rpc": ["https://rpc.gnosischain.com", "wss://rpc.gnosischain.com/wss"],
        "nativeCurrency": {"name": "xDAI", "symbol": "XDAI", "decimals": 18},
        "shortName": "gno",
        "chainId": 100,
        "chainSlug": "xdai-chain",
    },
    {
        "name": "Arbitrum on xDai",
        "chain": "AOX",
        "rpc": [],
        "nativeCurrency": {"name": "xDAI", "symbol": "xDAI", "decimals": 18},
        "shortName": "aox",
        "chainId": 200,
    },
    {
        "name": "Gnosis Chiado Testnet",
        "chain": "GNO",
        "rpc": [{"url": "https://rpc.chiadochain.net", "tracking": "none"}],
        "shortName": "chi",
        "chainId": 10200,
    },
    {
        "name": "Ethereum Holesky",
        "chain": "ETH",
        "rpc": [{"url": "https://holesky.drpc.org", "tracking": "none"}],
        "shortName": "hol",
        "chainId": 17000,
    },
    {
        "name": "Arbitrum One",
        "chain": "ETH",
        "rpc": [{"url": "https://arb1.arbitrum.io/rpc", "tracking": "none"}],
        "shortName": "arb1",
        "chainId": 42161,
        "chainSlug": "arbitrum",
    },
    {
        "name": "Sepolia",
        "chain": "ETH",
        "rpc": [{"url": "https://rpc.sepolia.org", "tracking": "none"}],
        "shortName": "sep",
        "chainId": 11155111,
        "chainSlug": "sepolia",
    },
    {
        "name": "Ethereum Sepolia",
        "chain": "ETH",
        "rpc": [{"url": "https://sepolia.example.org", "tracking": "none"}],
        "shortName": "esep",
        "chainId": 999999,
    },
]


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, json_error: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._json_error = json_error
        self.closed = False

    def json(self):
        if self._json_error:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return copy.deepcopy(self._payload)

    def iter_content(self, chunk_size=1):
        body = b"<html>" if self._json_error else json.dumps(self._payload).encode()
        for i in range(0, len(body), chunk_size):
            yield body[i : i + chunk_size]

    def close(self):
        self.closed = True


class FakeSession:
    """Stands in for requests.Session; replies from a queue or raises."""

    def __init__(self, response=None, error: Exception = None):
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def _reply(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        return self._reply("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._reply("POST", url, **kwargs)


@pytest.fixture
def feed():
    return copy.deepcopy(FEED)


@pytest.fixture
def records(feed):
    return decode_records(feed)


@pytest.fixture
def index(records):
    return build_index(records, workers=4)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    for var in (
        "CHAIN_RPC_FEED_URL",
        "CHAIN_RPC_CACHE_DIR",
        "CHAIN_RPC_CACHE_TTL_DAYS",
        "CHAIN_RPC_FEED_TIMEOUT",
        "CHAIN_RPC_PROBE_TIMEOUT",
        "CHAIN_RPC_INDEX_WORKERS",
        "CHAIN_RPC_CONFIG",
    ):
        monkeypatch.delenv(var, raising=False)
    return Settings(cache_dir=tmp_path / "cache", feed_url="https://feed.test/rpcs.json")


@pytest.fixture
def feed_session(feed):
    return FakeSession(FakeResponse(200, feed))


@pytest.fixture
def built_cache(settings, index, feed_session):
    """A DirectoryCache whose artifact is already on disk and fresh."""
    cache = DirectoryCache(settings, session=feed_session)
    cache.write(index)
    return cache
