import pytest

from chain_rpc import lookup
from chain_rpc.directory.models import ChainRecord, RpcEndpoint
from chain_rpc.errors import AmbiguousName, ChainNotFound, NoKnownEndpoints


def _record(*urls):
    return ChainRecord(chain_id=1, name="Test", rpc=tuple(RpcEndpoint(url=u) for u in urls))


def test_extract_rpc_urls_keeps_feed_order_and_drops_blanks():
    rec = _record("https://a", "", "wss://b", "http://c", "ws://d")
    assert lookup.extract_rpc_urls(rec) == ["https://a", "wss://b", "http://c", "ws://d"]


def test_extract_rpc_urls_filters():
    rec = _record("https://a", "wss://b", "http://c", "ws://d")
    assert lookup.extract_rpc_urls(rec, ws_only=True) == ["wss://b", "ws://d"]
    assert lookup.extract_rpc_urls(rec, https_only=True) == ["https://a"]
    assert lookup.extract_rpc_urls(rec, ws_only=True, https_only=True) == []


def test_get_chain_data_by_id_and_name(built_cache):
    assert lookup.get_chain_data("42161", built_cache.settings).name == "Arbitrum One"
    assert lookup.get_chain_data("Arbitrum One", built_cache.settings).chain_id == 42161


def test_get_chain_data_errors(built_cache):
    with pytest.raises(ChainNotFound):
        lookup.get_chain_data("123456789", built_cache.settings)
    with pytest.raises(AmbiguousName):
        lookup.get_chain_data("xdai", built_cache.settings)


def test_chain_without_endpoints(built_cache):
    with pytest.raises(NoKnownEndpoints):
        lookup.candidate_urls("aox", built_cache.settings)


def test_find_endpoints_probes_candidates(built_cache, monkeypatch):
    seen = {}

    def fake_all(urls, chain_id, timeout):
        seen.update(urls=urls, chain_id=chain_id, timeout=timeout)
        return urls[:1]

    monkeypatch.setattr(lookup, "find_all_working", fake_all)
    assert lookup.find_endpoints("gnosis", built_cache.settings, https_only=True) == ["https://rpc.gnosischain.com"]
    assert seen == {"urls": ["https://rpc.gnosischain.com"], "chain_id": 100, "timeout": 0.2}


def test_find_endpoint_probes_candidates(built_cache, monkeypatch):
    monkeypatch.setattr(lookup, "find_random_working", lambda urls, chain_id, timeout: urls[-1])
    assert lookup.find_endpoint("1", built_cache.settings, ws_only=True) == "wss://ethereum-rpc.publicnode.com"


def test_build_and_clean_cache(settings, feed_session, monkeypatch):
    monkeypatch.setattr("chain_rpc.directory.fetcher.requests.get", feed_session.get)
    assert lookup.build_cache(settings) == 9
    assert settings.cache_file.exists()
    lookup.clean_cache(settings)
    assert not settings.cache_file.exists()
