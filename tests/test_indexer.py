import json

import pytest

from chain_rpc.directory.fetcher import decode_records
from chain_rpc.directory.indexer import build_index, normalize_chain_name
from chain_rpc.directory.models import ChainRecord


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Ethereum Mainnet", "ethereum-mainnet"),
        ("  Arbitrum One ", "arbitrum-one"),
        ("OP", "op"),
        ("already-normal", "already-normal"),
        ("   ", ""),
    ],
)
def test_normalize_chain_name(raw, expected):
    assert normalize_chain_name(raw) == expected


def test_every_alias_is_indexed(index):
    assert index.by_name["ethereum-mainnet"] == 1
    assert index.by_name["eth"] == 1
    assert index.by_name["ethereum"] == 1
    assert index.by_name["xdai-chain"] == 100
    assert index.by_name["arbitrum-on-xdai"] == 200


def test_name_index_only_points_at_indexed_ids(index):
    assert set(index.by_name.values()) <= set(index.by_id)


def test_records_are_keyed_by_chain_id(index, records):
    assert len(index) == len(records)
    for rec in records:
        assert index.by_id[rec.chain_id] is rec


def test_duplicate_chain_id_keeps_earliest_feed_entry():
    recs = [ChainRecord(chain_id=7, name=f"Seven {i}") for i in range(50)]
    index = build_index(recs, workers=8)
    assert index.by_id[7].name == "Seven 0"


def test_alias_collision_keeps_earliest_feed_entry():
    recs = [ChainRecord(chain_id=i, name=f"Chain {i}", short_name="dup") for i in range(1, 40)]
    index = build_index(recs, workers=8)
    assert index.by_name["dup"] == 1


def test_blank_aliases_are_not_indexed():
    index = build_index([ChainRecord(chain_id=3, name="   ", short_name="x")])
    assert "" not in index.by_name
    assert index.by_name == {"x": 3}


def test_empty_feed_builds_empty_index():
    index = build_index([])
    assert len(index) == 0
    assert index.by_name == {}


def test_decode_records_skips_malformed_entries(feed):
    raw = feed + [{"name": "no id"}, "garbage", {"chainId": "12"}]
    assert len(decode_records(raw)) == len(feed)


def test_to_json_has_both_sections(index):
    doc = json.loads(index.to_json())
    assert set(doc) == {"byId", "byName"}
    assert doc["byId"]["42161"]["shortName"] == "arb1"
    assert doc["byName"]["arb1"] == 42161
