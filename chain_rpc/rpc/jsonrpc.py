# rpc/jsonrpc.py
from __future__ import annotations

from typing import Any, Dict, Optional

# Minimal EVM JSON-RPC call used as the identity check
ETH_CHAIN_ID = {
    "jsonrpc": "2.0",
    "method": "eth_chainId",
    "params": [],
    "id": 1,
}


_PREFIX_BASES = {"0x": 16, "0o": 8, "0b": 2}
MAX_CHAIN_ID = 2**64 - 1


def build_chain_id_request() -> Dict[str, Any]:
    return {**ETH_CHAIN_ID, "params": []}


def parse_chain_id(value: Any) -> Optional[int]:
    """Parse an unsigned 64-bit integer string with its base taken from the prefix.

    '0x89' is hex, '0o17' and legacy '017' are octal, '0b1' is binary and
    anything else is decimal. Signs, whitespace and digit separators are
    rejected, as is anything that is not a string.
    """
    if not isinstance(value, str) or not value.isascii() or not value.isalnum():
        return None
    base, digits = _PREFIX_BASES.get(value[:2].lower(), 0), value[2:]
    if not base:
        if len(value) > 1 and value[0] == "0":
            base, digits = 8, value[1:]
        else:
            base, digits = 10, value
    if not digits or _PREFIX_BASES.get(digits[:2].lower()) == base:
        return None
    try:
        chain_id = int(digits, base)
    except ValueError:
        return None
    return chain_id if chain_id <= MAX_CHAIN_ID else None


def is_expected_chain(response: Any, expected_chain_id: int) -> bool:
    """True iff `response` is a successful eth_chainId reply for the expected chain."""
    if not isinstance(response, dict):
        return False
    if response.get("error") is not None:
        return False
    return parse_chain_id(response.get("result")) == expected_chain_id
